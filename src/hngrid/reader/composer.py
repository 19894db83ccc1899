"""
DocumentComposer Pipeline
=========================
1. Input : page markup + its final URL (or just a URL, via ``compose_url``).
2. Insert ``<base href=... target="_blank">`` right after ``<head>`` so relative
   asset references keep resolving once the markup is injected elsewhere.
3. Find every ``<link rel="stylesheet">``; fetch all sheets concurrently and
   swap each link for a ``<style>`` block whose relative ``url(...)``
   references are made absolute against the sheet's own URL.
4. Append a containment rule for ``html``/``body`` only.
5. Return a :class:`ComposedDocument`.

NOTE: A sheet that fails to load keeps its original ``<link>``. A page that
fails to load yields a placeholder document with a direct link; composition
itself never raises for network reasons.
"""

from __future__ import annotations

import asyncio
import html
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from hngrid.clients.http import FetchError, PageFetcher, TimeoutFailure
from hngrid.config import fetch as fetch_cfg
from hngrid.outcome import FailureKind, Outcome
from hngrid.urls import resolve_url

from .css import rewrite_css_urls

logger = logging.getLogger(__name__)

_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_STYLESHEET_LINK_RE = re.compile(
    r"""<link\b[^>]*\brel\s*=\s*["']?stylesheet\b[^>]*>""", re.IGNORECASE
)
_HREF_RE = re.compile(r"""\bhref\s*=\s*["']([^"']+)["']""", re.IGNORECASE)

CONTAINMENT_STYLE = "<style>html,body{max-width:100%!important;overflow-x:hidden!important}</style>"
CSS_ACCEPT = "text/css,*/*;q=0.1"


@dataclass(slots=True)
class ComposedDocument:
    """Self-contained markup ready for injection into a sandboxed frame."""

    markup: str
    base_url: str
    inlined: int = 0
    failed_sheets: List[str] = field(default_factory=list)
    placeholder: bool = False
    reason: Optional[FailureKind] = None


@dataclass(slots=True)
class _SheetRef:
    start: int
    end: int
    url: str


def placeholder_document(url: str) -> str:
    """Fallback page offering a direct link when ``url`` could not be loaded."""

    href = html.escape(url, quote=True)
    return (
        "<!DOCTYPE html><html><body style=\"font-family:Verdana,sans-serif;padding:40px;"
        "color:#555;text-align:center\">"
        "<p style=\"font-size:14px;margin-bottom:16px\">Couldn't load this page inline.</p>"
        f"<a href=\"{href}\" target=\"_blank\" rel=\"noopener\" "
        "style=\"color:#ff6600;font-size:13px;font-weight:bold\">Open in new tab &#8599;</a>"
        "</body></html>"
    )


def insert_base(markup: str, base_url: str) -> str:
    base_tag = f'<base href="{html.escape(base_url, quote=True)}" target="_blank">'
    head = _HEAD_OPEN_RE.search(markup)
    if head:
        return f"{markup[:head.end()]}\n{base_tag}{markup[head.end():]}"
    return base_tag + markup


def append_containment(markup: str) -> str:
    head_close = _HEAD_CLOSE_RE.search(markup)
    if head_close:
        return f"{markup[:head_close.start()]}{CONTAINMENT_STYLE}{markup[head_close.start():]}"
    return markup + CONTAINMENT_STYLE


def find_stylesheets(markup: str, base_url: str) -> List[_SheetRef]:
    refs: List[_SheetRef] = []
    for link in _STYLESHEET_LINK_RE.finditer(markup):
        href = _HREF_RE.search(link.group(0))
        if not href:
            continue
        sheet_url = resolve_url(html.unescape(href.group(1)), base_url)
        if sheet_url:
            refs.append(_SheetRef(link.start(), link.end(), sheet_url))
    return refs


class DocumentComposer:
    def __init__(self, fetcher: PageFetcher, *, timeout: float | None = None) -> None:
        self.fetcher = fetcher
        self.timeout = timeout if timeout is not None else fetch_cfg.TIMEOUT

    async def compose_url(self, url: str) -> ComposedDocument:
        """Fetch ``url`` and compose it, or return a placeholder document."""

        try:
            resp = await self.fetcher.get(url, timeout=self.timeout)
        except TimeoutFailure as exc:
            logger.info("Reader fetch timed out: %s", exc)
            return ComposedDocument(placeholder_document(url), url, placeholder=True, reason="timeout")
        except FetchError as exc:
            logger.info("Reader fetch failed: %s", exc)
            return ComposedDocument(placeholder_document(url), url, placeholder=True, reason="network")

        if not resp.ok:
            logger.info("Reader fetch for %s returned HTTP %s", url, resp.status)
            return ComposedDocument(placeholder_document(url), url, placeholder=True, reason="network")

        return await self.compose(resp.text, resp.final_url or url)

    async def compose(self, markup: str, base_url: str) -> ComposedDocument:
        """Build a self-contained document from ``markup`` fetched at ``base_url``."""

        doc = insert_base(markup or "", base_url)
        refs = find_stylesheets(doc, base_url)

        results = await asyncio.gather(
            *(self._fetch_sheet(ref.url) for ref in refs), return_exceptions=True
        )

        pieces: List[str] = []
        cursor = 0
        inlined = 0
        failed: List[str] = []
        for ref, result in zip(refs, results):
            pieces.append(doc[cursor:ref.start])
            if isinstance(result, BaseException):
                logger.error("Unexpected error inlining %s: %s", ref.url, result)
                result = Outcome.negative("network")
            if result.ok:
                pieces.append(f"<style>\n{result.value}\n</style>")
                inlined += 1
            else:
                pieces.append(doc[ref.start:ref.end])
                failed.append(ref.url)
            cursor = ref.end
        pieces.append(doc[cursor:])

        composed = append_containment("".join(pieces))
        logger.info(
            "Composed %s: %d stylesheet(s) inlined, %d left linked", base_url, inlined, len(failed)
        )
        return ComposedDocument(composed, base_url, inlined=inlined, failed_sheets=failed)

    async def _fetch_sheet(self, sheet_url: str) -> Outcome[str]:
        try:
            resp = await self.fetcher.get(sheet_url, timeout=self.timeout, accept=CSS_ACCEPT)
        except TimeoutFailure:
            return Outcome.negative("timeout")
        except FetchError as exc:
            logger.debug("Stylesheet fetch failed: %s", exc)
            return Outcome.negative("network")

        if not resp.ok:
            return Outcome.negative("network")
        if not resp.text:
            return Outcome.negative("miss")
        sheet_base = resp.final_url or sheet_url
        return Outcome.success(rewrite_css_urls(resp.text, sheet_base))


__all__ = [
    "ComposedDocument",
    "DocumentComposer",
    "CONTAINMENT_STYLE",
    "append_containment",
    "find_stylesheets",
    "insert_base",
    "placeholder_document",
]
