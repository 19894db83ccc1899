"""
Side-by-side reader state.

The article pane either navigates directly (pages on the discussion site
frame fine) or receives a composed document. The discussion pane always
navigates. Only the most recently opened story may become ``current``; a slow
composition that finishes after a newer ``open`` or a ``close`` is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from hngrid.config import reader as reader_cfg
from hngrid.urls import host_of

from .composer import ComposedDocument, DocumentComposer

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PaneContent:
    """Exactly one of ``navigate_url`` / ``document`` is set."""

    navigate_url: Optional[str] = None
    document: Optional[ComposedDocument] = None

    @property
    def is_navigation(self) -> bool:
        return self.navigate_url is not None


@dataclass(slots=True)
class ReaderView:
    title: str
    article_url: str
    comments_url: str
    article: PaneContent
    comments: PaneContent


class ReaderSession:
    def __init__(self, composer: DocumentComposer, *, discussion_host: str | None = None) -> None:
        self.composer = composer
        self.discussion_host = (discussion_host or reader_cfg.DISCUSSION_HOST).lower()
        self._current: ReaderView | None = None
        self._generation = 0

    @property
    def current(self) -> ReaderView | None:
        return self._current

    def is_discussion_url(self, url: str) -> bool:
        return host_of(url) == self.discussion_host

    async def open(self, article_url: str, comments_url: str, title: str = "") -> ReaderView:
        """Prepare both panes for a story and make it the current view."""

        self._generation += 1
        generation = self._generation

        if self.is_discussion_url(article_url):
            article = PaneContent(navigate_url=article_url)
        else:
            article = PaneContent(document=await self.composer.compose_url(article_url))

        view = ReaderView(
            title=title,
            article_url=article_url,
            comments_url=comments_url,
            article=article,
            comments=PaneContent(navigate_url=comments_url),
        )
        if generation == self._generation:
            self._current = view
        else:
            logger.debug("Discarding stale reader view for %s", article_url)
        return view

    def close(self) -> None:
        """Drop the current view; any in-flight ``open`` result is discarded."""

        self._generation += 1
        self._current = None


__all__ = ["PaneContent", "ReaderSession", "ReaderView"]
