"""Stylesheet text rewriting for inlined CSS."""

from __future__ import annotations

import re

from hngrid.urls import resolve_url

# url(...) whose target is relative: no scheme, not protocol-relative, not a
# same-document fragment (SVG filter/mask references).
_RELATIVE_URL_RE = re.compile(
    r"""url\(\s*(["']?)(?![a-z][a-z0-9+.\-]*:|//|\#)([^"')]+?)\1\s*\)""",
    re.IGNORECASE,
)


def rewrite_css_urls(css_text: str, sheet_url: str) -> str:
    """Make every relative ``url(...)`` in ``css_text`` absolute against ``sheet_url``."""

    def _absolute(match: re.Match[str]) -> str:
        resolved = resolve_url(match.group(2), sheet_url)
        if resolved is None:
            return match.group(0)
        return f'url("{resolved}")'

    return _RELATIVE_URL_RE.sub(_absolute, css_text)


__all__ = ["rewrite_css_urls"]
