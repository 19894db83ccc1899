"""URL helpers shared by the extractor and the composer."""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit


def resolve_url(ref: str, base: str) -> str | None:
    """
    Resolve ``ref`` against ``base`` and return an absolute URL.

    Returns ``None`` when the result has no scheme or host, or when either
    input is malformed (e.g. an unbalanced IPv6 literal).
    """
    ref = (ref or "").strip()
    if not ref:
        return None
    try:
        joined = urljoin(base, ref)
        parts = urlsplit(joined)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return joined


def host_of(url: str) -> str:
    """Return the lowercase host of ``url`` or an empty string."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


__all__ = ["resolve_url", "host_of"]
