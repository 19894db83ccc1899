"""
Preview-image extraction
========================
Pattern-based, not a parser. Two passes run in order and the first success wins:

1. ``<meta>`` pass: the first ``og:image`` / ``twitter:image`` style tag whose
   ``content`` resolves to something that plausibly is an image.
2. ``<img>`` fallback: every image tag is scored on its ``src`` keywords and
   declared dimensions; the best one wins if it clears
   :attr:`~hngrid.config.scoring.Scoring.MIN_SCORE`.

Tag bodies are matched with ``[^>]*`` so attributes split across lines are fine.
Attribute values are HTML-unescaped before resolution (``&amp;`` in query
strings is common in CMS output).
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional
from urllib.parse import urlsplit

from hngrid.config import scoring as default_scoring
from hngrid.config.scoring import Scoring
from hngrid.urls import resolve_url

logger = logging.getLogger(__name__)

_META_TAG_RE = re.compile(r"<meta\b([^>]*)>", re.IGNORECASE)
_IMG_TAG_RE = re.compile(r"<img\b([^>]*)>", re.IGNORECASE)

_META_IMAGE_KEY_RE = re.compile(
    r"""\b(?:property|name)\s*=\s*["']\s*(?:og:image(?::secure_url|:url)?|twitter:image(?::src)?)\s*["']""",
    re.IGNORECASE,
)
_CONTENT_RE = re.compile(r"""\bcontent\s*=\s*["']([^"']*)["']""", re.IGNORECASE)
_SRC_RE = re.compile(r"""\bsrc\s*=\s*["']([^"']+)["']""", re.IGNORECASE)
_WIDTH_RE = re.compile(r"""\bwidth\s*=\s*["']?\s*(\d+)""", re.IGNORECASE)
_HEIGHT_RE = re.compile(r"""\bheight\s*=\s*["']?\s*(\d+)""", re.IGNORECASE)

_IMAGE_EXT_RE = re.compile(r"\.(?:jpe?g|png|gif|webp|avif|svg)$", re.IGNORECASE)
_NON_IMAGE_EXT_RE = re.compile(r"\.(?:js|css|html?)$", re.IGNORECASE)
_SVG_RE = re.compile(r"\.svg(?:\?|#|$)", re.IGNORECASE)


@dataclass(slots=True)
class ImageCandidate:
    """Transient scored ``<img>`` source; only the winner's url is kept."""

    src: str
    score: float


def _is_data_uri(value: str) -> bool:
    return value.lstrip().lower().startswith("data:")


@lru_cache(maxsize=8)
def _keyword_re(words: tuple[str, ...]) -> re.Pattern[str] | None:
    if not words:
        return None
    return re.compile("|".join(re.escape(w) for w in words), re.IGNORECASE)


def _looks_like_image(url: str) -> bool:
    """Permissive accept: image extension, "image" in path/query, or not a page/asset."""
    parts = urlsplit(url)
    path = parts.path
    if _IMAGE_EXT_RE.search(path):
        return True
    if "image" in (path + "?" + parts.query).lower():
        return True
    return not _NON_IMAGE_EXT_RE.search(path)


def _iter_meta_image_values(markup: str) -> Iterator[str]:
    for tag in _META_TAG_RE.finditer(markup):
        attrs = tag.group(1)
        if not _META_IMAGE_KEY_RE.search(attrs):
            continue
        content = _CONTENT_RE.search(attrs)
        if not content:
            continue
        value = html.unescape(content.group(1)).strip()
        if not value or _is_data_uri(value):
            continue
        yield value


def extract_meta_image(markup: str, base_url: str) -> Optional[str]:
    """Return the first acceptable ``og:image``/``twitter:image`` URL, resolved."""

    for value in _iter_meta_image_values(markup or ""):
        resolved = resolve_url(value, base_url)
        if resolved and _looks_like_image(resolved):
            return resolved
    return None


def score_image(attrs: str, src: str, weights: Scoring) -> float:
    """Score one ``<img>`` tag from its ``src`` keywords and declared size."""

    score = 0.0
    hero = _keyword_re(tuple(weights.HERO_KEYWORDS))
    decor = _keyword_re(tuple(weights.DECOR_KEYWORDS))
    if hero and hero.search(src):
        score += weights.HERO_BONUS
    if decor and decor.search(src):
        score -= weights.DECOR_PENALTY

    width_match = _WIDTH_RE.search(attrs)
    height_match = _HEIGHT_RE.search(attrs)
    if width_match:
        width = int(width_match.group(1))
        score += min(width / weights.WIDTH_DIVISOR, weights.WIDTH_CAP)
        if width < weights.NARROW_WIDTH:
            score -= weights.NARROW_PENALTY
    if height_match:
        score += min(int(height_match.group(1)) / weights.HEIGHT_DIVISOR, weights.HEIGHT_CAP)
    return score


def iter_image_candidates(markup: str, weights: Scoring | None = None) -> Iterator[ImageCandidate]:
    """Yield a scored candidate for every usable ``<img>`` in document order."""

    weights = weights or default_scoring
    for tag in _IMG_TAG_RE.finditer(markup or ""):
        attrs = tag.group(1)
        src_match = _SRC_RE.search(attrs)
        if not src_match:
            continue
        src = html.unescape(src_match.group(1)).strip()
        if not src or _is_data_uri(src) or _SVG_RE.search(src):
            continue
        yield ImageCandidate(src=src, score=score_image(attrs, src, weights))


def extract_fallback_image(
    markup: str, base_url: str, weights: Scoring | None = None
) -> Optional[str]:
    """Return the best-scoring ``<img>`` src if it reaches the threshold."""

    weights = weights or default_scoring
    best: ImageCandidate | None = None
    for candidate in iter_image_candidates(markup, weights):
        if best is None or candidate.score > best.score:
            best = candidate

    if best is None or best.score < weights.MIN_SCORE:
        return None
    logger.debug("Fallback image %s scored %.1f", best.src, best.score)
    return resolve_url(best.src, base_url)


def extract(markup: str, base_url: str, weights: Scoring | None = None) -> Optional[str]:
    """Meta-tag pass first, ``<img>`` scoring second."""

    if not markup:
        return None
    return extract_meta_image(markup, base_url) or extract_fallback_image(markup, base_url, weights)


__all__ = [
    "ImageCandidate",
    "extract",
    "extract_meta_image",
    "extract_fallback_image",
    "iter_image_candidates",
    "score_image",
]
