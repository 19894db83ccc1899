"""
ThumbnailResolver Pipeline
==========================
1. Input : page URL (a :class:`~hngrid.listing.StoryRecord` external link).
2. Cache lookup; a hit (including a cached "no image") returns at once.
3. Miss:
   a. GET the page once with the configured timeout.
   b. Network error, timeout or non-2xx -> ``Outcome(None, ...)``.
   c. Meta-tag pass, then ``<img>`` fallback, against the *final* URL.
4. Write the result (URL or ``None``) to the cache, then return it.

NOTE: Concurrent calls for one key are not deduplicated here; the scheduler
enqueues each target once.
"""

from __future__ import annotations

import logging
from typing import Optional

from hngrid.clients.http import FetchError, PageFetcher, TimeoutFailure
from hngrid.config import fetch as fetch_cfg
from hngrid.config.scoring import Scoring
from hngrid.outcome import Outcome

from . import extractor
from .cache import MISSING, ThumbnailCache

logger = logging.getLogger(__name__)


class ThumbnailResolver:
    def __init__(
        self,
        fetcher: PageFetcher,
        cache: ThumbnailCache,
        *,
        timeout: float | None = None,
        weights: Scoring | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.timeout = timeout if timeout is not None else fetch_cfg.TIMEOUT
        self.weights = weights

    async def resolve(self, page_url: str) -> Optional[str]:
        """Return the preview image URL for ``page_url`` or ``None``."""

        return (await self.resolve_outcome(page_url)).value

    async def resolve_outcome(self, page_url: str) -> Outcome[str]:
        cached = self.cache.get(page_url)
        if cached is not MISSING:
            return Outcome.success(cached) if cached else Outcome.negative("miss")

        outcome = await self._fetch_and_extract(page_url)
        self.cache.set(page_url, outcome.value)
        if outcome.ok:
            logger.info("Thumbnail for %s -> %s", page_url, outcome.value)
        else:
            logger.info("No thumbnail for %s (%s)", page_url, outcome.failure)
        return outcome

    async def _fetch_and_extract(self, page_url: str) -> Outcome[str]:
        try:
            resp = await self.fetcher.get(page_url, timeout=self.timeout)
        except TimeoutFailure as exc:
            logger.debug("Page fetch timed out: %s", exc)
            return Outcome.negative("timeout")
        except FetchError as exc:
            logger.debug("Page fetch failed: %s", exc)
            return Outcome.negative("network")

        if not resp.ok:
            logger.debug("Page %s returned HTTP %s", page_url, resp.status)
            return Outcome.negative("network")

        base = resp.final_url or page_url
        image_url = extractor.extract(resp.text, base, self.weights)
        return Outcome.success(image_url) if image_url else Outcome.negative("miss")


__all__ = ["ThumbnailResolver"]
