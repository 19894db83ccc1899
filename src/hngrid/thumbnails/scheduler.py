"""
Bounded-concurrency thumbnail fetch queue.

Task lifecycle::

    pending (in the FIFO) -> active (resolver call in flight) -> done

``on_became_visible`` appends a task and promotes as many pending tasks as the
limit allows. Every completion, successful or not, delivers the result to the
presentation callback, releases its slot and promotes again. Resolver and
callback errors are logged and treated as "no image"; one bad page never
stalls the queue. There is no mid-flight cancellation.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Deque, Iterable, Mapping, Optional, Set, Tuple

from hngrid.config import thumbs
from hngrid.listing import StoryRecord, thumbnail_targets

from .resolver import ThumbnailResolver
from .visibility import VisibilityTracker

logger = logging.getLogger(__name__)

ResultCallback = Callable[[Any, Optional[str]], Awaitable[None] | None]


@dataclass(slots=True)
class FetchTask:
    target: str
    handle: Any


class FetchScheduler:
    """FIFO work queue that keeps at most ``limit`` resolutions in flight."""

    def __init__(
        self,
        resolver: ThumbnailResolver,
        on_result: ResultCallback,
        *,
        limit: int | None = None,
    ) -> None:
        self.resolver = resolver
        self.on_result = on_result
        self._limit = thumbs.CONCURRENCY if limit is None else self._check_limit(limit)
        self._pending: Deque[FetchTask] = deque()
        self._active = 0
        self._tasks: Set[asyncio.Task] = set()
        self._idle = asyncio.Event()
        self._idle.set()

    # ------------------------------------------------------------------ #
    # Inputs
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_limit(n: int) -> int:
        if n < 1:
            raise ValueError(f"Concurrency limit must be >= 1, got {n}")
        return n

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        return self._active

    @property
    def pending(self) -> list[str]:
        return [t.target for t in self._pending]

    def set_concurrency_limit(self, n: int) -> None:
        """Change the cap. Active tasks are never cancelled; raising it promotes at once."""

        self._limit = self._check_limit(n)
        self._drain()

    def on_became_visible(self, target: str, handle: Any) -> None:
        """Enqueue ``target``. Must be called from within the running event loop."""

        self._pending.append(FetchTask(target, handle))
        self._idle.clear()
        logger.debug("Queued %s (%d pending, %d active)", target, len(self._pending), self._active)
        self._drain()

    def watch(self, margin: float | None = None) -> VisibilityTracker:
        """Return a tracker whose one-shot triggers feed this scheduler."""

        return VisibilityTracker(self.on_became_visible, margin=margin)

    def watch_stories(
        self,
        stories: Iterable[StoryRecord],
        extents: Mapping[str, Tuple[float, float]],
        *,
        margin: float | None = None,
    ) -> VisibilityTracker:
        """
        Register every thumbnail-eligible story with a new tracker.

        ``extents`` maps story id to its ``(top, bottom)`` on the page. Discussion
        posts, domainless links and stories without an extent are never
        observed, so they never reach the resolver.
        """

        tracker = self.watch(margin)
        for story in thumbnail_targets(stories):
            extent = extents.get(story.id)
            if extent is None:
                logger.debug("No layout for story %s; not watching", story.id)
                continue
            top, bottom = extent
            tracker.observe(story.url, story.watch_key, top, bottom)
        return tracker

    async def join(self) -> None:
        """Wait until nothing is pending or active."""

        await self._idle.wait()

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _drain(self) -> None:
        while self._active < self._limit and self._pending:
            task = self._pending.popleft()
            self._active += 1
            runner = asyncio.create_task(self._run(task))
            self._tasks.add(runner)
            runner.add_done_callback(self._tasks.discard)

    async def _run(self, task: FetchTask) -> None:
        try:
            try:
                image_url = await self.resolver.resolve(task.target)
            except Exception:
                logger.exception("Thumbnail resolution failed for %s", task.target)
                image_url = None

            try:
                await self._deliver(task.handle, image_url)
            except Exception:
                logger.exception("Result callback failed for %s", task.target)
        finally:
            self._active -= 1
            self._drain()
            if self._active == 0 and not self._pending:
                self._idle.set()

    async def _deliver(self, handle: Any, image_url: Optional[str]) -> None:
        result = self.on_result(handle, image_url)
        if inspect.isawaitable(result):
            await result


__all__ = ["FetchScheduler", "FetchTask"]
