import asyncio

import pytest

from hngrid.clients.http import TimeoutFailure
from hngrid.listing import StoryRecord
from hngrid.thumbnails.cache import ThumbnailCache
from hngrid.thumbnails.resolver import ThumbnailResolver
from hngrid.thumbnails.scheduler import FetchScheduler


class _GatedResolver:
    """Resolver whose calls block until the test opens each target's gate."""

    def __init__(self) -> None:
        self.gates: dict[str, asyncio.Event] = {}
        self.started: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def gate(self, target: str) -> asyncio.Event:
        return self.gates.setdefault(target, asyncio.Event())

    def release_all(self) -> None:
        for target in self.started:
            self.gate(target).set()

    async def resolve(self, target: str):
        self.started.append(target)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await self.gate(target).wait()
        finally:
            self.in_flight -= 1
        if "boom" in target:
            raise RuntimeError("resolver exploded")
        return f"{target}/img.jpg"


async def _settle(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_concurrency_cap_and_fifo_promotion():
    resolver = _GatedResolver()
    delivered = []
    scheduler = FetchScheduler(resolver, lambda h, url: delivered.append((h, url)), limit=2)

    for i in range(5):
        scheduler.on_became_visible(f"https://s{i}", f"card{i}")
    await _settle()

    assert resolver.started == ["https://s0", "https://s1"]
    assert scheduler.active == 2
    assert scheduler.pending == ["https://s2", "https://s3", "https://s4"]

    resolver.gate("https://s1").set()
    await _settle()
    assert delivered == [("card1", "https://s1/img.jpg")]
    assert resolver.started == ["https://s0", "https://s1", "https://s2"]
    assert scheduler.active == 2

    while scheduler.pending or scheduler.active:
        resolver.release_all()
        await _settle()

    await asyncio.wait_for(scheduler.join(), 1)
    assert resolver.started == [f"https://s{i}" for i in range(5)]
    assert resolver.max_in_flight == 2
    assert len(delivered) == 5


@pytest.mark.asyncio
async def test_resolver_error_is_isolated():
    resolver = _GatedResolver()
    delivered = {}
    scheduler = FetchScheduler(resolver, lambda h, url: delivered.__setitem__(h, url), limit=1)

    scheduler.on_became_visible("https://boom", "bad")
    scheduler.on_became_visible("https://fine", "good")
    await _settle()
    resolver.gate("https://boom").set()
    await _settle()

    assert delivered == {"bad": None}
    assert resolver.started == ["https://boom", "https://fine"]

    resolver.gate("https://fine").set()
    await asyncio.wait_for(scheduler.join(), 1)
    assert delivered == {"bad": None, "good": "https://fine/img.jpg"}
    assert scheduler.active == 0


@pytest.mark.asyncio
async def test_callback_error_does_not_stall_queue():
    resolver = _GatedResolver()
    calls = []

    def on_result(handle, url):
        calls.append(handle)
        if handle == "first":
            raise ValueError("presentation broke")

    scheduler = FetchScheduler(resolver, on_result, limit=1)
    scheduler.on_became_visible("https://a", "first")
    scheduler.on_became_visible("https://b", "second")
    await _settle()
    resolver.gate("https://a").set()
    resolver.gate("https://b").set()

    await asyncio.wait_for(scheduler.join(), 1)
    assert calls == ["first", "second"]


@pytest.mark.asyncio
async def test_async_callback_is_awaited():
    resolver = _GatedResolver()
    seen = []

    async def on_result(handle, url):
        await asyncio.sleep(0)
        seen.append((handle, url))

    scheduler = FetchScheduler(resolver, on_result, limit=3)
    scheduler.on_became_visible("https://a", "a")
    await _settle()
    resolver.release_all()
    await asyncio.wait_for(scheduler.join(), 1)
    assert seen == [("a", "https://a/img.jpg")]


@pytest.mark.asyncio
async def test_timed_out_fetch_releases_slot(make_fetcher):
    fetcher = make_fetcher(
        {
            "https://slow": TimeoutFailure("https://slow", "timed out"),
            "https://next": '<meta property="og:image" content="/n.jpg">',
        }
    )
    resolver = ThumbnailResolver(fetcher, ThumbnailCache())
    delivered = []
    scheduler = FetchScheduler(resolver, lambda h, url: delivered.append((h, url)), limit=1)

    scheduler.on_became_visible("https://slow", "slow")
    scheduler.on_became_visible("https://next", "next")
    await asyncio.wait_for(scheduler.join(), 1)

    assert delivered == [("slow", None), ("next", "https://next/n.jpg")]
    assert fetcher.calls == ["https://slow", "https://next"]
    assert scheduler.active == 0


@pytest.mark.asyncio
async def test_raising_limit_promotes_immediately():
    resolver = _GatedResolver()
    scheduler = FetchScheduler(resolver, lambda h, url: None, limit=1)
    for i in range(3):
        scheduler.on_became_visible(f"https://s{i}", i)
    await _settle()
    assert scheduler.active == 1

    scheduler.set_concurrency_limit(3)
    await _settle()
    assert scheduler.active == 3
    assert scheduler.pending == []

    with pytest.raises(ValueError):
        scheduler.set_concurrency_limit(0)

    resolver.release_all()
    await asyncio.wait_for(scheduler.join(), 1)


@pytest.mark.asyncio
async def test_lowering_limit_keeps_active_tasks():
    resolver = _GatedResolver()
    scheduler = FetchScheduler(resolver, lambda h, url: None, limit=3)
    for i in range(4):
        scheduler.on_became_visible(f"https://s{i}", i)
    await _settle()

    scheduler.set_concurrency_limit(1)
    assert scheduler.active == 3

    resolver.gate("https://s0").set()
    await _settle()
    # Two still running, above the new cap of 1: nothing promoted.
    assert scheduler.active == 2
    assert scheduler.pending == ["https://s3"]

    while scheduler.pending or scheduler.active:
        resolver.release_all()
        await _settle()
    assert resolver.max_in_flight == 3


@pytest.mark.asyncio
async def test_visibility_trigger_creates_one_task():
    resolver = _GatedResolver()
    scheduler = FetchScheduler(resolver, lambda h, url: None, limit=2)
    tracker = scheduler.watch(margin=0)
    tracker.observe("https://a", "card-a", 0, 100)

    tracker.update_viewport(0, 500)
    tracker.update_viewport(0, 500)
    await _settle()

    assert resolver.started == ["https://a"]
    resolver.release_all()
    await asyncio.wait_for(scheduler.join(), 1)


@pytest.mark.asyncio
async def test_watch_stories_registers_only_external_links():
    resolver = _GatedResolver()
    delivered = []
    scheduler = FetchScheduler(resolver, lambda h, url: delivered.append((h, url)), limit=3)
    stories = [
        StoryRecord(id="1", title="Ask HN", url="https://news.ycombinator.com/item?id=1", is_discussion=True),
        StoryRecord(id="2", title="Post", url="https://blog.example/p", domain="blog.example", handle="card-2"),
        StoryRecord(id="3", title="Bare", url="https://bare", domain=None),
        StoryRecord(id="4", title="Unlaid", url="https://late.example/x", domain="late.example"),
    ]
    extents = {"1": (0, 100), "2": (100, 200), "3": (200, 300)}

    tracker = scheduler.watch_stories(stories, extents, margin=0)
    assert len(tracker) == 1
    assert tracker.is_observing("card-2")

    tracker.update_viewport(0, 1000)
    await _settle()
    assert resolver.started == ["https://blog.example/p"]

    resolver.release_all()
    await asyncio.wait_for(scheduler.join(), 1)
    assert delivered == [("card-2", "https://blog.example/p/img.jpg")]


def test_rejects_invalid_limit():
    with pytest.raises(ValueError):
        FetchScheduler(_GatedResolver(), lambda h, url: None, limit=0)
