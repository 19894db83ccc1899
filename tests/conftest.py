import asyncio
import sys
from pathlib import Path

import pytest

# Add src/ to sys.path so tests run without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from hngrid.clients.http import FetchResult, NetworkFailure  # noqa: E402


class FakeFetcher:
    """Scripted stand-in for :class:`hngrid.clients.http.Fetcher`.

    ``responses`` maps URL -> body text, :class:`FetchResult`, or an exception
    instance to raise. Unknown URLs raise :class:`NetworkFailure`.
    """

    def __init__(self, responses=None, *, delays=None) -> None:
        self.responses = dict(responses or {})
        self.delays = dict(delays or {})
        self.calls: list[str] = []
        self.accepts: list[str | None] = []

    async def get(self, url, *, timeout=None, accept=None):
        self.calls.append(url)
        self.accepts.append(accept)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        resp = self.responses.get(url)
        if resp is None:
            raise NetworkFailure(url, "no route")
        if isinstance(resp, BaseException):
            raise resp
        if isinstance(resp, str):
            return FetchResult(status=200, final_url=url, text=resp)
        return resp


@pytest.fixture
def make_fetcher():
    return FakeFetcher
