"""
Cross-origin GET helper built on :mod:`aiohttp`.

The fetcher follows redirects, reports the final URL, and decodes the body as
text. Connection problems surface as :class:`NetworkFailure`, deadline misses
as :class:`TimeoutFailure`; both derive from :class:`FetchError` so callers can
convert either into a negative result with one ``except``. Status codes are
reported, not raised; see :attr:`FetchResult.ok`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import aiohttp

from hngrid.config import fetch as fetch_cfg

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Base class for fetch failures."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message}: {url}")
        self.url = url


class NetworkFailure(FetchError):
    """Connection-level failure (DNS, refused, reset, bad payload)."""


class TimeoutFailure(FetchError):
    """The request did not finish within its timeout."""


@dataclass(frozen=True, slots=True)
class FetchResult:
    status: int
    final_url: str
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class PageFetcher(Protocol):
    """What the resolver and composer need from a fetcher."""

    async def get(self, url: str, *, timeout: float | None = None, accept: str | None = None) -> FetchResult: ...


class Fetcher:
    """
    Thin async wrapper around a shared :class:`aiohttp.ClientSession`.

    Use as an async context manager, or call :meth:`close` when done. A session
    is created lazily on first use when none is supplied.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self.timeout = timeout if timeout is not None else fetch_cfg.TIMEOUT
        self.user_agent = user_agent or fetch_cfg.USER_AGENT

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def get(
        self,
        url: str,
        *,
        timeout: float | None = None,
        accept: str | None = None,
    ) -> FetchResult:
        """GET ``url`` and return status, post-redirect URL and body text."""

        headers = {
            "Accept": accept or fetch_cfg.ACCEPT,
            "Accept-Language": fetch_cfg.ACCEPT_LANGUAGE,
            "User-Agent": self.user_agent,
        }
        client_timeout = aiohttp.ClientTimeout(total=timeout if timeout is not None else self.timeout)
        session = self._get_session()

        try:
            async with session.get(
                url, headers=headers, timeout=client_timeout, allow_redirects=True
            ) as resp:
                text = await resp.text(errors="replace")
                result = FetchResult(status=resp.status, final_url=str(resp.url), text=text)
        except asyncio.TimeoutError as exc:
            raise TimeoutFailure(url, "timed out") from exc
        except (aiohttp.ClientError, ValueError) as exc:
            raise NetworkFailure(url, f"{type(exc).__name__}: {exc}") from exc

        logger.debug("GET %s -> %s (%d chars)", url, result.status, len(result.text))
        return result


__all__ = ["FetchError", "FetchResult", "Fetcher", "NetworkFailure", "PageFetcher", "TimeoutFailure"]
