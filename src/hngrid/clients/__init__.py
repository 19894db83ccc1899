"""Network clients."""

from .http import FetchError, FetchResult, Fetcher, NetworkFailure, PageFetcher, TimeoutFailure

__all__ = ["FetchError", "FetchResult", "Fetcher", "NetworkFailure", "PageFetcher", "TimeoutFailure"]
