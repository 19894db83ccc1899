"""
Preview-image resolution package.

Modules
=======

``extractor``
    Pattern-based ``<meta>`` and ``<img>`` scanning that picks one preview
    image for a page.
``session_store``
    Durable per-session string stores (in-memory and gzipped JSON file).
``cache``
    :class:`~hngrid.thumbnails.cache.ThumbnailCache`, the two-tier cache in
    front of a session store.
``resolver``
    :class:`~hngrid.thumbnails.resolver.ThumbnailResolver`, cache -> fetch ->
    extract -> cache for one page URL.
``visibility``
    One-shot "became visible" triggers with a look-ahead margin.
``scheduler``
    :class:`~hngrid.thumbnails.scheduler.FetchScheduler`, the FIFO queue that
    bounds in-flight resolutions.
"""

from .cache import MISSING, ThumbnailCache
from .resolver import ThumbnailResolver
from .scheduler import FetchScheduler
from .session_store import FileSessionStore, MemorySessionStore
from .visibility import VisibilityTracker

__all__ = [
    "MISSING",
    "ThumbnailCache",
    "ThumbnailResolver",
    "FetchScheduler",
    "FileSessionStore",
    "MemorySessionStore",
    "VisibilityTracker",
]
