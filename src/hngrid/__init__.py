"""
hngrid
======

Preview images and an inline reader for text-only story listings.

Packages
========

``thumbnails``
    Extraction, two-tier caching, resolution and the visibility-driven fetch
    queue.
``reader``
    Document composition and the article/discussion reader state.
``clients``
    The aiohttp-backed fetcher.
``config``
    Layered settings (``config.toml``, environment, defaults) and logging setup.
"""

__version__ = "0.1.0"
