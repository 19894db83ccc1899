"""
Two-tier thumbnail cache.

``ThumbnailCache`` layers a process-local dict in front of an injected
:class:`~hngrid.thumbnails.session_store.SessionStore`. A durable hit is copied
into the local tier before it is returned. Writes go to both tiers.

Values are the resolved image URL or ``None`` for "this page has no preview".
The durable tier stores ``None`` as an empty string so a negative result is
never retried within the session; only an absent key means "not resolved yet".
Reads return :data:`MISSING` for that case.

Any ``OSError``/``ValueError`` from the durable tier flips the cache into a
degraded, local-only mode for the rest of its lifetime.
"""

from __future__ import annotations

import logging
from typing import Dict, Final, Optional

from hngrid.config import thumbs

from .session_store import SessionStore

logger = logging.getLogger(__name__)


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

_NONE_MARKER = ""


class ThumbnailCache:
    """Page URL -> image URL (or ``None``) with a session-scoped durable tier."""

    def __init__(self, store: SessionStore | None = None, *, key_prefix: str | None = None) -> None:
        self._local: Dict[str, Optional[str]] = {}
        self._store = store
        self._prefix = thumbs.KEY_PREFIX if key_prefix is None else key_prefix
        self._degraded = store is None

    @property
    def degraded(self) -> bool:
        """``True`` once the durable tier is unavailable for this session."""
        return self._degraded

    def __len__(self) -> int:
        return len(self._local)

    def _durable_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _degrade(self, action: str, exc: Exception) -> None:
        if not self._degraded:
            logger.warning("Session store %s failed (%s); caching in memory only", action, exc)
        self._degraded = True

    def get(self, key: str):
        """Return the cached value, or :data:`MISSING` when never resolved."""

        if key in self._local:
            return self._local[key]
        if self._degraded:
            return MISSING

        try:
            stored = self._store.get_item(self._durable_key(key))
        except (OSError, ValueError) as exc:
            self._degrade("read", exc)
            return MISSING

        if stored is None:
            return MISSING
        value = stored or None
        self._local[key] = value
        return value

    def has(self, key: str) -> bool:
        return self.get(key) is not MISSING

    def set(self, key: str, value: Optional[str]) -> None:
        """Record ``value`` (``None`` for no image) as final for ``key``."""

        self._local[key] = value
        if self._degraded:
            return
        try:
            self._store.set_item(self._durable_key(key), value or _NONE_MARKER)
        except (OSError, ValueError) as exc:
            self._degrade("write", exc)


__all__ = ["ThumbnailCache", "MISSING"]
