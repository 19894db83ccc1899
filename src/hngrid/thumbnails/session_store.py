"""
Durable per-session key/value stores.

The thumbnail cache only needs ``get_item``/``set_item`` over strings, the same
shape as a browser's ``sessionStorage``. Implementations may raise ``OSError``
or ``ValueError`` on failure; :class:`~hngrid.thumbnails.cache.ThumbnailCache`
absorbs those.

``FileSessionStore`` keeps one gzipped JSON object per session file:
    {"hngrid::https://example.com/a": "https://cdn.example.com/a.jpg", ...}
"""

from __future__ import annotations

import gzip
import json
import os
import zlib
from pathlib import Path
from typing import Dict, Protocol


class SessionStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemorySessionStore:
    """Dict-backed store; useful for tests and single-process runs."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def __len__(self) -> int:
        return len(self._items)


class FileSessionStore:
    """Session store persisted to a gzipped JSON file, rewritten atomically."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._items: Dict[str, str] | None = None

    def _load(self) -> Dict[str, str]:
        if self._items is None:
            if self.path.exists():
                try:
                    with gzip.open(self.path, "rt", encoding="utf-8") as f:
                        raw = json.load(f)
                except (EOFError, zlib.error) as exc:
                    raise ValueError(f"Session file {self.path} is truncated or corrupt") from exc
                if not isinstance(raw, dict):
                    raise ValueError(f"Session file {self.path} is not a JSON object")
                self._items = {str(k): str(v) for k, v in raw.items()}
            else:
                self._items = {}
        return self._items

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with gzip.open(tmp, "wt", encoding="utf-8") as f:
            json.dump(self._items or {}, f)
        os.replace(tmp, self.path)

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._save()


__all__ = ["SessionStore", "MemorySessionStore", "FileSessionStore"]
