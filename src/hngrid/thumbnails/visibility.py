"""
One-shot visibility triggers.

``VisibilityTracker`` stands in for an intersection observer. Presentation code
registers each card with its vertical extent, then reports viewport moves.
When a card comes within ``margin`` of the viewport its subscription is
removed and ``on_visible(target, handle)`` is called. Removal happens before
the callback, so no later viewport update can fire the same card again.
Fired handles are remembered; observing one again is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Set

from hngrid.config import thumbs

logger = logging.getLogger(__name__)

VisibleCallback = Callable[[str, Any], None]


@dataclass(slots=True)
class _Subscription:
    target: str
    handle: Hashable
    top: float
    bottom: float


class VisibilityTracker:
    def __init__(self, on_visible: VisibleCallback, *, margin: float | None = None) -> None:
        self._on_visible = on_visible
        self.margin = thumbs.LOOKAHEAD_PX if margin is None else margin
        self._subs: Dict[Hashable, _Subscription] = {}
        self._fired: Set[Hashable] = set()

    def __len__(self) -> int:
        return len(self._subs)

    def is_observing(self, handle: Hashable) -> bool:
        return handle in self._subs

    def has_fired(self, handle: Hashable) -> bool:
        return handle in self._fired

    def observe(self, target: str, handle: Hashable, top: float, bottom: float) -> None:
        """Watch ``handle`` (spanning ``top``..``bottom``) on behalf of ``target``."""

        if bottom < top:
            raise ValueError(f"bottom ({bottom}) is above top ({top})")
        if handle in self._fired:
            logger.debug("Ignoring re-observe of fired handle %r", handle)
            return
        self._subs[handle] = _Subscription(target, handle, top, bottom)

    def unobserve(self, handle: Hashable) -> None:
        self._subs.pop(handle, None)

    def update_viewport(self, top: float, height: float) -> int:
        """Fire every watched element inside the look-ahead band; return how many fired."""

        band_top = top - self.margin
        band_bottom = top + height + self.margin
        hits = sorted(
            (s for s in self._subs.values() if s.bottom >= band_top and s.top <= band_bottom),
            key=lambda s: s.top,
        )
        for sub in hits:
            # Consume the trigger first; the callback may re-enter.
            self._subs.pop(sub.handle, None)
            self._fired.add(sub.handle)
            self._on_visible(sub.target, sub.handle)
        if hits:
            logger.debug("%d element(s) became visible at viewport %.0f", len(hits), top)
        return len(hits)


__all__ = ["VisibilityTracker"]
