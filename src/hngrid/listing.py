"""
Story records handed over by the listing parser.

Parsing the listing markup happens elsewhere; this module only defines the
record shape the thumbnail pipeline consumes, plus the small helpers
presentation needs around it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

from hngrid.config import reader as reader_cfg
from hngrid.urls import host_of


@dataclass(slots=True)
class StoryRecord:
    id: str
    title: str
    url: str
    domain: Optional[str] = None
    is_discussion: bool = False
    comments_url: Optional[str] = None
    rank: int = 0
    handle: Any = None

    @property
    def wants_thumbnail(self) -> bool:
        """External links with a known domain get a preview image."""
        return not self.is_discussion and bool(self.domain)

    @property
    def watch_key(self) -> Any:
        """Handle used for visibility tracking and result delivery."""
        return self.handle if self.handle is not None else self.id


def thumbnail_targets(stories: Iterable[StoryRecord]) -> List[StoryRecord]:
    return [s for s in stories if s.wants_thumbnail]


def story_from_url(url: str, *, rank: int = 0) -> StoryRecord:
    """Bare record for a link given on its own (no listing row around it)."""
    domain = host_of(url) or None
    is_discussion = domain == reader_cfg.DISCUSSION_HOST
    return StoryRecord(id=url, title="", url=url, domain=domain, is_discussion=is_discussion, rank=rank)


def favicon_url(domain: str) -> str:
    """Fallback visual shown until (or instead of) a preview image."""
    return reader_cfg.FAVICON_TEMPLATE.format(domain=quote(domain.strip(), safe=".-"))


__all__ = ["StoryRecord", "favicon_url", "story_from_url", "thumbnail_targets"]
