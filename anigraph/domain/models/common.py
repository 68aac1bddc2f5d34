"""Defines common Value Objects shared by the media and character contexts.

These objects represent simple identifiers and the paging envelope the
catalog service wraps list results in.
"""

from dataclasses import dataclass
from typing import Generic, NewType, Optional, Tuple, TypeVar

# === Identifiers ===

# NewType for semantic clarity, plain ints/strings at runtime.
MediaId = NewType("MediaId", int)          # AniList media id
CharacterId = NewType("CharacterId", int)  # AniList character id
SearchText = NewType("SearchText", str)    # Free-text search string
PageIndex = NewType("PageIndex", int)      # 1-based page index

# === Paging ===

T = TypeVar("T")

@dataclass(frozen=True)
class PageInfo:
    """Position of a page within a listing, as reported by the server."""
    current_page: Optional[PageIndex]
    has_next_page: bool

@dataclass(frozen=True)
class PageEnvelope(Generic[T]):
    """One page of a listing: its position plus the items it carries."""
    page_info: PageInfo
    items: Tuple[T, ...] = ()

    @property
    def current_page(self) -> Optional[PageIndex]:
        return self.page_info.current_page

    @property
    def has_next_page(self) -> bool:
        return self.page_info.has_next_page
