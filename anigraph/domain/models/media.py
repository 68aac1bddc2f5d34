"""Domain models for media entries (anime and manga).

Entities here are immutable value objects produced by the response decoder.
Absent server fields are kept as None; nothing is defaulted.
"""

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from rich.color_triplet import ColorTriplet

from anigraph.domain.models.common import MediaId
from anigraph.domain.models.character import CharacterEdge

# --- Enumerations ---
# Values are the variant names. Wire strings are mapped onto them by the
# decoder (see infrastructure.graphql.decoder).

class MediaType(Enum):
    ANIME = "Anime"      # Japanese anime
    MANGA = "Manga"      # Asian manga, manhwa, manhua
    UNKNOWN = "Unknown"

class MediaStatus(Enum):
    FINISHED = "Finished"
    RELEASING = "Releasing"
    NOT_YET_RELEASED = "NotYetReleased"
    CANCELLED = "Cancelled"
    HIATUS = "Hiatus"

class MediaSeason(Enum):
    WINTER = "Winter"
    SPRING = "Spring"
    SUMMER = "Summer"
    FALL = "Fall"

    @property
    def wire_name(self) -> str:
        """Name the service expects in query variables (e.g. 'WINTER')."""
        return self.value.upper()

class MediaRelation(Enum):
    ADAPTATION = "Adaptation"     # An adaptation of this media into a different format
    PREQUEL = "Prequel"           # Released before the relation
    SEQUEL = "Sequel"             # Released after the relation
    PARENT = "Parent"             # The media a side story is from
    SIDE_STORY = "SideStory"      # A side story of the parent media
    CHARACTER = "Character"       # Shares at least one character
    SUMMARY = "Summary"           # A shortened and summarized version
    ALTERNATIVE = "Alternative"   # An alternative version of the same media
    SPIN_OFF = "SpinOff"          # Alternative version with a different primary focus
    OTHER = "Other"
    SOURCE = "Source"             # The source material the media was adapted from
    COMPILATION = "Compilation"
    CONTAINS = "Contains"

# --- Value Objects ---

@dataclass(frozen=True)
class FuzzyDate:
    """A calendar date where any of year, month and day may be unknown."""
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.year is not None and self.month is not None and self.day is not None

    def to_date(self) -> Optional[datetime.date]:
        """Returns a real date when every part is known, otherwise None."""
        if not self.is_complete:
            return None
        return datetime.date(self.year, self.month, self.day)

    def __str__(self) -> str:
        if self.year is None:
            return "?"
        parts = [f"{self.year:04d}"]
        if self.month is not None:
            parts.append(f"{self.month:02d}")
            if self.day is not None:
                parts.append(f"{self.day:02d}")
        return "-".join(parts)

@dataclass(frozen=True)
class MediaTitle:
    romaji: Optional[str] = None
    english: Optional[str] = None
    native: Optional[str] = None

    @property
    def preferred(self) -> Optional[str]:
        """English title, falling back to romaji and then native."""
        return self.english or self.romaji or self.native

@dataclass(frozen=True)
class CoverImage:
    """Cover art URLs plus the dominant color the service computed for them."""
    extra_large: Optional[str] = None
    large: Optional[str] = None
    medium: Optional[str] = None
    color_hex: Optional[str] = None       # Raw wire value, e.g. '#e4a15d'
    color: Optional[ColorTriplet] = None  # Derived from color_hex; None when it is absent/empty

# --- Graph edges ---

@dataclass(frozen=True)
class MediaEdgeNode:
    """Shallow media node at the end of a relation edge: no further nesting."""
    id: MediaId
    type: Optional[MediaType] = None
    title: Optional[MediaTitle] = None

@dataclass(frozen=True)
class MediaEdge:
    relation_type: MediaRelation
    node: Optional[MediaEdgeNode] = None

# --- Aggregate ---

@dataclass(frozen=True)
class Media:
    """A single anime or manga entry with its one-level relation and character edges."""
    id: MediaId
    type: Optional[MediaType] = None
    title: Optional[MediaTitle] = None
    description: Optional[str] = None
    site_url: Optional[str] = None
    start_date: Optional[FuzzyDate] = None
    end_date: Optional[FuzzyDate] = None
    is_adult: Optional[bool] = None
    episodes: Optional[int] = None
    status: Optional[MediaStatus] = None
    genres: Optional[Tuple[str, ...]] = None
    average_score: Optional[int] = None
    season: Optional[MediaSeason] = None
    season_year: Optional[int] = None
    cover_image: Optional[CoverImage] = None
    relations: Optional[Tuple[MediaEdge, ...]] = None
    characters: Optional[Tuple[CharacterEdge, ...]] = None

    @property
    def display_title(self) -> str:
        preferred = self.title.preferred if self.title else None
        return preferred or f"#{self.id}"

@dataclass(frozen=True)
class RelatedMediaEdge:
    """Relation edge whose node is a full Media, itself carrying shallow edges.

    Returned only by the related-media lookup, which fetches one level deeper
    than the by-id and search shapes.
    """
    relation_type: MediaRelation
    node: Optional[Media] = None
