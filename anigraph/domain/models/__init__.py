"""Domain models for the media catalog (entities and value objects)."""

from anigraph.domain.models.common import MediaId, CharacterId, SearchText, PageIndex, PageInfo, PageEnvelope
from anigraph.domain.models.media import (
    MediaType, MediaStatus, MediaSeason, MediaRelation,
    FuzzyDate, MediaTitle, CoverImage, MediaEdgeNode, MediaEdge, Media, RelatedMediaEdge,
)
from anigraph.domain.models.character import (
    CharacterRole, CharacterName, CharacterImage, Character, CharacterEdge,
)

__all__ = [
    "MediaId", "CharacterId", "SearchText", "PageIndex", "PageInfo", "PageEnvelope",
    "MediaType", "MediaStatus", "MediaSeason", "MediaRelation",
    "FuzzyDate", "MediaTitle", "CoverImage", "MediaEdgeNode", "MediaEdge", "Media", "RelatedMediaEdge",
    "CharacterRole", "CharacterName", "CharacterImage", "Character", "CharacterEdge",
]
