"""Domain models for characters and their role within a media entry."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from anigraph.domain.models.common import CharacterId

class CharacterRole(Enum):
    MAIN = "Main"
    SUPPORTING = "Supporting"
    BACKGROUND = "Background"

@dataclass(frozen=True)
class CharacterName:
    first: Optional[str] = None
    middle: Optional[str] = None
    last: Optional[str] = None
    full: Optional[str] = None
    native: Optional[str] = None
    alternative: Optional[Tuple[str, ...]] = None

    def __str__(self) -> str:
        if self.full:
            return self.full
        joined = " ".join(p for p in (self.first, self.middle, self.last) if p)
        return joined or self.native or ""

@dataclass(frozen=True)
class CharacterImage:
    large: Optional[str] = None
    medium: Optional[str] = None

@dataclass(frozen=True)
class Character:
    """A character entry. Fields not requested by an operation stay None."""
    id: CharacterId
    name: Optional[CharacterName] = None
    description: Optional[str] = None
    site_url: Optional[str] = None
    image: Optional[CharacterImage] = None

    @property
    def display_name(self) -> str:
        text = str(self.name) if self.name else ""
        return text or f"#{self.id}"

@dataclass(frozen=True)
class CharacterEdge:
    role: CharacterRole
    node: Optional[Character] = None
