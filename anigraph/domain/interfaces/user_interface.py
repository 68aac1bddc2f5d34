"""Interface for presenting catalog results to the user.

Used by the demonstration CLI so that rendering can be swapped or mocked.
"""

import abc
from typing import Any, Sequence

from anigraph.domain.models.media import Media, RelatedMediaEdge
from anigraph.domain.models.character import Character, CharacterEdge


class UserInterface(abc.ABC):
    """Abstract Base Class for user-facing output."""

    @abc.abstractmethod
    def display_media(self, media: Media, **kwargs: Any) -> None:
        """Displays the full detail of a single media entry."""
        pass

    @abc.abstractmethod
    def display_media_list(self, media: Sequence[Media], title: str = "Media", **kwargs: Any) -> None:
        """Displays several media entries as a compact listing."""
        pass

    @abc.abstractmethod
    def display_related_media(self, edges: Sequence[RelatedMediaEdge], **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_character(self, character: Character, **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_character_list(self, characters: Sequence[Character], title: str = "Characters", **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_character_edges(self, edges: Sequence[CharacterEdge], **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        pass
