"""Consumer-facing client for the AniList media catalog.

Single-record calls return the decoded entity (or None); listing calls
return a Pager that fetches pages lazily as it is iterated. Every call
accepts an optional CancellationToken.

Concurrency: a client owns one RateLimitState and is NOT safe for
overlapping calls. Overlapping calls race on the quota state and may under-
or over-wait; use one client per concurrent caller or serialize access.
"""

import logging
from typing import List, Optional, Union

from anigraph.domain.events.api_events import DomainEvent
from anigraph.domain.interfaces.transport import Transport
from anigraph.domain.models.character import Character, CharacterEdge
from anigraph.domain.models.common import CharacterId, MediaId, SearchText
from anigraph.domain.models.media import Media, MediaSeason, RelatedMediaEdge
from anigraph.core.pager import Pager
from anigraph.infrastructure.config import settings
from anigraph.infrastructure.graphql import operations
from anigraph.infrastructure.http.httpx_transport import HttpxTransport
from anigraph.infrastructure.resilience.cancellation import CancellationToken
from anigraph.infrastructure.resilience.dispatcher import EventListener, RequestDispatcher
from anigraph.infrastructure.resilience.rate_limit import RateLimitState

logger = logging.getLogger(__name__)


class CatalogClient:
    """Fetches media and characters from the catalog service."""

    def __init__(self, dispatcher: RequestDispatcher, owns_transport: bool = False):
        """Initializes the client around an already-configured dispatcher.

        Args:
            dispatcher: The dispatcher every operation goes through.
            owns_transport: Close the dispatcher's transport in aclose().
        """
        self.dispatcher = dispatcher
        self._owns_transport = owns_transport

    @classmethod
    def create(
        cls,
        transport: Optional[Transport] = None,
        event_listener: Optional[EventListener] = None,
        **dispatcher_options,
    ) -> "CatalogClient":
        """Builds a client with its own dispatcher.

        An httpx transport is created (and later closed by the client) when
        `transport` is None. Remaining keyword arguments go to RequestDispatcher.
        """
        owns_transport = transport is None
        dispatcher = RequestDispatcher(
            transport=transport or HttpxTransport(),
            event_listener=event_listener,
            **dispatcher_options,
        )
        return cls(dispatcher, owns_transport=owns_transport)

    @classmethod
    def from_config(
        cls,
        transport: Optional[Transport] = None,
        event_listener: Optional[EventListener] = None,
    ) -> "CatalogClient":
        """Builds a client from the loaded configuration (see infrastructure.config.settings)."""
        owns_transport = transport is None
        dispatcher = RequestDispatcher(
            transport=transport or HttpxTransport(timeout_s=settings.get_timeout_seconds()),
            api_url=settings.get_api_url(),
            max_attempts=settings.get_max_attempts(),
            reset_buffer_s=settings.get_rate_limit_buffer_seconds(),
            raise_on_exhausted=settings.get_raise_on_exhausted(),
            user_agent=settings.get_user_agent(),
            event_listener=event_listener,
        )
        return cls(dispatcher, owns_transport=owns_transport)

    # --- Lifecycle ---

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.dispatcher.transport.aclose()

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def rate_limit(self) -> RateLimitState:
        """Quota most recently reported by the service."""
        return self.dispatcher.rate_limit

    # --- Single-record operations ---

    async def get_media_by_id(self, media_id: int, cancel: Optional[CancellationToken] = None) -> Optional[Media]:
        """Gets one media entry with its relation and character edges.

        Returns None when the service has no data for the id, or when every
        attempt was throttled (unless the dispatcher raises on exhaustion).
        """
        logger.debug(f"Fetching media {media_id}")
        return await self.dispatcher.dispatch(
            operations.GET_MEDIA_BY_ID, operations.by_id_variables(MediaId(media_id)), cancel
        )

    async def get_related_media(
        self, media: Union[int, Media], cancel: Optional[CancellationToken] = None
    ) -> List[RelatedMediaEdge]:
        """Gets the sequels, prequels, adaptations... of a media entry.

        Each related node carries full detail plus its own relation and
        character edges.
        """
        media_id = media.id if isinstance(media, Media) else MediaId(media)
        logger.debug(f"Fetching related media of {media_id}")
        edges = await self.dispatcher.dispatch(
            operations.GET_RELATED_MEDIA, operations.by_id_variables(media_id), cancel
        )
        return edges or []

    async def get_characters(self, media_id: int, cancel: Optional[CancellationToken] = None) -> List[CharacterEdge]:
        """Gets every character of a media entry with their role."""
        logger.debug(f"Fetching characters of media {media_id}")
        edges = await self.dispatcher.dispatch(
            operations.GET_CHARACTERS, operations.by_id_variables(MediaId(media_id)), cancel
        )
        return edges or []

    async def get_character_by_id(
        self, character_id: int, cancel: Optional[CancellationToken] = None
    ) -> Optional[Character]:
        logger.debug(f"Fetching character {character_id}")
        return await self.dispatcher.dispatch(
            operations.GET_CHARACTER_BY_ID, operations.by_id_variables(CharacterId(character_id)), cancel
        )

    # --- Streaming operations ---

    def search_media(self, search: str, cancel: Optional[CancellationToken] = None) -> Pager[Media]:
        """Searches media by title; results are fetched page by page while iterated."""
        return Pager(
            self.dispatcher, operations.SEARCH_MEDIA,
            operations.search_variables(SearchText(search)), cancel,
        )

    def get_seasonal_media(
        self, season: MediaSeason, year: int, cancel: Optional[CancellationToken] = None
    ) -> Pager[Media]:
        """Lists media airing in a season, most popular first."""
        return Pager(
            self.dispatcher, operations.GET_SEASONAL_MEDIA,
            operations.seasonal_variables(season, year), cancel,
        )

    def search_characters(self, search: str, cancel: Optional[CancellationToken] = None) -> Pager[Character]:
        return Pager(
            self.dispatcher, operations.SEARCH_CHARACTERS,
            operations.search_variables(SearchText(search)), cancel,
        )


def log_event(event: DomainEvent) -> None:
    """Event listener that records dispatcher events at INFO level."""
    logger.info(f"{type(event).__name__}: {event}")
