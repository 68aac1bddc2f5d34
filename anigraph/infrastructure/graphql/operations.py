"""The fixed catalog of GraphQL operations the client can issue.

Each operation bundles its query text with the decoder for its `data`
payload. Variable builders live next to them so that callers never touch
wire names (`perPage`, `seasonYear`, upper-case season names...).

Two media shapes exist on purpose: by-id and search fetch one level of
relation/character edges, while the related-media lookup fetches full
detail for each related entry plus that entry's own one-level edges.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from anigraph.domain.models.common import PageEnvelope, PageIndex, SearchText
from anigraph.domain.models.character import Character, CharacterEdge
from anigraph.domain.models.media import Media, MediaSeason, RelatedMediaEdge
from anigraph.infrastructure.graphql import decoder

T = TypeVar("T")

# Page size is fixed; it is baked into the query text below.
PAGE_SIZE = 50

Variables = Dict[str, Any]


@dataclass(frozen=True)
class Operation(Generic[T]):
    """A named GraphQL query and the decoder for its `data` payload."""
    name: str
    query: str
    decode: Callable[[Any], Optional[T]]

    @property
    def is_paged(self) -> bool:
        return "$page" in self.query


# --- Shared selections ---

_SHALLOW_EDGES = """
    relations {
        edges {
            relationType(version: 2)
            node {
                id
                type
                title { romaji english native }
            }
        }
    }
    characters {
        edges {
            node {
                id
                name { full }
                image { large }
            }
            role
        }
    }
"""

_MEDIA_FIELDS = """
    id
    type
    title { romaji english native }
    description
    siteUrl
    startDate { year month day }
    endDate { year month day }
    isAdult
    episodes
    status
    genres
    averageScore
    season
    seasonYear
    coverImage { extraLarge large medium color }
"""

_CHARACTER_FIELDS = """
    id
    name { first middle last full native alternative }
    description
    siteUrl
    image { large medium }
"""

_PAGE_INFO = "pageInfo { currentPage hasNextPage }"

# --- Operations ---

GET_MEDIA_BY_ID: Operation[Media] = Operation(
    name="get-media-by-id",
    query=f"""
query ($id: Int) {{
    Media (id: $id) {{
        {_MEDIA_FIELDS}
        {_SHALLOW_EDGES}
    }}
}}
""",
    decode=decoder.decode_media_root,
)

SEARCH_MEDIA: Operation[PageEnvelope[Media]] = Operation(
    name="search-media",
    query=f"""
query ($search: String, $page: Int) {{
    Page (page: $page, perPage: {PAGE_SIZE}) {{
        {_PAGE_INFO}
        media (search: $search) {{
            {_MEDIA_FIELDS}
            {_SHALLOW_EDGES}
        }}
    }}
}}
""",
    decode=decoder.decode_media_page,
)

GET_SEASONAL_MEDIA: Operation[PageEnvelope[Media]] = Operation(
    name="get-seasonal-media",
    query=f"""
query ($season: MediaSeason, $year: Int, $page: Int) {{
    Page (page: $page, perPage: {PAGE_SIZE}) {{
        {_PAGE_INFO}
        media (season: $season, seasonYear: $year, sort: POPULARITY_DESC) {{
            {_MEDIA_FIELDS}
            {_SHALLOW_EDGES}
        }}
    }}
}}
""",
    decode=decoder.decode_media_page,
)

GET_RELATED_MEDIA: Operation[List[RelatedMediaEdge]] = Operation(
    name="get-related-media",
    query=f"""
query ($id: Int) {{
    Media (id: $id) {{
        relations {{
            edges {{
                relationType(version: 2)
                node {{
                    {_MEDIA_FIELDS}
                    {_SHALLOW_EDGES}
                }}
            }}
        }}
    }}
}}
""",
    decode=decoder.decode_related_media,
)

GET_CHARACTERS: Operation[List[CharacterEdge]] = Operation(
    name="get-characters",
    query=f"""
query ($id: Int) {{
    Media (id: $id) {{
        characters {{
            edges {{
                node {{
                    {_CHARACTER_FIELDS}
                }}
                role
            }}
        }}
    }}
}}
""",
    decode=decoder.decode_media_characters,
)

GET_CHARACTER_BY_ID: Operation[Character] = Operation(
    name="get-character-by-id",
    query=f"""
query ($id: Int) {{
    Character (id: $id) {{
        {_CHARACTER_FIELDS}
    }}
}}
""",
    decode=decoder.decode_character_root,
)

SEARCH_CHARACTERS: Operation[PageEnvelope[Character]] = Operation(
    name="search-characters",
    query=f"""
query ($search: String, $page: Int) {{
    Page (page: $page, perPage: {PAGE_SIZE}) {{
        {_PAGE_INFO}
        characters (search: $search) {{
            {_CHARACTER_FIELDS}
        }}
    }}
}}
""",
    decode=decoder.decode_character_page,
)

ALL_OPERATIONS = (
    GET_MEDIA_BY_ID, SEARCH_MEDIA, GET_SEASONAL_MEDIA, GET_RELATED_MEDIA,
    GET_CHARACTERS, GET_CHARACTER_BY_ID, SEARCH_CHARACTERS,
)

# --- Variable builders ---

def by_id_variables(entity_id: int) -> Variables:
    """Variables for the single-entity lookups (media, related, characters, character)."""
    return {"id": int(entity_id)}

def search_variables(search: SearchText) -> Callable[[PageIndex], Variables]:
    """Page-indexed variables for the media and character searches."""
    def build(page: PageIndex) -> Variables:
        return {"search": str(search), "page": int(page)}
    return build

def seasonal_variables(season: MediaSeason, year: int) -> Callable[[PageIndex], Variables]:
    def build(page: PageIndex) -> Variables:
        return {"season": season.wire_name, "year": int(year), "page": int(page)}
    return build
