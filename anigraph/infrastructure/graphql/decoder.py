"""Maps raw GraphQL `data` payloads onto the domain models.

Field names are matched case-insensitively against the camelCase wire names.
Enumerations are mapped from wire strings (`FINISHED`, `SIDE_STORY`, ...)
through an explicit override table first, then by a case-insensitive match
against the variant names. Absent optional fields stay None.

Every structural surprise raises DecodeError; nothing is silently defaulted.
"""

import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from rich.color import Color, ColorParseError
from rich.color_triplet import ColorTriplet

from anigraph.domain.errors import DecodeError
from anigraph.domain.models.common import CharacterId, MediaId, PageEnvelope, PageIndex, PageInfo
from anigraph.domain.models.character import (
    Character, CharacterEdge, CharacterImage, CharacterName, CharacterRole,
)
from anigraph.domain.models.media import (
    CoverImage, FuzzyDate, Media, MediaEdge, MediaEdgeNode, MediaRelation,
    MediaSeason, MediaStatus, MediaTitle, MediaType, RelatedMediaEdge,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)
T = TypeVar("T")

_HEX_COLOR = re.compile(r"#[0-9a-fA-F]{6}")

# Wire strings that do not reduce to a variant name by case-folding alone.
_WIRE_OVERRIDES: Dict[Type[Enum], Dict[str, Enum]] = {
    MediaStatus: {
        "NOT_YET_RELEASED": MediaStatus.NOT_YET_RELEASED,
    },
    MediaRelation: {
        "SIDE_STORY": MediaRelation.SIDE_STORY,
        "SPIN_OFF": MediaRelation.SPIN_OFF,
    },
}

# --- Primitive helpers ---

def _fields(raw: Any, where: str) -> Dict[str, Any]:
    """Returns the object's fields keyed by lower-cased name."""
    if not isinstance(raw, Mapping):
        raise DecodeError(f"{where}: expected an object, got {type(raw).__name__}")
    return {str(key).lower(): value for key, value in raw.items()}

def _get(fields: Mapping[str, Any], name: str) -> Any:
    return fields.get(name.lower())

def _opt_str(fields: Mapping[str, Any], name: str, where: str) -> Optional[str]:
    value = _get(fields, name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{where}.{name}: expected a string, got {type(value).__name__}")
    return value

def _opt_int(fields: Mapping[str, Any], name: str, where: str) -> Optional[int]:
    value = _get(fields, name)
    if value is None:
        return None
    # bool is an int subclass; the service never sends one for a numeric field
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{where}.{name}: expected an integer, got {type(value).__name__}")
    return value

def _req_int(fields: Mapping[str, Any], name: str, where: str) -> int:
    value = _opt_int(fields, name, where)
    if value is None:
        raise DecodeError(f"{where}.{name}: required field is missing")
    return value

def _opt_bool(fields: Mapping[str, Any], name: str, where: str) -> Optional[bool]:
    value = _get(fields, name)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise DecodeError(f"{where}.{name}: expected a boolean, got {type(value).__name__}")
    return value

def _opt_str_tuple(fields: Mapping[str, Any], name: str, where: str) -> Optional[Tuple[str, ...]]:
    value = _get(fields, name)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DecodeError(f"{where}.{name}: expected a list of strings")
    return tuple(value)

def _opt_obj(fields: Mapping[str, Any], name: str, where: str, decode: Callable[[Any, str], T]) -> Optional[T]:
    value = _get(fields, name)
    if value is None:
        return None
    return decode(value, f"{where}.{name}")

def _list(raw: Any, where: str, decode: Callable[[Any, str], T]) -> Tuple[T, ...]:
    if not isinstance(raw, list):
        raise DecodeError(f"{where}: expected a list, got {type(raw).__name__}")
    return tuple(decode(item, f"{where}[{i}]") for i, item in enumerate(raw))

def _connection_edges(fields: Mapping[str, Any], name: str, where: str,
                      decode: Callable[[Any, str], T]) -> Optional[Tuple[T, ...]]:
    """Decodes `name { edges [...] }`; None when the connection or its edges are absent."""
    connection = _get(fields, name)
    if connection is None:
        return None
    edges = _get(_fields(connection, f"{where}.{name}"), "edges")
    if edges is None:
        return None
    return _list(edges, f"{where}.{name}.edges", decode)

# --- Enumerations and derived values ---

def decode_enum(enum_cls: Type[E], wire: Any) -> E:
    """Maps a wire string onto a variant of `enum_cls`.

    Raises:
        DecodeError: If the string matches no variant.
    """
    if not isinstance(wire, str):
        raise DecodeError(f"{enum_cls.__name__}: expected a string, got {type(wire).__name__}")
    override = _WIRE_OVERRIDES.get(enum_cls, {}).get(wire.upper())
    if override is not None:
        return override  # type: ignore[return-value]
    folded = wire.lower()
    for member in enum_cls:
        if member.value.lower() == folded:
            return member
    raise DecodeError(f"Unknown {enum_cls.__name__} value: {wire!r}")

def _opt_enum(fields: Mapping[str, Any], name: str, enum_cls: Type[E]) -> Optional[E]:
    value = _get(fields, name)
    return None if value is None else decode_enum(enum_cls, value)

def _req_enum(fields: Mapping[str, Any], name: str, enum_cls: Type[E], where: str) -> E:
    value = _get(fields, name)
    if value is None:
        raise DecodeError(f"{where}.{name}: required field is missing")
    return decode_enum(enum_cls, value)

def parse_color(color_hex: Optional[str]) -> Optional[ColorTriplet]:
    """Derives an RGB triplet from a hex string such as '#ff0000'; None if absent or empty."""
    if not color_hex:
        return None
    # Color.parse also accepts style names ('red', 'default'); only #rrggbb is valid here
    if not _HEX_COLOR.fullmatch(color_hex):
        raise DecodeError(f"Invalid cover image color {color_hex!r}: expected '#rrggbb'")
    try:
        return Color.parse(color_hex).get_truecolor()
    except ColorParseError as e:
        raise DecodeError(f"Invalid cover image color {color_hex!r}: {e}") from e

# --- Value objects ---

def decode_fuzzy_date(raw: Any, where: str = "FuzzyDate") -> FuzzyDate:
    fields = _fields(raw, where)
    return FuzzyDate(
        year=_opt_int(fields, "year", where),
        month=_opt_int(fields, "month", where),
        day=_opt_int(fields, "day", where),
    )

def decode_title(raw: Any, where: str = "MediaTitle") -> MediaTitle:
    fields = _fields(raw, where)
    return MediaTitle(
        romaji=_opt_str(fields, "romaji", where),
        english=_opt_str(fields, "english", where),
        native=_opt_str(fields, "native", where),
    )

def decode_cover_image(raw: Any, where: str = "CoverImage") -> CoverImage:
    fields = _fields(raw, where)
    color_hex = _opt_str(fields, "color", where)
    return CoverImage(
        extra_large=_opt_str(fields, "extraLarge", where),
        large=_opt_str(fields, "large", where),
        medium=_opt_str(fields, "medium", where),
        color_hex=color_hex,
        color=parse_color(color_hex),
    )

# --- Characters ---

def decode_character_name(raw: Any, where: str = "CharacterName") -> CharacterName:
    fields = _fields(raw, where)
    return CharacterName(
        first=_opt_str(fields, "first", where),
        middle=_opt_str(fields, "middle", where),
        last=_opt_str(fields, "last", where),
        full=_opt_str(fields, "full", where),
        native=_opt_str(fields, "native", where),
        alternative=_opt_str_tuple(fields, "alternative", where),
    )

def decode_character_image(raw: Any, where: str = "CharacterImage") -> CharacterImage:
    fields = _fields(raw, where)
    return CharacterImage(
        large=_opt_str(fields, "large", where),
        medium=_opt_str(fields, "medium", where),
    )

def decode_character(raw: Any, where: str = "Character") -> Character:
    fields = _fields(raw, where)
    return Character(
        id=CharacterId(_req_int(fields, "id", where)),
        name=_opt_obj(fields, "name", where, decode_character_name),
        description=_opt_str(fields, "description", where),
        site_url=_opt_str(fields, "siteUrl", where),
        image=_opt_obj(fields, "image", where, decode_character_image),
    )

def decode_character_edge(raw: Any, where: str = "CharacterEdge") -> CharacterEdge:
    fields = _fields(raw, where)
    return CharacterEdge(
        role=_req_enum(fields, "role", CharacterRole, where),
        node=_opt_obj(fields, "node", where, decode_character),
    )

# --- Media ---

def decode_media_edge_node(raw: Any, where: str = "MediaEdgeNode") -> MediaEdgeNode:
    fields = _fields(raw, where)
    return MediaEdgeNode(
        id=MediaId(_req_int(fields, "id", where)),
        type=_opt_enum(fields, "type", MediaType),
        title=_opt_obj(fields, "title", where, decode_title),
    )

def decode_media_edge(raw: Any, where: str = "MediaEdge") -> MediaEdge:
    fields = _fields(raw, where)
    return MediaEdge(
        relation_type=_req_enum(fields, "relationType", MediaRelation, where),
        node=_opt_obj(fields, "node", where, decode_media_edge_node),
    )

def decode_media(raw: Any, where: str = "Media") -> Media:
    """Decodes the full media shape with its one-level relation and character edges."""
    fields = _fields(raw, where)
    return Media(
        id=MediaId(_req_int(fields, "id", where)),
        type=_opt_enum(fields, "type", MediaType),
        title=_opt_obj(fields, "title", where, decode_title),
        description=_opt_str(fields, "description", where),
        site_url=_opt_str(fields, "siteUrl", where),
        start_date=_opt_obj(fields, "startDate", where, decode_fuzzy_date),
        end_date=_opt_obj(fields, "endDate", where, decode_fuzzy_date),
        is_adult=_opt_bool(fields, "isAdult", where),
        episodes=_opt_int(fields, "episodes", where),
        status=_opt_enum(fields, "status", MediaStatus),
        genres=_opt_str_tuple(fields, "genres", where),
        average_score=_opt_int(fields, "averageScore", where),
        season=_opt_enum(fields, "season", MediaSeason),
        season_year=_opt_int(fields, "seasonYear", where),
        cover_image=_opt_obj(fields, "coverImage", where, decode_cover_image),
        relations=_connection_edges(fields, "relations", where, decode_media_edge),
        characters=_connection_edges(fields, "characters", where, decode_character_edge),
    )

def decode_related_media_edge(raw: Any, where: str = "RelatedMediaEdge") -> RelatedMediaEdge:
    fields = _fields(raw, where)
    return RelatedMediaEdge(
        relation_type=_req_enum(fields, "relationType", MediaRelation, where),
        node=_opt_obj(fields, "node", where, decode_media),
    )

# --- Operation-level payloads ---

def decode_page_info(raw: Any, where: str = "PageInfo") -> PageInfo:
    fields = _fields(raw, where)
    current = _opt_int(fields, "currentPage", where)
    has_next = _opt_bool(fields, "hasNextPage", where)
    return PageInfo(
        current_page=PageIndex(current) if current is not None else None,
        has_next_page=bool(has_next),
    )

def _decode_page(data: Any, items_field: str, decode_item: Callable[[Any, str], T]) -> Optional[PageEnvelope[T]]:
    page = _get(_fields(data, "data"), "Page")
    if page is None:
        return None
    fields = _fields(page, "Page")
    page_info = _opt_obj(fields, "pageInfo", "Page", decode_page_info)
    if page_info is None:
        # Without pageInfo there is no way to know about further pages.
        page_info = PageInfo(current_page=None, has_next_page=False)
    raw_items = _get(fields, items_field)
    items = () if raw_items is None else _list(raw_items, f"Page.{items_field}", decode_item)
    return PageEnvelope(page_info=page_info, items=items)

def decode_media_page(data: Any) -> Optional[PageEnvelope[Media]]:
    return _decode_page(data, "media", decode_media)

def decode_character_page(data: Any) -> Optional[PageEnvelope[Character]]:
    return _decode_page(data, "characters", decode_character)

def decode_media_root(data: Any) -> Optional[Media]:
    return _opt_obj(_fields(data, "data"), "Media", "data", decode_media)

def decode_character_root(data: Any) -> Optional[Character]:
    return _opt_obj(_fields(data, "data"), "Character", "data", decode_character)

def decode_related_media(data: Any) -> List[RelatedMediaEdge]:
    media = _get(_fields(data, "data"), "Media")
    if media is None:
        return []
    edges = _connection_edges(_fields(media, "Media"), "relations", "Media", decode_related_media_edge)
    return list(edges or ())

def decode_media_characters(data: Any) -> List[CharacterEdge]:
    media = _get(_fields(data, "data"), "Media")
    if media is None:
        return []
    edges = _connection_edges(_fields(media, "Media"), "characters", "Media", decode_character_edge)
    return list(edges or ())
