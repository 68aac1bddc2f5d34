"""Unit tests for mapping GraphQL payloads onto domain models."""

import datetime

import pytest
from rich.color_triplet import ColorTriplet

from anigraph.domain.errors import DecodeError
from anigraph.domain.models.character import CharacterRole
from anigraph.domain.models.media import (
    FuzzyDate, MediaRelation, MediaSeason, MediaStatus, MediaType,
)
from anigraph.infrastructure.graphql import decoder


@pytest.mark.parametrize("wire, expected", [
    ("FINISHED", MediaStatus.FINISHED),
    ("RELEASING", MediaStatus.RELEASING),
    ("NOT_YET_RELEASED", MediaStatus.NOT_YET_RELEASED),
    ("CANCELLED", MediaStatus.CANCELLED),
    ("HIATUS", MediaStatus.HIATUS),
])
def test_decode_media_status(wire, expected):
    assert decoder.decode_enum(MediaStatus, wire) is expected


@pytest.mark.parametrize("wire, expected", [
    ("SIDE_STORY", MediaRelation.SIDE_STORY),
    ("SPIN_OFF", MediaRelation.SPIN_OFF),
    ("SOURCE", MediaRelation.SOURCE),
    ("COMPILATION", MediaRelation.COMPILATION),
    ("contains", MediaRelation.CONTAINS),
])
def test_decode_media_relation(wire, expected):
    assert decoder.decode_enum(MediaRelation, wire) is expected


def test_decode_enum_matches_variant_names_case_insensitively():
    assert decoder.decode_enum(MediaType, "ANIME") is MediaType.ANIME
    assert decoder.decode_enum(MediaSeason, "fall") is MediaSeason.FALL
    assert decoder.decode_enum(CharacterRole, "Main") is CharacterRole.MAIN
    assert decoder.decode_enum(MediaStatus, "NotYetReleased") is MediaStatus.NOT_YET_RELEASED


@pytest.mark.parametrize("wire", ["NOVEL_LENGTH", "", 3])
def test_decode_enum_rejects_unknown_values(wire):
    with pytest.raises(DecodeError):
        decoder.decode_enum(MediaStatus, wire)


def test_field_names_are_matched_case_insensitively():
    media = decoder.decode_media({"ID": 5, "SiteURL": "https://anilist.co/anime/5", "seasonyear": 2001})

    assert media.id == 5
    assert media.site_url == "https://anilist.co/anime/5"
    assert media.season_year == 2001


def test_decode_media_full_shape(sample_media):
    media = decoder.decode_media(sample_media)

    assert media.title.romaji == "ONE PIECE"
    assert media.status is MediaStatus.RELEASING
    assert media.season is MediaSeason.FALL
    assert media.genres == ("Action", "Adventure", "Comedy")
    assert media.is_adult is False
    assert media.episodes is None
    assert media.start_date.to_date() == datetime.date(1999, 10, 20)
    assert media.end_date == FuzzyDate()
    assert media.cover_image.extra_large.endswith("/xl/21.jpg")
    assert media.cover_image.color == ColorTriplet(0xE4, 0xA1, 0x5D)
    edge = media.relations[1]
    assert edge.relation_type is MediaRelation.SIDE_STORY
    assert edge.node.type is MediaType.ANIME
    assert media.characters[0].node.display_name == "Luffy Monkey"


def test_decode_media_leaves_absent_fields_none():
    media = decoder.decode_media({"id": 1})

    assert media.title is None
    assert media.relations is None
    assert media.characters is None
    assert media.cover_image is None
    assert media.display_title == "#1"


def test_missing_id_is_a_decode_error():
    with pytest.raises(DecodeError, match="id"):
        decoder.decode_media({"title": {"romaji": "Nameless"}})


def test_wrong_field_type_is_a_decode_error():
    with pytest.raises(DecodeError):
        decoder.decode_media({"id": 1, "episodes": "twelve"})
    with pytest.raises(DecodeError):
        decoder.decode_media({"id": True})


def test_year_only_fuzzy_date():
    date = decoder.decode_fuzzy_date({"year": 2024, "month": None, "day": None})

    assert date.year == 2024
    assert date.month is None
    assert not date.is_complete
    assert date.to_date() is None
    assert str(date) == "2024"


@pytest.mark.parametrize("color_hex, expected", [
    ("#ff0000", ColorTriplet(255, 0, 0)),
    ("#43aee4", ColorTriplet(0x43, 0xAE, 0xE4)),
    ("", None),
    (None, None),
])
def test_cover_image_color(color_hex, expected):
    cover = decoder.decode_cover_image({"large": "https://img/l.jpg", "color": color_hex})

    assert cover.color == expected
    assert cover.color_hex == color_hex


@pytest.mark.parametrize("color_hex", ["#zzzzzz", "red", "default", "#fff", "ff0000", "rgb(1,2,3)"])
def test_non_hex_color_is_a_decode_error(color_hex):
    with pytest.raises(DecodeError):
        decoder.parse_color(color_hex)


def test_upper_case_hex_color_is_accepted():
    assert decoder.parse_color("#FF0000") == ColorTriplet(255, 0, 0)


@pytest.mark.parametrize("enum_cls, wire, expected", [
    (MediaRelation, "spin_off", MediaRelation.SPIN_OFF),
    (MediaRelation, "Side_Story", MediaRelation.SIDE_STORY),
    (MediaStatus, "not_yet_released", MediaStatus.NOT_YET_RELEASED),
])
def test_override_table_is_case_insensitive(enum_cls, wire, expected):
    assert decoder.decode_enum(enum_cls, wire) is expected


def test_related_media_two_level_shape(sample_media):
    data = {"Media": {"relations": {"edges": [
        {"relationType": "PREQUEL", "node": sample_media},
        {"relationType": "SPIN_OFF", "node": None},
    ]}}}

    edges = decoder.decode_related_media(data)

    assert [e.relation_type for e in edges] == [MediaRelation.PREQUEL, MediaRelation.SPIN_OFF]
    assert edges[0].node.title.english == "ONE PIECE"
    assert edges[0].node.relations[0].relation_type is MediaRelation.SOURCE
    assert edges[0].node.relations[0].node.title.romaji == "ONE PIECE"
    assert edges[1].node is None


def test_related_media_without_relations_is_empty():
    assert decoder.decode_related_media({"Media": {"relations": None}}) == []
    assert decoder.decode_related_media({"Media": None}) == []


def test_character_edge_requires_role(sample_character):
    with pytest.raises(DecodeError):
        decoder.decode_character_edge({"node": sample_character})


def test_character_name_rendering(sample_character):
    character = decoder.decode_character(sample_character)

    assert str(character.name) == "Saitama"
    assert character.name.native == "サイタマ"
    nameless = decoder.decode_character({"id": 9, "name": {"first": "Monkey", "middle": "D.", "last": "Luffy"}})
    assert nameless.display_name == "Monkey D. Luffy"


def test_media_page_decoding():
    envelope = decoder.decode_media_page({"Page": {
        "pageInfo": {"currentPage": 2, "hasNextPage": True},
        "media": [{"id": 1}, {"id": 2}],
    }})

    assert envelope.current_page == 2
    assert envelope.has_next_page is True
    assert [m.id for m in envelope.items] == [1, 2]


def test_page_with_null_items_is_empty():
    envelope = decoder.decode_character_page({"Page": {
        "pageInfo": {"currentPage": 1, "hasNextPage": False},
        "characters": None,
    }})

    assert envelope.items == ()
    assert envelope.has_next_page is False


def test_absent_page_decodes_to_none():
    assert decoder.decode_media_page({"Page": None}) is None


def test_non_object_data_is_a_decode_error():
    with pytest.raises(DecodeError):
        decoder.decode_media_root(["not", "an", "object"])
