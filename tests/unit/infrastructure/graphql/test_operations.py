import pytest

from anigraph.domain.models.common import PageIndex, SearchText
from anigraph.domain.models.media import MediaSeason
from anigraph.infrastructure.graphql import operations


def test_operation_names_are_unique():
    names = [op.name for op in operations.ALL_OPERATIONS]
    assert len(names) == len(set(names)) == 7


@pytest.mark.parametrize("operation, paged", [
    (operations.GET_MEDIA_BY_ID, False),
    (operations.GET_RELATED_MEDIA, False),
    (operations.GET_CHARACTERS, False),
    (operations.GET_CHARACTER_BY_ID, False),
    (operations.SEARCH_MEDIA, True),
    (operations.GET_SEASONAL_MEDIA, True),
    (operations.SEARCH_CHARACTERS, True),
])
def test_paged_operations_request_fixed_page_size(operation, paged):
    assert operation.is_paged is paged
    if paged:
        assert f"perPage: {operations.PAGE_SIZE}" in operation.query
        assert "pageInfo { currentPage hasNextPage }" in operation.query


def test_media_shapes_request_cover_color_and_edges():
    query = operations.GET_MEDIA_BY_ID.query
    assert "coverImage { extraLarge large medium color }" in query
    assert "relationType(version: 2)" in query
    assert "role" in query


def test_related_media_requests_full_nodes_with_their_own_edges():
    query = operations.GET_RELATED_MEDIA.query
    # Full detail on the related node, then that node's own relation edges
    assert "description" in query
    assert query.count("relations {") == 2


def test_seasonal_query_sorts_by_popularity():
    assert "sort: POPULARITY_DESC" in operations.GET_SEASONAL_MEDIA.query


def test_by_id_variables():
    assert operations.by_id_variables(21) == {"id": 21}


def test_search_variables_are_built_per_page():
    build = operations.search_variables(SearchText("Frieren"))
    assert build(PageIndex(1)) == {"search": "Frieren", "page": 1}
    assert build(PageIndex(4)) == {"search": "Frieren", "page": 4}


@pytest.mark.parametrize("season, wire", [
    (MediaSeason.WINTER, "WINTER"),
    (MediaSeason.SPRING, "SPRING"),
    (MediaSeason.SUMMER, "SUMMER"),
    (MediaSeason.FALL, "FALL"),
])
def test_seasonal_variables_use_upper_case_season(season, wire):
    build = operations.seasonal_variables(season, 2024)
    assert build(PageIndex(2)) == {"season": wire, "year": 2024, "page": 2}
