import json
import os
from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner

from anigraph.domain.interfaces.transport import Transport, TransportResponse
from anigraph.infrastructure.config import settings


class FakeTransport(Transport):
    """Transport double that replays scripted responses and records every request.

    Each scripted entry is either a TransportResponse or an exception to raise.
    """

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.requests: List[Dict[str, Any]] = []
        self.closed = False

    async def send(self, url: str, body: bytes, headers: Dict[str, str]) -> TransportResponse:
        self.requests.append({"url": url, "body": json.loads(body), "headers": dict(headers)})
        if not self.responses:
            raise AssertionError("FakeTransport ran out of scripted responses")
        outcome = self.responses.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def variables(self, index: int) -> Dict[str, Any]:
        return self.requests[index]["body"]["variables"]


def json_response(payload: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> TransportResponse:
    """Builds a TransportResponse carrying `payload` as JSON."""
    return TransportResponse(status_code=status_code, headers=headers or {}, body=json.dumps(payload).encode())


def throttled(retry_after: Optional[str] = "0", headers: Optional[Dict[str, str]] = None) -> TransportResponse:
    """A 429 response, with a Retry-After header unless `retry_after` is None."""
    all_headers = dict(headers or {})
    if retry_after is not None:
        all_headers["Retry-After"] = retry_after
    return TransportResponse(status_code=429, headers=all_headers, body=b'{"errors":[{"message":"Too Many Requests."}]}')


def media_page(ids: List[int], has_next_page: bool, current_page: int = 1) -> TransportResponse:
    """A search-media page whose items carry only ids."""
    return json_response({
        "data": {
            "Page": {
                "pageInfo": {"currentPage": current_page, "hasNextPage": has_next_page},
                "media": [{"id": media_id} for media_id in ids],
            }
        }
    })


SAMPLE_MEDIA: Dict[str, Any] = {
    "id": 21,
    "type": "ANIME",
    "title": {"romaji": "ONE PIECE", "english": "ONE PIECE", "native": "ONE PIECE"},
    "description": "Gold Roger was known as the Pirate King.",
    "siteUrl": "https://anilist.co/anime/21",
    "startDate": {"year": 1999, "month": 10, "day": 20},
    "endDate": {"year": None, "month": None, "day": None},
    "isAdult": False,
    "episodes": None,
    "status": "RELEASING",
    "genres": ["Action", "Adventure", "Comedy"],
    "averageScore": 88,
    "season": "FALL",
    "seasonYear": 1999,
    "coverImage": {
        "extraLarge": "https://img.anili.st/cover/xl/21.jpg",
        "large": "https://img.anili.st/cover/l/21.jpg",
        "medium": "https://img.anili.st/cover/m/21.jpg",
        "color": "#e4a15d",
    },
    "relations": {
        "edges": [
            {"relationType": "SOURCE", "node": {"id": 30013, "type": "MANGA", "title": {"romaji": "ONE PIECE"}}},
            {"relationType": "SIDE_STORY", "node": {"id": 459, "type": "ANIME", "title": {"romaji": "ONE PIECE: Taose! Kaizoku Ganzack"}}},
        ]
    },
    "characters": {
        "edges": [
            {"role": "MAIN", "node": {"id": 40, "name": {"full": "Luffy Monkey"}, "image": {"large": "https://img.anili.st/c/40.png"}}},
        ]
    },
}

SAMPLE_CHARACTER: Dict[str, Any] = {
    "id": 73935,
    "name": {
        "first": "Saitama", "middle": None, "last": None, "full": "Saitama",
        "native": "サイタマ", "alternative": ["Caped Baldy"],
    },
    "description": "A hero for fun.",
    "siteUrl": "https://anilist.co/character/73935",
    "image": {"large": "https://img.anili.st/c/l/73935.png", "medium": "https://img.anili.st/c/m/73935.png"},
}


@pytest.fixture
def sample_media() -> Dict[str, Any]:
    return json.loads(json.dumps(SAMPLE_MEDIA))


@pytest.fixture
def sample_character() -> Dict[str, Any]:
    return json.loads(json.dumps(SAMPLE_CHARACTER))


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch):
    """Keeps configuration overrides and ANIGRAPH_* variables from leaking between tests."""
    settings.reset_configuration()
    for name in [n for n in list(os.environ) if n.startswith(settings.ENV_PREFIX)]:
        monkeypatch.delenv(name, raising=False)
    yield
    settings.reset_configuration()
