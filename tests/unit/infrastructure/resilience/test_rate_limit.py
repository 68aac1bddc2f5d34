from datetime import datetime, timedelta, timezone

import pytest

from anigraph.domain.interfaces.transport import TransportResponse
from anigraph.infrastructure.resilience.rate_limit import RateLimitState, parse_retry_after

NOW = datetime(2024, 4, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_update_reads_all_headers_case_insensitively():
    response = TransportResponse(status_code=200, headers={
        "x-ratelimit-limit": "90",
        "X-RATELIMIT-REMAINING": "12",
        "X-RateLimit-Reset": str(int(NOW.timestamp()) + 30),
    })
    state = RateLimitState()

    state.update_from_response(response)

    assert state.limit == 90
    assert state.remaining == 12
    assert state.reset_at == NOW + timedelta(seconds=30)


def test_update_keeps_previous_values_for_missing_headers():
    """Each header is applied on its own; an absent one leaves the old value."""
    state = RateLimitState(limit=90, remaining=10, reset_at=NOW)

    state.update_from_response(TransportResponse(status_code=200, headers={"X-RateLimit-Remaining": "9"}))

    assert state.limit == 90
    assert state.remaining == 9
    assert state.reset_at == NOW


def test_update_ignores_malformed_values():
    state = RateLimitState(limit=90, remaining=10)

    state.update_from_response(TransportResponse(status_code=200, headers={
        "X-RateLimit-Limit": "ninety", "X-RateLimit-Remaining": "",
    }))

    assert state.limit == 90
    assert state.remaining == 10


def test_is_exhausted_only_when_no_calls_left_before_reset():
    assert RateLimitState(remaining=0, reset_at=NOW + timedelta(seconds=5)).is_exhausted(NOW)
    assert not RateLimitState(remaining=1, reset_at=NOW + timedelta(seconds=5)).is_exhausted(NOW)
    assert not RateLimitState(remaining=0, reset_at=NOW - timedelta(seconds=5)).is_exhausted(NOW)
    assert not RateLimitState(remaining=0, reset_at=None).is_exhausted(NOW)
    assert not RateLimitState().is_exhausted(NOW)


def test_seconds_until_reset_never_negative():
    assert RateLimitState(reset_at=NOW + timedelta(seconds=7)).seconds_until_reset(NOW) == 7.0
    assert RateLimitState(reset_at=NOW - timedelta(seconds=7)).seconds_until_reset(NOW) == 0.0
    assert RateLimitState().seconds_until_reset(NOW) == 0.0


@pytest.mark.parametrize("value, expected", [
    ("3", 3.0),
    (" 1.5 ", 1.5),
    ("0", 0.0),
    (None, None),
    ("-1", None),
    ("soon", None),
    ("Wed, 21 Oct 2015 07:28:00 GMT", None),
])
def test_parse_retry_after(value, expected):
    assert parse_retry_after(value) == expected
