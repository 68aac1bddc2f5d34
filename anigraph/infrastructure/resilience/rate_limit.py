"""Rate-limit state as reported by the catalog service.

The service advertises its quota through `X-RateLimit-*` response headers
and signals throttling with HTTP 429 plus an optional `Retry-After`. The
state here is never decremented locally: every value comes from the server.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from anigraph.domain.interfaces.transport import TransportResponse

logger = logging.getLogger(__name__)

LIMIT_HEADER = "X-RateLimit-Limit"
REMAINING_HEADER = "X-RateLimit-Remaining"
RESET_HEADER = "X-RateLimit-Reset"
RETRY_AFTER_HEADER = "Retry-After"


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        logger.debug(f"Ignoring non-integer rate-limit header value: {value!r}")
        return None


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Returns the Retry-After delay in seconds, or None when absent or not a delay."""
    if value is None:
        return None
    try:
        delay = float(value.strip())
    except ValueError:
        # HTTP-date form is not used by the service; treat it as unusable.
        logger.debug(f"Ignoring Retry-After value that is not a delay in seconds: {value!r}")
        return None
    if delay < 0:
        return None
    return delay


@dataclass
class RateLimitState:
    """Most recently observed quota for one client instance.

    Attributes:
        limit: Requests allowed per window.
        remaining: Requests left before `reset_at`.
        reset_at: When the window resets (UTC).
    """
    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset_at: Optional[datetime] = None

    def update_from_response(self, response: TransportResponse) -> None:
        """Applies whichever rate-limit headers the response carries."""
        limit = _parse_int(response.header(LIMIT_HEADER))
        if limit is not None:
            self.limit = limit

        remaining = _parse_int(response.header(REMAINING_HEADER))
        if remaining is not None:
            self.remaining = remaining

        reset = _parse_int(response.header(RESET_HEADER))
        if reset is not None:
            try:
                self.reset_at = datetime.fromtimestamp(reset, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                logger.debug(f"Ignoring out-of-range {RESET_HEADER} value: {reset}")

        logger.debug(f"Rate limit now: limit={self.limit} remaining={self.remaining} reset_at={self.reset_at}")

    def is_exhausted(self, now: datetime) -> bool:
        """True while the server reported no remaining calls and the window has not reset."""
        return self.remaining == 0 and self.reset_at is not None and self.reset_at > now

    def seconds_until_reset(self, now: datetime) -> float:
        if self.reset_at is None:
            return 0.0
        return max(0.0, (self.reset_at - now).total_seconds())
