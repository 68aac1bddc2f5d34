"""Service for dispatching one GraphQL operation with quota awareness and retries.

Waits out an exhausted rate-limit window before sending, records the quota
reported by every response, and retries throttled (429) calls after the
server's Retry-After delay within a fixed number of attempts. Any other failure
is propagated to the caller immediately.

NOTE: a dispatcher is not safe for overlapping concurrent calls. Its
RateLimitState has a single writer; concurrent dispatches race on it and may
under- or over-wait. Use one dispatcher per concurrent caller, or serialize.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from anigraph.domain.errors import (
    DecodeError, GraphQLResponseError, HttpStatusError, RetriesExhaustedError, TransportError,
)
from anigraph.domain.events.api_events import (
    DomainEvent, RequestDeferred, RequestFailed, RequestInitiated, RequestSucceeded,
    RetriesExhausted, RetryScheduled,
)
from anigraph.domain.interfaces.transport import Transport, TransportResponse
from anigraph.infrastructure.graphql.operations import Operation
from anigraph.infrastructure.resilience.cancellation import CancellationToken
from anigraph.infrastructure.resilience.rate_limit import (
    RETRY_AFTER_HEADER, RateLimitState, parse_retry_after,
)
from anigraph.version import __version__

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_API_URL = "https://graphql.anilist.co"
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RESET_BUFFER_SECONDS = 0.5
TOO_MANY_REQUESTS = 429

EventListener = Callable[[DomainEvent], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RequestDispatcher:
    """Sends catalog operations through a Transport, honoring the service quota."""

    def __init__(
        self,
        transport: Transport,
        api_url: str = DEFAULT_API_URL,
        rate_limit: Optional[RateLimitState] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        reset_buffer_s: float = DEFAULT_RESET_BUFFER_SECONDS,
        raise_on_exhausted: bool = False,
        user_agent: Optional[str] = None,
        event_listener: Optional[EventListener] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initializes the RequestDispatcher.

        Args:
            transport: Performs the actual HTTP exchange.
            api_url: The GraphQL endpoint.
            rate_limit: Quota state owned by this dispatcher. A fresh one is created if None.
            max_attempts: Total send attempts per logical call (first try included).
            reset_buffer_s: Extra delay added after the rate-limit reset time.
            raise_on_exhausted: Raise RetriesExhaustedError instead of returning None
                when every attempt was throttled.
            user_agent: User-Agent header value.
            event_listener: Optional callback receiving every domain event.
            clock: Returns the current UTC time; replaced in tests.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.transport = transport
        self.api_url = api_url
        self.rate_limit = rate_limit if rate_limit is not None else RateLimitState()
        self.max_attempts = max_attempts
        self.reset_buffer_s = reset_buffer_s
        self.raise_on_exhausted = raise_on_exhausted
        self.event_listener = event_listener
        self._clock = clock
        self._headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": user_agent or f"anigraph/{__version__}",
        }

        logger.info(
            f"RequestDispatcher initialized: url={api_url}, max_attempts={max_attempts}, "
            f"reset_buffer={reset_buffer_s}s, raise_on_exhausted={raise_on_exhausted}"
        )

    def _dispatch_event(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self.event_listener is not None:
            self.event_listener(event)

    async def _wait_for_quota(self, operation: Operation[Any], token: CancellationToken) -> None:
        """Suspends until the rate-limit window resets when the server reported no calls left."""
        now = self._clock()
        if not self.rate_limit.is_exhausted(now):
            return
        wait_time = self.rate_limit.seconds_until_reset(now) + self.reset_buffer_s
        logger.info(f"Rate limit exhausted. Waiting {wait_time:.2f}s before sending '{operation.name}'.")
        self._dispatch_event(RequestDeferred(operation=operation.name, wait_time_seconds=wait_time))
        await token.sleep(wait_time)

    @staticmethod
    def _encode(operation: Operation[Any], variables: Mapping[str, Any]) -> bytes:
        return json.dumps({"query": operation.query, "variables": dict(variables)}).encode("utf-8")

    @staticmethod
    def _decode(operation: Operation[T], response: TransportResponse) -> Optional[T]:
        """Unwraps the `{data: ...}` envelope and hands `data` to the operation's decoder."""
        try:
            envelope = json.loads(response.body)
        except (UnicodeDecodeError, ValueError) as e:
            raise DecodeError(f"Response to '{operation.name}' is not valid JSON: {e}") from e
        if not isinstance(envelope, dict):
            raise DecodeError(f"Response to '{operation.name}' is not a JSON object")

        data = envelope.get("data")
        errors = envelope.get("errors")
        if data is None:
            if errors:
                raise GraphQLResponseError(errors)
            return None
        if errors:
            logger.warning(f"'{operation.name}' returned partial data with errors: {errors}")
        return operation.decode(data)

    async def dispatch(
        self,
        operation: Operation[T],
        variables: Mapping[str, Any],
        cancel: Optional[CancellationToken] = None,
    ) -> Optional[T]:
        """Sends `operation` and returns its decoded data.

        Args:
            operation: The catalog operation to run.
            variables: GraphQL variables for the operation.
            cancel: Optional token; firing it aborts any wait or in-flight exchange.

        Returns:
            The decoded payload, or None if the service returned no data or
            (unless raise_on_exhausted is set) every attempt was throttled.

        Raises:
            TransportError: Connection failure or a non-retryable HTTP status.
            DecodeError: The response could not be decoded.
            RetriesExhaustedError: Every attempt was throttled and raise_on_exhausted is set.
            OperationCancelledError: The token fired while the call was suspended.
        """
        token = cancel or CancellationToken()
        token.raise_if_cancelled()
        payload = self._encode(operation, variables)

        # 1. Respect the advertised quota once per logical call; retries only wait for Retry-After
        await self._wait_for_quota(operation, token)

        for attempt in range(1, self.max_attempts + 1):
            # 2. Send
            self._dispatch_event(RequestInitiated(operation=operation.name, attempt_number=attempt))
            start_time = time.perf_counter()
            try:
                response = await token.run(self.transport.send(self.api_url, payload, self._headers))
            except TransportError as e:
                logger.error(f"Transport error on '{operation.name}' (attempt {attempt}): {e}")
                self._dispatch_event(RequestFailed(
                    operation=operation.name, error_type=type(e).__name__, error_message=str(e),
                    status_code=getattr(e, "status_code", None),
                ))
                raise
            latency_ms = (time.perf_counter() - start_time) * 1000

            # 3. The server is authoritative on quota, whatever the outcome
            self.rate_limit.update_from_response(response)

            # 4. Throttled: wait as instructed and try again
            if response.status_code == TOO_MANY_REQUESTS:
                delay = parse_retry_after(response.header(RETRY_AFTER_HEADER))
                if delay is not None:
                    if attempt >= self.max_attempts:
                        break
                    logger.warning(
                        f"'{operation.name}' throttled on attempt {attempt}/{self.max_attempts}. "
                        f"Waiting {delay:.2f}s..."
                    )
                    self._dispatch_event(RetryScheduled(
                        operation=operation.name, attempt_number=attempt, delay_seconds=delay,
                    ))
                    await token.sleep(delay)
                    continue
                logger.warning(f"'{operation.name}' throttled without a usable {RETRY_AFTER_HEADER} header.")

            # 5. Anything else that is not a success is final
            if not response.is_success:
                error = HttpStatusError(response.status_code, response.body)
                logger.error(f"'{operation.name}' failed: {error}")
                self._dispatch_event(RequestFailed(
                    operation=operation.name, error_type=type(error).__name__,
                    error_message=str(error), status_code=response.status_code,
                ))
                raise error

            # 6. Success
            result = self._decode(operation, response)
            logger.debug(f"'{operation.name}' succeeded in {latency_ms:.2f}ms (attempt {attempt}).")
            self._dispatch_event(RequestSucceeded(
                operation=operation.name, latency_ms=latency_ms, remaining_quota=self.rate_limit.remaining,
            ))
            return result

        logger.warning(f"Giving up on '{operation.name}' after {self.max_attempts} throttled attempts.")
        self._dispatch_event(RetriesExhausted(operation=operation.name, attempts=self.max_attempts))
        if self.raise_on_exhausted:
            raise RetriesExhaustedError(operation.name, self.max_attempts)
        return None
