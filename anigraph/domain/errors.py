"""Exception hierarchy for the catalog client.

Transport and decode failures propagate to the caller as-is; throttling is
handled inside the dispatcher and only surfaces as RetriesExhaustedError
when strict mode is enabled. Cancellation is kept separate from both.
"""

from typing import Any, Optional, Sequence


class CatalogError(Exception):
    """Base class for every error raised by anigraph."""


class TransportError(CatalogError):
    """The request could not be exchanged with the service (connection, timeout...)."""


class HttpStatusError(TransportError):
    """The service answered with a non-success status that is not retried."""
    def __init__(self, status_code: int, body: bytes = b""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Service responded with HTTP {status_code}")


class RetriesExhaustedError(CatalogError):
    """Raised (strict mode only) when every attempt was throttled with 429."""
    def __init__(self, operation: str, attempts: int):
        self.operation = operation
        self.attempts = attempts
        super().__init__(f"Gave up on '{operation}' after {attempts} throttled attempts")


class DecodeError(CatalogError):
    """The response body was not valid JSON or did not have the expected shape."""


class GraphQLResponseError(DecodeError):
    """The service returned GraphQL errors and no data."""
    def __init__(self, errors: Sequence[Any]):
        self.errors = list(errors)
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in self.errors
        )
        super().__init__(f"GraphQL errors: {messages}")


class OperationCancelledError(CatalogError):
    """The caller's cancellation token fired while the operation was suspended."""
    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Operation was cancelled")
