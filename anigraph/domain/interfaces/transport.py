"""Interface for the network transport used by the request dispatcher.

A transport performs exactly one request/response exchange. Retrying,
throttling and decoding are the dispatcher's job, not the transport's.
"""

import abc
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class TransportResponse:
    """Raw outcome of one exchange: status, headers and undecoded body."""
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(abc.ABC):
    """Abstract Base Class for sending one HTTP POST to the catalog endpoint."""

    @abc.abstractmethod
    async def send(self, url: str, body: bytes, headers: Dict[str, str]) -> TransportResponse:
        """Posts `body` to `url` and returns the raw response.

        Implementations must unwind promptly when the awaiting task is
        cancelled; the dispatcher cancels the exchange when the caller's
        cancellation token fires.

        Raises:
            TransportError: If no response could be obtained.
        """
        pass

    async def aclose(self) -> None:
        """Releases any pooled connections. No-op by default."""
        return None
