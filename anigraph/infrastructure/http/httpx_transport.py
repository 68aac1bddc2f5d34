"""Concrete implementation of the Transport interface using httpx.

Hides the httpx client and translates its failures into TransportError so
the dispatcher never sees library-specific exceptions.
"""

import logging
from typing import Dict, Optional

import httpx

from anigraph.domain.errors import TransportError
from anigraph.domain.interfaces.transport import Transport, TransportResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def build_async_client(
    timeout_s: float = DEFAULT_TIMEOUT_SECONDS,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Creates the `httpx.AsyncClient` used for catalog requests.

    `transport` lets tests plug in an `httpx.MockTransport`.
    """
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout_s), transport=transport)


class HttpxTransport(Transport):
    """Transport backed by an `httpx.AsyncClient`."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout_s: float = DEFAULT_TIMEOUT_SECONDS):
        """Initializes the transport.

        Args:
            client: An existing client to reuse. Its lifecycle stays with the caller.
            timeout_s: Timeout for a client created here.
        """
        self._owns_client = client is None
        self.client = client or build_async_client(timeout_s)
        logger.debug(f"HttpxTransport initialized (owns_client={self._owns_client})")

    async def send(self, url: str, body: bytes, headers: Dict[str, str]) -> TransportResponse:
        try:
            response = await self.client.post(url, content=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"HTTP exchange with {url} failed: {type(e).__name__} - {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e
        return TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers.items()),
            body=response.content,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
