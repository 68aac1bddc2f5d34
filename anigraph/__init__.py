"""anigraph: rate-limit-aware client for the AniList GraphQL media catalog."""

from anigraph.version import __version__
from anigraph.core.catalog_client import CatalogClient
from anigraph.core.pager import Pager
from anigraph.domain.errors import (
    CatalogError, DecodeError, GraphQLResponseError, HttpStatusError,
    OperationCancelledError, RetriesExhaustedError, TransportError,
)
from anigraph.infrastructure.resilience.cancellation import CancellationToken
from anigraph.infrastructure.resilience.rate_limit import RateLimitState

__all__ = [
    "__version__", "CatalogClient", "Pager", "CancellationToken", "RateLimitState",
    "CatalogError", "DecodeError", "GraphQLResponseError", "HttpStatusError",
    "OperationCancelledError", "RetriesExhaustedError", "TransportError",
]
