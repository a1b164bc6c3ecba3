"""HTTP client wrappers for the urchain indexer API."""

from .client import UrchainClient
from .endpoints import ENDPOINTS, Endpoint, Field
from .errors import (
    ConfigurationError,
    NetworkError,
    RetryCancelledError,
    ServerError,
    UrchainError,
)
from .retry import CancellationToken, RetryPolicy

__all__ = [
    "UrchainClient",
    "UrchainError",
    "ConfigurationError",
    "ServerError",
    "NetworkError",
    "RetryCancelledError",
    "CancellationToken",
    "RetryPolicy",
    "ENDPOINTS",
    "Endpoint",
    "Field",
]
