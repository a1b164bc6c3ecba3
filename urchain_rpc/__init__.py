"""
Async client package for the urchain blockchain indexer.

Every typed accessor funnels through a single request/retry wrapper. See
DESIGN.md for full details.
"""

from urchain_rpc.config import UrchainConfig, default_config
from urchain_rpc.urchain_api import (
    CancellationToken,
    ConfigurationError,
    NetworkError,
    RetryCancelledError,
    ServerError,
    UrchainClient,
    UrchainError,
)

__all__ = [
    "CancellationToken",
    "ConfigurationError",
    "NetworkError",
    "RetryCancelledError",
    "ServerError",
    "UrchainClient",
    "UrchainConfig",
    "UrchainError",
    "default_config",
]
