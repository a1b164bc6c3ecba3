"""Exceptions raised by the urchain client."""

from __future__ import annotations

from typing import Any, Dict, Optional


class UrchainError(Exception):
    """Base exception for urchain client errors."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class ConfigurationError(UrchainError):
    """Raised when the client is constructed without usable settings."""


class ServerError(UrchainError):
    """The indexer answered with a non-2xx status on the final attempt.

    The message is the compact JSON serialization of the response body, so
    ``json.loads(str(err))`` recovers the body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.body = body
        self.headers = headers or {}
        self.url = url


class NetworkError(UrchainError):
    """The request was sent but no response arrived (timeout, reset, DNS)."""


class RetryCancelledError(UrchainError):
    """Raised when a cancellation token fires during a call."""
