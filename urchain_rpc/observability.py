"""Observer hooks reported by the retry loop."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)


class RetryObserver:
    """No-op base; subclasses override the hooks they care about.

    Exceptions raised by a hook are logged by the client and never replace the
    outcome of the call.
    """

    def on_retry(self, command: str, attempt: int, delay_ms: int, error: BaseException) -> None:
        """Called after a failed attempt that will be retried."""

    def on_success(self, command: str, attempts: int) -> None:
        """Called once a response has been decoded."""

    def on_failure(self, command: str, attempts: int, error: BaseException) -> None:
        """Called with the classified error before it is raised to the caller."""

    def on_server_error(
        self,
        url: str,
        status_code: int,
        headers: Mapping[str, str],
        body: Any,
    ) -> None:
        """Called with response details when the terminal failure is a server error."""


class LoggingObserver(RetryObserver):
    """Default observer: one log line per retry plus server error diagnostics."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def on_retry(self, command: str, attempt: int, delay_ms: int, error: BaseException) -> None:
        self._log.warning(
            "Error occurred, retrying... Retry attempt: %d command=%s delay_ms=%d",
            attempt,
            command,
            delay_ms,
            extra={"command": command, "attempt": attempt, "error": type(error).__name__},
        )

    def on_success(self, command: str, attempts: int) -> None:
        self._log.debug(
            "command=%s outcome=success attempts=%d",
            command,
            attempts,
            extra={"command": command, "attempt": attempts},
        )

    def on_failure(self, command: str, attempts: int, error: BaseException) -> None:
        self._log.warning(
            "command=%s outcome=error attempts=%d error=%s",
            command,
            attempts,
            type(error).__name__,
            extra={"command": command, "attempt": attempts, "error": type(error).__name__},
        )

    def on_server_error(
        self,
        url: str,
        status_code: int,
        headers: Mapping[str, str],
        body: Any,
    ) -> None:
        self._log.error(
            "urchain server error url=%s status=%s headers=%s body=%s",
            url,
            status_code,
            dict(headers),
            body,
            extra={"status_code": status_code},
        )


class CompositeObserver(RetryObserver):
    """Fan every hook out to several observers, in order."""

    def __init__(self, observers: Iterable[RetryObserver]) -> None:
        self.observers = list(observers)

    def on_retry(self, command: str, attempt: int, delay_ms: int, error: BaseException) -> None:
        for observer in self.observers:
            observer.on_retry(command, attempt, delay_ms, error)

    def on_success(self, command: str, attempts: int) -> None:
        for observer in self.observers:
            observer.on_success(command, attempts)

    def on_failure(self, command: str, attempts: int, error: BaseException) -> None:
        for observer in self.observers:
            observer.on_failure(command, attempts, error)

    def on_server_error(
        self,
        url: str,
        status_code: int,
        headers: Mapping[str, str],
        body: Any,
    ) -> None:
        for observer in self.observers:
            observer.on_server_error(url, status_code, headers, body)
