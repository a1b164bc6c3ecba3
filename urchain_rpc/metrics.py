"""Minimal in-process retry metrics (not suitable for multi-process aggregation)."""

from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import Any, Dict, Mapping

from urchain_rpc.observability import RetryObserver


class MetricsRecorder(RetryObserver):
    def __init__(self) -> None:
        self._lock = Lock()
        self._attempts: Counter[str] = Counter()
        self._retries: Counter[str] = Counter()
        self._success: Counter[str] = Counter()
        self._failure: Counter[str] = Counter()
        self._failure_kinds: Counter[str] = Counter()
        self._server_errors: Counter[int] = Counter()

    def on_retry(self, command: str, attempt: int, delay_ms: int, error: BaseException) -> None:
        with self._lock:
            self._attempts[command] += 1
            self._retries[command] += 1

    def on_success(self, command: str, attempts: int) -> None:
        with self._lock:
            self._attempts[command] += 1
            self._success[command] += 1

    def on_failure(self, command: str, attempts: int, error: BaseException) -> None:
        with self._lock:
            self._attempts[command] += 1
            self._failure[command] += 1
            self._failure_kinds[type(error).__name__] += 1

    def on_server_error(
        self,
        url: str,
        status_code: int,
        headers: Mapping[str, str],
        body: Any,
    ) -> None:
        with self._lock:
            self._server_errors[status_code] += 1

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return {
                "attempts": dict(self._attempts),
                "retries": dict(self._retries),
                "success": dict(self._success),
                "failure": dict(self._failure),
                "failure_kinds": dict(self._failure_kinds),
                "server_errors": dict(self._server_errors),
            }

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()
            self._retries.clear()
            self._success.clear()
            self._failure.clear()
            self._failure_kinds.clear()
            self._server_errors.clear()


default_metrics = MetricsRecorder()
