"""Retry policy and cooperative cancellation for the request loop."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Coroutine, Optional, TypeVar

from urchain_rpc.config import MAX_ATTEMPTS, RETRY_DELAY_MS
from urchain_rpc.urchain_api.errors import RetryCancelledError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Fixed-delay retry bound: up to ``max_attempts`` tries spaced ``delay_ms`` apart."""

    max_attempts: int = MAX_ATTEMPTS
    delay_ms: int = RETRY_DELAY_MS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_ms < 0:
            raise ValueError("delay_ms must not be negative")

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0

    def override(self, *, max_attempts: Optional[int] = None, delay_ms: Optional[int] = None) -> "RetryPolicy":
        if max_attempts is None and delay_ms is None:
            return self
        return RetryPolicy(
            max_attempts=self.max_attempts if max_attempts is None else max_attempts,
            delay_ms=self.delay_ms if delay_ms is None else delay_ms,
        )


class CancellationToken:
    """Caller-held switch that aborts an in-flight retry sequence."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RetryCancelledError("Call cancelled")


async def run_until_cancelled(
    coro: Coroutine[Any, Any, T], token: Optional[CancellationToken]
) -> T:
    """Await ``coro`` unless ``token`` fires first, in which case ``coro`` is abandoned."""
    if token is None:
        return await coro
    task = asyncio.ensure_future(coro)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for pending in (task, waiter):
            if not pending.done():
                pending.cancel()
    if task in done:
        return task.result()
    raise RetryCancelledError("Call cancelled")
