"""
Async HTTP client for the urchain indexer.

Every accessor funnels through one request/retry wrapper: failures of any kind
are retried with a fixed delay, and only the final failure is classified into
a ServerError, a NetworkError or the original exception.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

import httpx

from urchain_rpc.config import PLACEHOLDER_API_KEY, UrchainConfig, default_config
from urchain_rpc.observability import LoggingObserver, RetryObserver
from urchain_rpc.urchain_api.endpoints import ENDPOINTS, GET, POST
from urchain_rpc.urchain_api.errors import (
    ConfigurationError,
    NetworkError,
    RetryCancelledError,
    ServerError,
)
from urchain_rpc.urchain_api.models import (
    Balance,
    BlockHeader,
    BroadcastResult,
    Fees,
    HistoryResult,
    Token,
    TokenDirectoryEntry,
    Transaction,
    Txo,
    Utxo,
)
from urchain_rpc.urchain_api.retry import CancellationToken, RetryPolicy, run_until_cancelled

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class _UnexpectedStatus(Exception):
    """Internal marker for a non-2xx response; carries the decoded body."""

    def __init__(self, response: Any, body: Any) -> None:
        super().__init__(f"HTTP {response.status_code}")
        self.response = response
        self.body = body


def _decode_body(response: Any) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


class UrchainClient:
    """Async client for the urchain indexer API."""

    def __init__(
        self,
        host: Optional[str] = None,
        api_key: Optional[str] = None,
        *,
        config: UrchainConfig | None = None,
        async_client: Optional[httpx.AsyncClient] = None,
        observer: Optional[RetryObserver] = None,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        base = config or default_config
        overrides: Dict[str, Any] = {}
        if host is not None:
            overrides["base_url"] = host
        if api_key is not None:
            overrides["api_key"] = api_key
        self.config = dataclasses.replace(base, **overrides) if overrides else base
        if not self.config.base_url:
            raise ConfigurationError("urchain base URL is required.")
        if not self.config.api_key:
            raise ConfigurationError("urchain API key is required.")
        if self.config.api_key == PLACEHOLDER_API_KEY:
            raise ConfigurationError("The sample urchain API key must be replaced with a real key.")
        self.retry_policy = RetryPolicy(
            max_attempts=self.config.max_attempts, delay_ms=self.config.retry_delay_ms
        )
        self.observer = observer or LoggingObserver()
        self._sleep: Sleeper = sleep or asyncio.sleep
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None

    async def __aenter__(self) -> "UrchainClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url, timeout=self.config.timeout
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _build_headers(self, *, json_body: bool) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.config.api_key}"}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _resolve_url(self, command: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{command.lstrip('/')}"

    def _requested_url(self, command: str, response: Any) -> str:
        try:
            return str(response.request.url)
        except (AttributeError, RuntimeError):
            return self._resolve_url(command)

    def _notify(self, hook: str, *args: Any) -> None:
        try:
            getattr(self.observer, hook)(*args)
        except Exception:
            logger.exception("Observer hook %s failed", hook)

    async def _send(
        self,
        verb: str,
        command: str,
        payload: Dict[str, Any],
        attempt_timeout: Optional[float],
    ) -> Any:
        client = await self._get_client()
        kwargs: Dict[str, Any] = {"headers": self._build_headers(json_body=verb == POST)}
        if attempt_timeout is not None:
            kwargs["timeout"] = attempt_timeout
        if verb == GET:
            response = await client.get(command, params=payload, **kwargs)
        else:
            response = await client.post(command, json=payload, **kwargs)
        body = _decode_body(response)
        if not 200 <= response.status_code < 300:
            raise _UnexpectedStatus(response, body)
        return body

    def _classify(self, command: str, exc: Exception) -> Exception:
        if isinstance(exc, _UnexpectedStatus):
            status_code = exc.response.status_code
            headers = dict(getattr(exc.response, "headers", None) or {})
            url = self._requested_url(command, exc.response)
            self._notify("on_server_error", url, status_code, headers, exc.body)
            return ServerError(
                _compact_json(exc.body),
                status_code=status_code,
                body=exc.body,
                headers=headers,
                url=url,
            )
        if isinstance(exc, (httpx.UnsupportedProtocol, httpx.LocalProtocolError)):
            # raised before anything reached the wire
            return exc
        if isinstance(exc, httpx.RequestError):
            return NetworkError(str(exc) or type(exc).__name__)
        return exc

    async def _execute(
        self,
        verb: str,
        command: str,
        payload: Optional[Mapping[str, Any]],
        *,
        max_attempts: Optional[int],
        delay_ms: Optional[int],
        attempt_timeout: Optional[float],
        cancel_token: Optional[CancellationToken],
    ) -> Any:
        policy = self.retry_policy.override(max_attempts=max_attempts, delay_ms=delay_ms)
        outgoing = dict(payload or {})
        attempt = 0
        while attempt < policy.max_attempts:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            try:
                result = await run_until_cancelled(
                    self._send(verb, command, outgoing, attempt_timeout), cancel_token
                )
            except RetryCancelledError:
                raise
            except Exception as exc:
                attempt += 1
                if attempt >= policy.max_attempts:
                    error = self._classify(command, exc)
                    self._notify("on_failure", command, attempt, error)
                    if error is exc:
                        raise
                    raise error from exc
                self._notify("on_retry", command, attempt, policy.delay_ms, exc)
                await run_until_cancelled(self._sleep(policy.delay_seconds), cancel_token)
                continue
            self._notify("on_success", command, attempt + 1)
            return result
        raise AssertionError("retry loop exited without a result")

    async def execute_get(
        self,
        command: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        max_attempts: Optional[int] = None,
        delay_ms: Optional[int] = None,
        attempt_timeout: Optional[float] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        """GET ``command`` with query parameters, retrying on any failure."""
        return await self._execute(
            GET,
            command,
            params,
            max_attempts=max_attempts,
            delay_ms=delay_ms,
            attempt_timeout=attempt_timeout,
            cancel_token=cancel_token,
        )

    async def execute_post(
        self,
        command: str,
        body: Optional[Mapping[str, Any]] = None,
        *,
        max_attempts: Optional[int] = None,
        delay_ms: Optional[int] = None,
        attempt_timeout: Optional[float] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        """POST ``body`` as JSON to ``command``, retrying on any failure."""
        return await self._execute(
            POST,
            command,
            body,
            max_attempts=max_attempts,
            delay_ms=delay_ms,
            attempt_timeout=attempt_timeout,
            cancel_token=cancel_token,
        )

    async def call(
        self,
        method: str,
        /,
        *,
        max_attempts: Optional[int] = None,
        delay_ms: Optional[int] = None,
        attempt_timeout: Optional[float] = None,
        cancel_token: Optional[CancellationToken] = None,
        **arguments: Any,
    ) -> Any:
        """Invoke an endpoint from the declarative table by accessor name."""
        try:
            endpoint = ENDPOINTS[method]
        except KeyError:
            raise ValueError(f"Unknown urchain method: {method}") from None
        payload = endpoint.build_payload(arguments)
        return await self._execute(
            endpoint.verb,
            endpoint.path,
            payload,
            max_attempts=max_attempts,
            delay_ms=delay_ms,
            attempt_timeout=attempt_timeout,
            cancel_token=cancel_token,
        )

    async def health(self, **options: Any) -> str:
        """Indexer liveness status."""
        return await self.call("health", **options)

    async def get_fee_per_kb(self, **options: Any) -> Fees:
        """Current fee schedule."""
        return await self.call("get_fee_per_kb", **options)

    async def balance(self, script_hash: str, **options: Any) -> Balance:
        """Confirmed and unconfirmed balance for a script hash."""
        return await self.call("balance", script_hash=script_hash, **options)

    async def token_balance(self, script_hash: str, tick: str, **options: Any) -> Balance:
        return await self.call("token_balance", script_hash=script_hash, tick=tick, **options)

    async def token_list(self, script_hash: str, **options: Any) -> List[Token]:
        return await self.call("token_list", script_hash=script_hash, **options)

    async def utxos(
        self, script_hashes: List[str], satoshis: Optional[int] = None, **options: Any
    ) -> List[Utxo]:
        """Unspent outputs for the given script hashes, optionally filtered by a minimum amount."""
        return await self.call("utxos", script_hashes=script_hashes, satoshis=satoshis, **options)

    async def tx(self, tx_id: str, **options: Any) -> Transaction:
        return await self.call("tx", tx_id=tx_id, **options)

    async def refresh(self, script_hash: str, **options: Any) -> HistoryResult:
        """Ask the indexer to fetch history for a script hash."""
        return await self.call("refresh", script_hash=script_hash, **options)

    async def reset(self, script_hash: str, **options: Any) -> HistoryResult:
        """Drop and rebuild indexed history for a script hash."""
        return await self.call("reset", script_hash=script_hash, **options)

    async def txo(self, tx_id: str, output_index: int, **options: Any) -> Txo:
        return await self.call("txo", tx_id=tx_id, output_index=output_index, **options)

    async def txos(self, address: str, type: str, **options: Any) -> List[Txo]:
        return await self.call("txos", address=address, type=type, **options)

    async def broadcast(self, raw_hex: str, **options: Any) -> BroadcastResult:
        """Submit a raw transaction."""
        return await self.call("broadcast", raw_hex=raw_hex, **options)

    async def best_block(self, **options: Any) -> BlockHeader:
        return await self.call("best_block", **options)

    async def all_tokens(self, **options: Any) -> List[TokenDirectoryEntry]:
        return await self.call("all_tokens", **options)

    async def token_info(self, tick: str, **options: Any) -> TokenDirectoryEntry:
        return await self.call("token_info", tick=tick, **options)
