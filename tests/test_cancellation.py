import asyncio

import httpx
import pytest

from urchain_rpc.urchain_api.client import UrchainClient
from urchain_rpc.urchain_api.errors import NetworkError, RetryCancelledError
from urchain_rpc.urchain_api.retry import CancellationToken


class HangingAsyncClient:
    """Never answers; counts requests and records per-request kwargs."""

    def __init__(self):
        self.calls = []

    async def post(self, path, json=None, headers=None, **kwargs):
        self.calls.append({"path": path, **kwargs})
        await asyncio.Event().wait()

    async def get(self, path, params=None, headers=None, **kwargs):
        self.calls.append({"path": path, **kwargs})
        await asyncio.Event().wait()

    async def aclose(self):
        return None


class FailingAsyncClient:
    def __init__(self, exc):
        self.exc = exc
        self.calls = []

    async def post(self, path, json=None, headers=None, **kwargs):
        self.calls.append({"path": path, **kwargs})
        raise self.exc

    async def get(self, path, params=None, headers=None, **kwargs):
        self.calls.append({"path": path, **kwargs})
        raise self.exc

    async def aclose(self):
        return None


@pytest.mark.asyncio
async def test_token_cancelled_before_call():
    token = CancellationToken()
    token.cancel()
    transport = FailingAsyncClient(httpx.ConnectError("down"))
    client = UrchainClient("http://indexer.test", "k", async_client=transport)
    with pytest.raises(RetryCancelledError):
        await client.balance("sh1", cancel_token=token)
    assert transport.calls == []


@pytest.mark.asyncio
async def test_cancel_during_delay_stops_retrying():
    token = CancellationToken()

    async def sleep_then_cancel(seconds):
        token.cancel()
        await asyncio.sleep(3600)

    transport = FailingAsyncClient(httpx.ConnectError("down"))
    client = UrchainClient("http://indexer.test", "k", async_client=transport, sleep=sleep_then_cancel)
    with pytest.raises(RetryCancelledError):
        await client.balance("sh1", cancel_token=token)
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_cancel_during_inflight_request():
    token = CancellationToken()
    transport = HangingAsyncClient()
    client = UrchainClient("http://indexer.test", "k", async_client=transport)
    asyncio.get_running_loop().call_later(0.01, token.cancel)
    with pytest.raises(RetryCancelledError):
        await client.tx("deadbeef", cancel_token=token)
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_task_cancellation_propagates():
    transport = HangingAsyncClient()
    client = UrchainClient("http://indexer.test", "k", async_client=transport)
    task = asyncio.ensure_future(client.tx("deadbeef"))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_attempt_timeout_forwarded_to_transport():
    transport = FailingAsyncClient(httpx.ReadTimeout("timed out"))

    async def no_sleep(_seconds):
        return None

    client = UrchainClient("http://indexer.test", "k", async_client=transport, sleep=no_sleep)
    with pytest.raises(NetworkError):
        await client.execute_get("health", attempt_timeout=2.5, max_attempts=2)
    assert [c["timeout"] for c in transport.calls] == [2.5, 2.5]


@pytest.mark.asyncio
async def test_no_timeout_kwarg_by_default():
    transport = FailingAsyncClient(httpx.ReadTimeout("timed out"))
    client = UrchainClient("http://indexer.test", "k", async_client=transport)
    with pytest.raises(NetworkError):
        await client.execute_get("health", max_attempts=1)
    assert "timeout" not in transport.calls[0]
