"""End-to-end checks against a FastAPI stand-in for the urchain indexer."""

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from urchain_rpc.metrics import MetricsRecorder
from urchain_rpc.urchain_api.client import UrchainClient
from urchain_rpc.urchain_api.errors import ServerError

API_KEY = "indexer-key"


def build_indexer():
    app = FastAPI()
    app.state.tx_requests = 0

    @app.middleware("http")
    async def require_bearer(request: Request, call_next):
        if request.headers.get("Authorization") != f"Bearer {API_KEY}":
            return JSONResponse(status_code=401, content={"error": "unauthorized"})
        return await call_next(request)

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> str:
        return "ok"

    @app.post("/balance")
    async def balance(request: Request) -> JSONResponse:
        payload = await request.json()
        confirmed = 100 if payload.get("scriptHash") == "abc123" else 0
        return JSONResponse(content={"confirmed": confirmed, "unconfirmed": 0})

    @app.post("/broadcast")
    async def broadcast() -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": "mempool full"})

    @app.post("/tx")
    async def tx(request: Request) -> JSONResponse:
        app.state.tx_requests += 1
        if app.state.tx_requests < 3:
            return JSONResponse(status_code=503, content={"error": "indexer restarting"})
        payload = await request.json()
        return JSONResponse(content={"txId": payload["txId"], "height": 1})

    return app


async def _no_sleep(_seconds):
    return None


def _client(app, api_key=API_KEY, **kwargs):
    async_client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://indexer.test")
    return UrchainClient("http://indexer.test", api_key, async_client=async_client, sleep=_no_sleep, **kwargs)


@pytest.mark.asyncio
async def test_health_plain_text():
    client = _client(build_indexer())
    assert await client.health() == "ok"


@pytest.mark.asyncio
async def test_balance_round_trip():
    client = _client(build_indexer())
    assert await client.balance("abc123") == {"confirmed": 100, "unconfirmed": 0}


@pytest.mark.asyncio
async def test_broadcast_rejected_after_retries():
    metrics = MetricsRecorder()
    client = _client(build_indexer(), observer=metrics)
    with pytest.raises(ServerError) as excinfo:
        await client.broadcast("0x00", max_attempts=3)
    assert str(excinfo.value) == '{"error":"mempool full"}'
    assert metrics.snapshot()["attempts"] == {"broadcast": 3}


@pytest.mark.asyncio
async def test_tx_retries_through_restart():
    app = build_indexer()
    client = _client(app)
    assert await client.tx("deadbeef") == {"txId": "deadbeef", "height": 1}
    assert app.state.tx_requests == 3


@pytest.mark.asyncio
async def test_wrong_key_surfaces_server_error():
    client = _client(build_indexer(), api_key="wrong-key")
    with pytest.raises(ServerError) as excinfo:
        await client.health(max_attempts=1)
    assert excinfo.value.status_code == 401
