import json
from decimal import Decimal

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from balancewatch.utils.config import NetworkConfig, NetworkType, Settings, Wallet


class DummyResponse:
    def __init__(self, status=200, payload=None, text=None):
        self.status = status
        self._payload = payload
        self._text = text

    async def json(self, content_type="application/json"):
        if self._text is not None:
            return json.loads(self._text)
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class DummySession:
    """Stands in for aiohttp.ClientSession; replies are queued per call."""

    def __init__(self, *responses, **_):
        self.responses = list(responses)
        self.requests = []
        self.closed = False

    def _next(self, method, url, json=None):
        self.requests.append({"method": method, "url": url, "json": json})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url):
        return self._next("GET", url)

    def post(self, url, json=None):
        return self._next("POST", url, json)

    async def close(self):
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
        return False


@pytest.fixture
def settings():
    return Settings(rpc_timeout=5, connect_timeout=2)


@pytest.fixture
def make_network():
    def _make(type=NetworkType.COSMOS, wallets=None, **overrides):
        values = dict(
            type=type,
            rpc="https://rest.example.org/",
            explorer="https://explorer.example.org/address/",
            coin="uatom",
            name="Cosmos Hub",
            decimals=6,
            threshold=Decimal("1.0"),
            wallets=tuple(wallets or (Wallet("cosmos1abc", "relayer", True),)),
        )
        values.update(overrides)
        return NetworkConfig(**values)

    return _make


@pytest.fixture
def connection_error():
    return aiohttp.ClientConnectionError("connection refused")


@pytest_asyncio.fixture
async def failing_rpc_server():
    """Local HTTP endpoint answering every request with the given status."""
    servers = []

    async def start(status):
        async def handler(request):
            return web.Response(status=status, text="rpc unavailable")

        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return str(server.make_url("/"))

    yield start

    for server in servers:
        await server.close()
