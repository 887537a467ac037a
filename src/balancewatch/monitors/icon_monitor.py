import asyncio
import itertools
import logging

import aiohttp

from balancewatch.monitors.base_balance_monitor import (
    BaseBalanceMonitor,
    BalanceFetchError,
    BalanceParseError,
    ConnectionSetupError,
)
from balancewatch.utils.units import parse_hex_quantity


class IconBalanceMonitor(BaseBalanceMonitor):
    """ICX balances over the ICON JSON-RPC v3 API."""

    def __init__(self, network, settings):
        super().__init__(network, settings)
        self._ids = itertools.count(1)

    async def connect(self):
        self.open_session()
        try:
            block = await self.call("icx_getLastBlock")
        except BalanceFetchError as e:
            await self.close()
            raise ConnectionSetupError(f"{self.network.name}: cannot reach {self.network.rpc}: {e}") from e
        logging.debug(f"{self.network.name}: connected at height {block.get('height') if isinstance(block, dict) else block}")

    async def call(self, method, params=None):
        payload = {"jsonrpc": "2.0", "method": method, "id": next(self._ids)}
        if params is not None:
            payload["params"] = params

        try:
            async with self.session.post(self.network.rpc, json=payload) as response:
                # JSON-RPC errors come back with 4xx/5xx bodies, read them first
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    raise BalanceParseError(f"{method}: malformed response, HTTP {response.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BalanceFetchError(f"{method}: {e!r}") from e

        if not isinstance(body, dict):
            raise BalanceParseError(f"{method}: unexpected response {body!r}")
        if body.get("error"):
            error = body["error"]
            raise BalanceFetchError(f"{method}: {error.get('message', error) if isinstance(error, dict) else error}")
        if "result" not in body:
            raise BalanceParseError(f"{method}: response has no result, HTTP {response.status}")
        return body["result"]

    async def fetch_balance(self, address) -> int:
        result = await self.call("icx_getBalance", {"address": address})
        try:
            return parse_hex_quantity(result)
        except ValueError as e:
            raise BalanceParseError(f"{address}: {e}") from e
