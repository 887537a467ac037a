import asyncio
import logging

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import Web3Exception

from balancewatch.monitors.base_balance_monitor import (
    BaseBalanceMonitor,
    BalanceFetchError,
    BalanceParseError,
    ConnectionSetupError,
)
from balancewatch.utils.units import parse_hex_quantity


class EvmBalanceMonitor(BaseBalanceMonitor):
    def __init__(self, network, settings):
        super().__init__(network, settings)
        self.web3 = None

    async def connect(self):
        try:
            provider = AsyncHTTPProvider(
                self.network.rpc,
                request_kwargs={"timeout": self.client_timeout()},
            )
            await provider.cache_async_session(self.open_session())
            self.web3 = AsyncWeb3(provider)
            connected = await self.web3.is_connected()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, Web3Exception) as e:
            # HTTP error statuses and bad URLs raise instead of returning False
            await self.close()
            raise ConnectionSetupError(f"{self.network.name}: cannot connect to {self.network.rpc}: {e!r}") from e

        if not connected:
            await self.close()
            raise ConnectionSetupError(f"{self.network.name}: cannot connect to {self.network.rpc}")
        logging.debug(f"{self.network.name}: connected to {self.network.rpc}")

    async def fetch_balance(self, address) -> int:
        try:
            checksum_address = Web3.to_checksum_address(address)
        except ValueError as e:
            raise BalanceFetchError(f"invalid EVM address {address}: {e}") from e

        try:
            response = await self.web3.provider.make_request(
                "eth_getBalance", [checksum_address, "latest"]
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, Web3Exception) as e:
            raise BalanceFetchError(f"eth_getBalance failed for {address}: {e!r}") from e

        if response.get("error"):
            raise BalanceFetchError(f"eth_getBalance failed for {address}: {response['error']}")

        try:
            return parse_hex_quantity(response.get("result"))
        except ValueError as e:
            raise BalanceParseError(f"failed to convert balance for {address}: {e}") from e
