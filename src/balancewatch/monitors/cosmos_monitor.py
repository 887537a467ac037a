import asyncio
import logging

import aiohttp

from balancewatch.monitors.base_balance_monitor import (
    BaseBalanceMonitor,
    BalanceFetchError,
    BalanceNotFoundError,
    BalanceParseError,
)

BALANCES_ENDPOINT = "/cosmos/bank/v1beta1/balances/{address}"


class CosmosBalanceMonitor(BaseBalanceMonitor):
    """Reads bank balances from a Cosmos-SDK REST (LCD) endpoint."""

    async def connect(self):
        self.open_session()

    async def fetch_json(self, url):
        try:
            async with self.session.get(url) as response:
                if response.status < 200 or response.status >= 300:
                    raise BalanceFetchError(f"Error fetching {url}: HTTP {response.status}")
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BalanceFetchError(f"Error fetching {url}: {e!r}") from e
        except ValueError as e:
            raise BalanceParseError(f"Malformed JSON from {url}: {e}") from e

    async def fetch_balance(self, address) -> int:
        url = self.network.rpc.rstrip("/") + BALANCES_ENDPOINT.format(address=address)
        data = await self.fetch_json(url)
        denom = self.network.coin

        balances = data.get("balances") if isinstance(data, dict) else None
        if not isinstance(balances, list):
            raise BalanceParseError(f"Unexpected balances response for {address}: {data}")

        for entry in balances:
            if not isinstance(entry, dict):
                continue
            if str(entry.get("denom", "")).upper() == denom.upper():
                amount = entry.get("amount")
                try:
                    return int(str(amount), 10)
                except ValueError:
                    raise BalanceParseError(f"Invalid {denom} amount for {address}: {amount!r}")

        logging.debug(f"{address} holds {[e.get('denom') for e in balances if isinstance(e, dict)]}")
        raise BalanceNotFoundError(f"no balance found for {denom}")
