from abc import ABC, abstractmethod

import aiohttp


class MonitorError(Exception):
    pass


class ConnectionSetupError(MonitorError):
    """The network endpoint cannot be used at all."""


class BalanceFetchError(MonitorError):
    """A single wallet balance could not be retrieved."""


class BalanceParseError(BalanceFetchError):
    pass


class BalanceNotFoundError(BalanceFetchError):
    pass


class BaseBalanceMonitor(ABC):
    def __init__(self, network, settings):
        self.network = network
        self.settings = settings
        self.session = None

    def client_timeout(self):
        return aiohttp.ClientTimeout(
            total=self.settings.rpc_timeout,
            sock_connect=self.settings.connect_timeout,
        )

    @abstractmethod
    async def connect(self):
        pass

    @abstractmethod
    async def fetch_balance(self, address) -> int:
        """Return the wallet balance in the smallest on-chain unit."""

    def open_session(self):
        self.session = aiohttp.ClientSession(timeout=self.client_timeout())
        return self.session

    async def close(self):
        if self.session is not None:
            await self.session.close()
            self.session = None

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
        return False
