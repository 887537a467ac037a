from balancewatch.monitors.base_balance_monitor import (
    BaseBalanceMonitor,
    BalanceFetchError,
    BalanceNotFoundError,
    BalanceParseError,
    ConnectionSetupError,
    MonitorError,
)
from balancewatch.monitors.cosmos_monitor import CosmosBalanceMonitor
from balancewatch.monitors.evm_monitor import EvmBalanceMonitor
from balancewatch.monitors.icon_monitor import IconBalanceMonitor
from balancewatch.utils.config import NetworkType

MONITORS = {
    NetworkType.EVM: EvmBalanceMonitor,
    NetworkType.ICON: IconBalanceMonitor,
    NetworkType.COSMOS: CosmosBalanceMonitor,
}


def create_monitor(network, settings) -> BaseBalanceMonitor:
    try:
        monitor_class = MONITORS[network.type]
    except KeyError:
        raise ConnectionSetupError(f"{network.name}: no balance monitor for type {network.type!r}")
    return monitor_class(network, settings)


__all__ = [
    "BaseBalanceMonitor",
    "BalanceFetchError",
    "BalanceNotFoundError",
    "BalanceParseError",
    "ConnectionSetupError",
    "CosmosBalanceMonitor",
    "EvmBalanceMonitor",
    "IconBalanceMonitor",
    "MONITORS",
    "MonitorError",
    "create_monitor",
]
