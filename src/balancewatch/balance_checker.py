import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from balancewatch.monitors import (
    BalanceFetchError,
    ConnectionSetupError,
    create_monitor,
)
from balancewatch.utils.config import NetworkConfig, Wallet
from balancewatch.utils.units import exceeds_threshold, to_decimal_unit

PRETTY_FORMAT = "{:<50} {:<35} {:<25} {:<20}"
RULE_WIDTH = 125


@dataclass
class BalanceReport:
    network: str
    wallet: Wallet
    balance: int
    decimal_balance: Decimal
    below_threshold: bool


@dataclass
class RunSummary:
    networks_checked: int = 0
    networks_skipped: int = 0
    wallets_checked: int = 0
    wallets_failed: int = 0
    alerts_sent: int = 0
    reports: List[BalanceReport] = field(default_factory=list)


class BalanceChecker:
    def __init__(self, settings, dispatcher, monitor_factory=create_monitor):
        self.settings = settings
        self.dispatcher = dispatcher
        self.monitor_factory = monitor_factory

    async def run(self, networks) -> RunSummary:
        summary = RunSummary()
        for network in networks:
            await self.check_network(network, summary)
        logging.info(
            f"Run finished: {summary.networks_checked} networks checked, {summary.networks_skipped} skipped, "
            f"{summary.wallets_checked} wallets checked, {summary.wallets_failed} failed, "
            f"{summary.alerts_sent} alerts sent"
        )
        return summary

    async def check_network(self, network: NetworkConfig, summary: RunSummary):
        print(f"Network: {network.name}")
        print(PRETTY_FORMAT.format("Address", f"Balance ({network.coin})", "Balance", "Threshold"))
        print("-" * RULE_WIDTH)

        try:
            monitor = self.monitor_factory(network, self.settings)
            await monitor.connect()
        except ConnectionSetupError as e:
            logging.error(f"Skipping network {network.name}: {e}")
            summary.networks_skipped += 1
            print("\n")
            return
        except Exception as e:
            logging.exception(f"Skipping network {network.name}, unexpected setup error: {e}")
            summary.networks_skipped += 1
            print("\n")
            return

        try:
            for wallet in network.wallets:
                if not wallet.alert:
                    logging.debug(f"{network.name}: alert disabled for {wallet.address}, not checked")
                    continue
                await self.check_wallet(monitor, network, wallet, summary)
        finally:
            await monitor.close()

        summary.networks_checked += 1
        print("\n")

    async def check_wallet(self, monitor, network: NetworkConfig, wallet: Wallet, summary: RunSummary):
        try:
            balance = await monitor.fetch_balance(wallet.address)
        except BalanceFetchError as e:
            logging.error(f"{network.name}: cannot fetch balance of {wallet.address}: {e}")
            summary.wallets_failed += 1
            return
        except Exception as e:
            logging.exception(f"{network.name}: unexpected error fetching {wallet.address}: {e}")
            summary.wallets_failed += 1
            return

        decimal_balance = to_decimal_unit(balance, network.decimals)
        below = exceeds_threshold(decimal_balance, network.threshold)
        print(PRETTY_FORMAT.format(wallet.address, format(decimal_balance, "f"), str(balance), format(network.threshold, "f")))

        summary.wallets_checked += 1
        summary.reports.append(BalanceReport(network.name, wallet, balance, decimal_balance, below))

        if below:
            summary.alerts_sent += await self.dispatcher.send_alert(
                network.name,
                wallet.address,
                format(decimal_balance, "f"),
                format(network.threshold, "f"),
                network.coin,
                network.explorer,
            )
