import asyncio
import logging
import sys

from dotenv import load_dotenv

from balancewatch.balance_checker import BalanceChecker
from balancewatch.utils.config import ConfigError, Settings, load_networks
from balancewatch.utils.notifier import AlertDispatcher


async def run(settings, networks):
    dispatcher = AlertDispatcher.from_settings(settings)
    checker = BalanceChecker(settings, dispatcher)
    try:
        return await checker.run(networks)
    finally:
        await dispatcher.close()


def main():
    load_dotenv()

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logging.basicConfig(format="%(asctime)s - %(message)s", level=logging.INFO)
        logging.error(f"Invalid settings: {e}")
        return 1

    logging.basicConfig(
        format="%(asctime)s - %(message)s",
        level=getattr(logging, settings.log_level, logging.INFO),
    )

    try:
        networks = load_networks(settings.wallets_file)
    except ConfigError as e:
        logging.error(f"Cannot load networks: {e}")
        return 1

    logging.info(f"Checking {len(networks)} networks from {settings.wallets_file}")
    try:
        asyncio.run(asyncio.wait_for(run(settings, networks), timeout=settings.run_timeout))
    except asyncio.TimeoutError:
        logging.error(f"Run did not finish within {settings.run_timeout}s, aborted")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
