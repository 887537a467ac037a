import asyncio
import logging

import aiohttp
from telegram import Bot
from telegram.error import TelegramError

DISCORD_OK_STATUSES = (200, 204)


class NotificationError(Exception):
    pass


class TelegramNotifier:
    name = "telegram"

    def __init__(self, token, chat_id, bot=None):
        self.bot = bot or Bot(token=token)
        self.chat_id = chat_id

    async def send_message(self, message):
        try:
            await self.bot.send_message(chat_id=self.chat_id, text=message)
        except TelegramError as e:
            raise NotificationError(f"Telegram delivery failed: {e}") from e

    async def close(self):
        await self.bot.shutdown()


class DiscordNotifier:
    name = "discord"

    def __init__(self, webhook_url, timeout=10):
        self.webhook_url = webhook_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def send_message(self, message):
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.webhook_url, json={"content": message}) as response:
                    if response.status not in DISCORD_OK_STATUSES:
                        raise NotificationError(f"Discord delivery failed: unexpected status code {response.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NotificationError(f"Discord delivery failed: {e!r}") from e

    async def close(self):
        pass


def format_alert_message(network, address, balance, threshold, coin, explorer):
    link = f"{explorer.rstrip('/')}/{address}"
    return (
        f"🚨 **{network}** Alert 🚨\n\n"
        f"Address: [{address}]({link})\n"
        f"Balance: {balance} {coin}\n"
        f"Threshold: {threshold} {coin}\n"
    )


class AlertDispatcher:
    """Fans a low-balance alert out to every configured backend.

    A failing backend is logged and skipped; alerts are never retried.
    """

    def __init__(self, notifiers=None):
        self.notifiers = list(notifiers or [])

    @classmethod
    def from_settings(cls, settings):
        notifiers = []
        if settings.discord_webhook_url:
            notifiers.append(DiscordNotifier(settings.discord_webhook_url, timeout=settings.rpc_timeout))
        if settings.telegram_bot_token and settings.telegram_chat_id:
            notifiers.append(TelegramNotifier(settings.telegram_bot_token, settings.telegram_chat_id))
        elif settings.telegram_bot_token:
            logging.warning("TELEGRAM_BOT_TOKEN is set without TELEGRAM_CHAT_ID, Telegram alerts disabled")

        if not notifiers:
            logging.warning("No alert backend configured, alerts will only be logged")
        return cls(notifiers)

    async def send_alert(self, network, address, balance, threshold, coin, explorer) -> int:
        message = format_alert_message(network, address, balance, threshold, coin, explorer)
        if not self.notifiers:
            logging.warning(f"Alert (no backend): {message}")
            return 0

        delivered = 0
        for notifier in self.notifiers:
            try:
                await notifier.send_message(message)
            except NotificationError as e:
                logging.error(f"{notifier.name} alert for {address} on {network} not sent: {e}")
                continue
            delivered += 1
            logging.info(f"{notifier.name} alert sent for {address} on {network}")
        return delivered

    async def close(self):
        for notifier in self.notifiers:
            try:
                await notifier.close()
            except TelegramError as e:
                logging.error(f"Notifier shutdown error: {e}")
