"""
Notifier - Delivers availability messages
Pushover over HTTP, Telegram through the bot API, or a dry-run logger
"""

import asyncio
import logging
from typing import Optional

import requests
from telegram import Bot
from telegram.error import TelegramError

from ..errors import NotificationError
from ..utils.config import CheckerConfig

logger = logging.getLogger(__name__)

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"
DEFAULT_TITLE = "Class Availability"


class DryRunNotifier:
    """Logs what would have been sent"""

    async def send(self, message: str, title: str = DEFAULT_TITLE):
        logger.info(f"[DRY_RUN] Would send: {title} - {message}")


class PushoverNotifier:
    """Pushover push notifications"""

    def __init__(self, token: str, user: str, device: str = '', timeout: int = 20):
        self.token = token
        self.user = user
        self.device = device
        self.timeout = timeout

    def _post(self, message: str, title: str):
        payload = {
            'token': self.token,
            'user': self.user,
            'message': message,
            'title': title,
        }
        if self.device:
            payload['device'] = self.device

        try:
            resp = requests.post(PUSHOVER_URL, data=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(f"Pushover request failed: {e}") from e

        if not resp.ok:
            raise NotificationError(f"Pushover error: {resp.status_code} {resp.text}")

    async def send(self, message: str, title: str = DEFAULT_TITLE):
        """
        Send a push notification

        Raises:
            NotificationError: On network failure or a non-2xx response
        """
        await asyncio.to_thread(self._post, message, title)
        logger.info(f"Pushover sent: {title}")


class TelegramNotifier:
    """Telegram message to a single chat"""

    def __init__(self, bot_token: str, chat_id: str, bot: Optional[Bot] = None):
        self.chat_id = chat_id
        self.bot = bot or Bot(token=bot_token)

    async def send(self, message: str, title: str = DEFAULT_TITLE):
        """
        Send a Telegram message

        Raises:
            NotificationError: If the Bot API call fails
        """
        try:
            async with self.bot:
                await self.bot.send_message(chat_id=self.chat_id, text=f"🔔 {title}\n\n{message}")
        except TelegramError as e:
            raise NotificationError(f"Telegram error: {e}") from e
        logger.info(f"Telegram message sent to {self.chat_id}")


def build_notifier(config: CheckerConfig):
    """Pick the notifier for the configuration"""
    if config.dry_run:
        return DryRunNotifier()
    if config.notifier == 'telegram':
        return TelegramNotifier(config.telegram_bot_token, config.telegram_chat_id)
    return PushoverNotifier(config.pushover_token, config.pushover_user, config.pushover_device)
