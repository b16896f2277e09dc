"""Telegram notification adapter."""

import logging

import telegramify_markdown
from telegram import Bot

from nudge.config import Config
from nudge.core.notification import Notification

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """
    Sends notifications as Telegram messages.

    Implements Notifier protocol. A failure for one chat is logged and does
    not stop delivery to the others.
    """

    def __init__(self, bot: Bot, chat_ids: list[int]):
        self.bot = bot
        self.chat_ids = chat_ids

    @classmethod
    def from_config(cls, config: Config) -> "TelegramNotifier":
        if not config.telegram_bot_token:
            raise ValueError(
                "TELEGRAM_BOT_TOKEN not configured. "
                "Get a token from @BotFather on Telegram and add it to nudge.conf"
            )
        return cls(Bot(config.telegram_bot_token), config.telegram_chat_ids)

    async def send(self, notification: Notification) -> None:
        text = telegramify_markdown.markdownify(notification.to_markdown())
        for chat_id in self.chat_ids:
            try:
                await self.bot.send_message(chat_id=chat_id, text=text, parse_mode="MarkdownV2")
            except Exception as e:
                logger.error(f"Failed to send notification to chat {chat_id}: {e}")
