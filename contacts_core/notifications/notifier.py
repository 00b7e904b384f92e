# =============================================================================
# contacts_core/notifications/notifier.py
# Telegram Notifications for the Dashboard
# =============================================================================
"""
TelegramNotifier ties the gateway to the stored preferences.

Parsing notifications are best-effort: a disabled toggle or a missing bot
token / chat id skips the send, and a failed send is logged, never raised.
"""

from __future__ import annotations
import asyncio
from datetime import datetime, timezone
from typing import Optional

from contacts_core.cache import PreferencesStore
from contacts_core.errors import NotificationError
from contacts_core.logging import get_logger
from contacts_core.notifications.messages import ParsingSummary, format_parsing_notification
from contacts_core.notifications.settings import NotificationSettings, PARSE_NOTIFICATIONS_KEY
from contacts_core.notifications.telegram import BotInfo, TelegramGateway
from contacts_core.notifications.validators import ensure_telegram_chat_id, ensure_telegram_token

logger = get_logger(__name__)


class TelegramNotifier:
    """
    Usage:
        notifier = TelegramNotifier(TelegramGateway(api_base), prefs)
        bot = notifier.connect_bot(token, chat_id)
        await notifier.send_parsing_notification(summary)
    """

    def __init__(self, gateway: TelegramGateway, prefs: PreferencesStore):
        self.gateway = gateway
        self.prefs = prefs

    @property
    def settings(self) -> NotificationSettings:
        return NotificationSettings.load(self.prefs)

    def connect_bot(self, token: str, chat_id: str) -> BotInfo:
        """
        Validate, verify with getMe and store the bot.

        Raises:
            DataValidationError: malformed token or chat id (nothing is sent)
            NotificationError: Telegram rejected the token
        """
        token = ensure_telegram_token(token)
        chat_id = ensure_telegram_chat_id(chat_id)

        bot = self.gateway.test_bot(token)

        settings = self.settings
        settings.bot_token = token
        settings.bot_name = bot.display_name
        settings.chat_id = chat_id
        settings.save(self.prefs)
        logger.info(f"Telegram bot connected: {bot.display_name}")
        return bot

    def disconnect_bot(self) -> None:
        settings = self.settings
        settings.bot_token = None
        settings.bot_name = None
        settings.chat_id = None
        settings.save(self.prefs)
        logger.info("Telegram bot disconnected")

    def set_parse_notifications(self, enabled: bool) -> None:
        self.prefs.set_bool(PARSE_NOTIFICATIONS_KEY, enabled)

    def send_test_notification(self, token: Optional[str] = None, chat_id: Optional[str] = None) -> None:
        """
        Send a sample parsing message using the given or stored bot.

        Raises:
            DataValidationError: missing or malformed token / chat id
            NotificationError: the send failed
        """
        settings = self.settings
        token = ensure_telegram_token(token or settings.bot_token)
        chat_id = ensure_telegram_chat_id(chat_id or settings.chat_id)

        sample = ParsingSummary(
            task_name="Test notification",
            original_query="dance studios in Berlin",
            results=[{"email": "info@example.com"}, {"email": ""}],
            generated_queries=["dance studio Berlin", "ballet school Berlin", "dance classes Berlin"],
            completed_at=datetime.now(timezone.utc),
        )
        self.gateway.send_message(token, chat_id, format_parsing_notification(sample))

    async def send_parsing_notification(self, summary: ParsingSummary) -> bool:
        """
        Report a finished parsing run.

        Returns:
            True if a message was sent
        """
        settings = self.settings
        if not settings.parse_notifications:
            logger.info("Telegram parsing notifications are disabled")
            return False
        if not settings.bot_token:
            logger.info("Telegram bot token not configured, skipping notification")
            return False
        if not settings.chat_id:
            logger.info("Telegram chat ID not configured, skipping notification")
            return False

        message = format_parsing_notification(summary)
        try:
            await asyncio.to_thread(
                self.gateway.send_message,
                settings.bot_token,
                settings.chat_id,
                message,
            )
        except NotificationError as e:
            logger.error(f"Failed to send Telegram notification: {e}")
            return False

        return True
