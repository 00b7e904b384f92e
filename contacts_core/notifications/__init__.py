"""
Telegram notifications: format checks, Bot API gateway, stored settings
and the parsing-completion message.
"""

from .validators import (
    validate_telegram_token,
    validate_telegram_chat_id,
    chat_id_kind,
    ensure_telegram_token,
    ensure_telegram_chat_id,
)
from .telegram import BotInfo, TelegramGateway
from .settings import NotificationSettings
from .messages import ParsingSummary, format_parsing_notification
from .notifier import TelegramNotifier

__all__ = [
    "validate_telegram_token",
    "validate_telegram_chat_id",
    "chat_id_kind",
    "ensure_telegram_token",
    "ensure_telegram_chat_id",
    "BotInfo",
    "TelegramGateway",
    "NotificationSettings",
    "ParsingSummary",
    "format_parsing_notification",
    "TelegramNotifier",
]
