# =============================================================================
# contacts_core/notifications/settings.py
# Telegram Preferences
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from contacts_core.cache import PreferencesStore

PARSE_NOTIFICATIONS_KEY = "telegram_parseNotifications"
BOT_TOKEN_KEY = "telegramBotToken"
BOT_NAME_KEY = "telegramBotName"
CHAT_ID_KEY = "telegramChatId"


@dataclass
class NotificationSettings:
    """Telegram bot and toggle as kept in the preferences store."""
    bot_token: Optional[str] = None
    bot_name: Optional[str] = None
    chat_id: Optional[str] = None
    parse_notifications: bool = False

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    @classmethod
    def load(cls, prefs: PreferencesStore) -> NotificationSettings:
        return cls(
            bot_token=prefs.get(BOT_TOKEN_KEY) or None,
            bot_name=prefs.get(BOT_NAME_KEY) or None,
            chat_id=prefs.get(CHAT_ID_KEY) or None,
            parse_notifications=prefs.get_bool(PARSE_NOTIFICATIONS_KEY),
        )

    def save(self, prefs: PreferencesStore) -> None:
        for key, value in (
            (BOT_TOKEN_KEY, self.bot_token),
            (BOT_NAME_KEY, self.bot_name),
            (CHAT_ID_KEY, self.chat_id),
        ):
            if value:
                prefs.set(key, value)
            else:
                prefs.remove(key)
        prefs.set_bool(PARSE_NOTIFICATIONS_KEY, self.parse_notifications)
