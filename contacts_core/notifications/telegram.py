# =============================================================================
# contacts_core/notifications/telegram.py
# Telegram Bot HTTP API Gateway
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from contacts_core.config import DEFAULT_TELEGRAM_API
from contacts_core.errors import NotificationError
from contacts_core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BotInfo:
    """Identity reported by getMe."""
    id: Optional[int]
    first_name: str
    username: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"@{self.username}" if self.username else self.first_name


class TelegramGateway:
    """
    Thin client for the two Bot API methods the dashboard uses.

    Usage:
        gateway = TelegramGateway(settings.telegram_api_base)
        bot = gateway.test_bot(token)
        gateway.send_message(token, chat_id, "<b>Done</b>")
    """

    def __init__(self, base_url: str = DEFAULT_TELEGRAM_API, timeout: int = 15):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def _call(self, token: str, method: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Call a Bot API method and return its `result`.

        Raises:
            NotificationError: on transport errors, HTTP errors or ok=false
        """
        url = f"{self.base_url}/bot{token}/{method}"
        try:
            if payload is None:
                response = self.session.get(url, timeout=self.timeout)
            else:
                response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NotificationError(f"Telegram request failed: {e}", method=method) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if not response.ok or not body.get("ok"):
            description = body.get("description") or response.reason or "unknown error"
            raise NotificationError(
                f"Telegram API error: {description}",
                method=method,
                status_code=response.status_code,
            )

        return body.get("result") or {}

    def test_bot(self, token: str) -> BotInfo:
        """Check the token with getMe."""
        result = self._call(token, "getMe")
        bot = BotInfo(
            id=result.get("id"),
            first_name=result.get("first_name") or "Bot",
            username=result.get("username"),
        )
        logger.info(f"Telegram bot verified: {bot.display_name}")
        return bot

    def send_message(
        self,
        token: str,
        chat_id: str,
        message: str,
        parse_mode: str = "HTML",
    ) -> Dict[str, Any]:
        """Send `message` to `chat_id`; returns the sent Message object."""
        result = self._call(
            token,
            "sendMessage",
            {"chat_id": chat_id, "text": message, "parse_mode": parse_mode or "HTML"},
        )
        logger.info(f"Telegram message sent to chat {chat_id}")
        return result
