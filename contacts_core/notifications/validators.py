# =============================================================================
# contacts_core/notifications/validators.py
# Telegram Token and Chat ID Format Checks
# =============================================================================

from __future__ import annotations
import re
from typing import Optional

from contacts_core.errors import DataValidationError

TOKEN_PATTERN = re.compile(r"^\d{8,10}:[A-Za-z0-9_-]{35}$")

CHAT_ID_PATTERNS = {
    "user": re.compile(r"^\d{5,12}$"),
    "group": re.compile(r"^-\d{10,13}$"),
    "channel": re.compile(r"^@[a-zA-Z0-9_]{5,32}$"),
}


def validate_telegram_token(token: Optional[str]) -> bool:
    """True for tokens shaped like `<bot id>:<35-char secret>`."""
    return bool(token) and TOKEN_PATTERN.match(token.strip()) is not None


def chat_id_kind(chat_id: Optional[str]) -> Optional[str]:
    """Return "user", "group" or "channel" for a well-formed chat id, else None."""
    if not chat_id:
        return None
    value = chat_id.strip()
    for kind, pattern in CHAT_ID_PATTERNS.items():
        if pattern.match(value):
            return kind
    return None


def validate_telegram_chat_id(chat_id: Optional[str]) -> bool:
    return chat_id_kind(chat_id) is not None


def ensure_telegram_token(token: Optional[str]) -> str:
    """
    Return the stripped token.

    Raises:
        DataValidationError: if the token is missing or malformed
    """
    if not validate_telegram_token(token):
        raise DataValidationError(
            "Invalid bot token. Expected the format 123456789:ABCdef... from @BotFather",
            field="telegram_token",
            expected=TOKEN_PATTERN.pattern,
        )
    return token.strip()


def ensure_telegram_chat_id(chat_id: Optional[str]) -> str:
    """
    Return the stripped chat id.

    Raises:
        DataValidationError: if the chat id is missing or malformed
    """
    if not validate_telegram_chat_id(chat_id):
        raise DataValidationError(
            "Invalid chat ID. Use a numeric user ID, a -100... group ID or an @channel name",
            field="telegram_chat_id",
        )
    return chat_id.strip()
