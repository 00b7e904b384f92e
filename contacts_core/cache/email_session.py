# =============================================================================
# contacts_core/cache/email_session.py
# Email Wizard Session Persistence
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, Optional

from contacts_core.cache.cache_manager import EMAIL_SESSION_KEY, LocalCacheStore
from contacts_core.logging import get_logger

logger = get_logger(__name__)


class EmailSessionStore:
    """
    Keeps the email campaign wizard's progress across page reloads.

    The state rides on the regular cache entry `email_session`, so it
    expires with the normal one-hour window.
    """

    def __init__(self, cache: LocalCacheStore):
        self.cache = cache

    def save(self, state: Dict[str, Any]) -> bool:
        logger.info(f"Saving email session state (step {state.get('step')})")
        return self.cache.write(EMAIL_SESSION_KEY, state)

    def load(self) -> Optional[Dict[str, Any]]:
        state = self.cache.read(EMAIL_SESSION_KEY)
        if not isinstance(state, dict):
            return None
        return state

    def clear(self) -> None:
        self.cache.invalidate(EMAIL_SESSION_KEY)
