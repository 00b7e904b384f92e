# =============================================================================
# contacts_core/config.py
# Application Settings (Streamlit secrets -> environment -> defaults)
# =============================================================================
"""
Settings for the dashboard.

Expected secrets in .streamlit/secrets.toml:

    [supabase]
    url = "https://your-project.supabase.co"
    key = "your-anon-key"

    [app]
    cache_dir = ".cache/local_storage"
    cache_max_age = 3600
    readiness_timeout = 5.0
    contacts_limit = 0            # 0 = no limit
    registration_code = "..."
    clear_cache_on_logout = false

    [telegram]
    api_base = "https://api.telegram.org"

Each value can also come from the environment (SUPABASE_URL, SUPABASE_KEY,
CONTACTS_CACHE_DIR, CONTACTS_CACHE_MAX_AGE, CONTACTS_READINESS_TIMEOUT,
CONTACTS_LIMIT, CONTACTS_REGISTRATION_CODE, CONTACTS_CLEAR_CACHE_ON_LOGOUT,
TELEGRAM_API_BASE).
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from contacts_core.errors import ConfigurationError
from contacts_core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CACHE_DIR = Path(".cache") / "local_storage"
DEFAULT_CACHE_MAX_AGE = 3600.0          # one hour, in seconds
READINESS_ATTEMPTS = 50
READINESS_INTERVAL = 0.1                # seconds
DEFAULT_READINESS_TIMEOUT = READINESS_ATTEMPTS * READINESS_INTERVAL
DEFAULT_TELEGRAM_API = "https://api.telegram.org"


@dataclass(frozen=True)
class AppSettings:
    """Resolved configuration for one running app."""
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    cache_dir: Path = DEFAULT_CACHE_DIR
    cache_max_age: float = DEFAULT_CACHE_MAX_AGE
    readiness_timeout: float = DEFAULT_READINESS_TIMEOUT
    contacts_limit: Optional[int] = None
    registration_code: Optional[str] = None
    clear_cache_on_logout: bool = False
    telegram_api_base: str = DEFAULT_TELEGRAM_API

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def require_supabase(self) -> None:
        """Raise ConfigurationError when Supabase credentials are missing."""
        if not self.supabase_url:
            raise ConfigurationError("Supabase URL is not configured", config_key="supabase.url")
        if not self.supabase_key:
            raise ConfigurationError("Supabase key is not configured", config_key="supabase.key")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _lookup(secrets: Mapping[str, Any], section: str, key: str, env_var: str) -> Any:
    """Return secrets[section][key], else the environment variable, else None."""
    try:
        if section in secrets and key in secrets[section]:
            return secrets[section][key]
    except Exception as e:
        logger.debug(f"Secrets lookup failed for {section}.{key}: {e}")
    return os.getenv(env_var)


def settings_from_mapping(secrets: Mapping[str, Any]) -> AppSettings:
    """
    Build settings from a secrets-like mapping plus the environment.

    Args:
        secrets: Mapping shaped like st.secrets (sections of key/value pairs)

    Returns:
        AppSettings with defaults for anything not provided
    """
    cache_dir = _lookup(secrets, "app", "cache_dir", "CONTACTS_CACHE_DIR")
    max_age = _lookup(secrets, "app", "cache_max_age", "CONTACTS_CACHE_MAX_AGE")
    timeout = _lookup(secrets, "app", "readiness_timeout", "CONTACTS_READINESS_TIMEOUT")
    limit = _lookup(secrets, "app", "contacts_limit", "CONTACTS_LIMIT")
    clear_on_logout = _lookup(secrets, "app", "clear_cache_on_logout", "CONTACTS_CLEAR_CACHE_ON_LOGOUT")
    api_base = _lookup(secrets, "telegram", "api_base", "TELEGRAM_API_BASE")

    try:
        contacts_limit = int(limit) if limit not in (None, "") else None
        return AppSettings(
            supabase_url=_lookup(secrets, "supabase", "url", "SUPABASE_URL"),
            supabase_key=_lookup(secrets, "supabase", "key", "SUPABASE_KEY"),
            cache_dir=Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR,
            cache_max_age=float(max_age) if max_age not in (None, "") else DEFAULT_CACHE_MAX_AGE,
            readiness_timeout=float(timeout) if timeout not in (None, "") else DEFAULT_READINESS_TIMEOUT,
            contacts_limit=contacts_limit if contacts_limit else None,
            registration_code=_lookup(secrets, "app", "registration_code", "CONTACTS_REGISTRATION_CODE"),
            clear_cache_on_logout=_as_bool(clear_on_logout) if clear_on_logout is not None else False,
            telegram_api_base=(api_base or DEFAULT_TELEGRAM_API).rstrip("/"),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid application setting: {e}", expected_type="number")


def load_settings() -> AppSettings:
    """
    Load settings from Streamlit secrets, falling back to the environment.

    Returns:
        AppSettings instance
    """
    secrets: Mapping[str, Any] = {}
    try:
        import streamlit as st
        # st.secrets raises when no secrets.toml exists
        secrets = {section: dict(values) for section, values in st.secrets.items()
                   if hasattr(values, "items")}
    except Exception as e:
        logger.debug(f"Streamlit secrets not available, using environment: {e}")

    return settings_from_mapping(secrets)
