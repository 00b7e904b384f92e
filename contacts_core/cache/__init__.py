# contacts_core/cache/__init__.py
"""
Local cache for previously fetched datasets and plain preference flags.
Lets pages draw instantly before the background sync finishes.
"""
from .storage import (
    KeyValueStorage,
    MemoryKeyValueStorage,
    FileKeyValueStorage,
    PreferencesStore,
)
from .cache_manager import (
    LocalCacheStore,
    is_fresh,
    CACHE_PREFIX,
    PARSING_RESULTS_KEY,
    TASK_HISTORY_KEY,
    CONTACTS_DATA_KEY,
    EMAIL_SESSION_KEY,
    RECORD_DATASET_KEYS,
)
from .email_session import EmailSessionStore

__all__ = [
    "KeyValueStorage",
    "MemoryKeyValueStorage",
    "FileKeyValueStorage",
    "PreferencesStore",
    "LocalCacheStore",
    "is_fresh",
    "CACHE_PREFIX",
    "PARSING_RESULTS_KEY",
    "TASK_HISTORY_KEY",
    "CONTACTS_DATA_KEY",
    "EMAIL_SESSION_KEY",
    "RECORD_DATASET_KEYS",
    "EmailSessionStore",
]
