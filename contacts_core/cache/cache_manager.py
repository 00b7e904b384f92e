# =============================================================================
# contacts_core/cache/cache_manager.py
# Local Cache Store with Read-Time Expiry
# =============================================================================
"""
LocalCacheStore - best-effort JSON cache for previously fetched datasets.

Entry format (stored under `cache_<key>`):
    {"data": [...], "timestamp": <epoch seconds>, "version": "1.0"}

The cache is never load-bearing: every failure is logged and treated as a
miss, and the remote store stays authoritative.
"""

from __future__ import annotations
import json
import time
from typing import Any, Callable, Optional

from contacts_core.cache.storage import KeyValueStorage
from contacts_core.config import DEFAULT_CACHE_MAX_AGE
from contacts_core.errors import CacheFault
from contacts_core.logging import get_logger

logger = get_logger(__name__)

CACHE_PREFIX = "cache_"
SCHEMA_VERSION = "1.0"

# Dataset keys
PARSING_RESULTS_KEY = "parsing_results"
TASK_HISTORY_KEY = "task_history"
CONTACTS_DATA_KEY = "contacts_data"
EMAIL_SESSION_KEY = "email_session"

# Keys dropped together after any record mutation
RECORD_DATASET_KEYS = (PARSING_RESULTS_KEY, TASK_HISTORY_KEY, CONTACTS_DATA_KEY)


def is_fresh(stored_at: float, max_age: float, now: Optional[float] = None) -> bool:
    """
    Check whether an entry written at `stored_at` is still usable.

    Args:
        stored_at: Epoch seconds of the write
        max_age: Maximum age in seconds
        now: Current epoch seconds (defaults to time.time())

    Returns:
        True if the entry is younger than max_age
    """
    current = time.time() if now is None else now
    return current - stored_at < max_age


def _item_count(data: Any) -> int:
    try:
        return len(data)
    except TypeError:
        return 1 if data is not None else 0


class LocalCacheStore:
    """
    Namespaced cache over a KeyValueStorage.

    Usage:
        cache = LocalCacheStore(FileKeyValueStorage(settings.cache_dir))
        cache.write("contacts_data", [record.to_dict() for record in contacts])
        rows = cache.read("contacts_data")           # None on miss/expiry
        cache.invalidate("contacts_data")
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        default_max_age: float = DEFAULT_CACHE_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.default_max_age = default_max_age
        self._clock = clock

    @staticmethod
    def storage_key(key: str) -> str:
        return f"{CACHE_PREFIX}{key}"

    def write(self, key: str, data: Any) -> bool:
        """
        Store `data` under `key`, replacing any previous entry.

        Returns:
            True if the entry was written, False on a (logged) cache fault
        """
        try:
            entry = {
                "data": data,
                "timestamp": self._clock(),
                "version": SCHEMA_VERSION,
            }
            payload = json.dumps(entry)
        except (TypeError, ValueError) as e:
            fault = CacheFault(f"Could not serialize cache entry: {e}", key=key, operation="write")
            logger.error(str(fault))
            return False

        try:
            self.storage.set(self.storage_key(key), payload)
        except OSError as e:
            fault = CacheFault(f"Could not store cache entry: {e}", key=key, operation="write")
            logger.error(str(fault))
            return False

        logger.info(f"Cached data for key: {key} ({_item_count(data)} items)")
        return True

    def read(self, key: str, max_age: Optional[float] = None) -> Optional[Any]:
        """
        Return cached data if present and younger than `max_age` seconds.

        An expired entry is removed. Corrupt entries are logged and
        treated as a miss.
        """
        max_age = self.default_max_age if max_age is None else max_age

        try:
            raw = self.storage.get(self.storage_key(key))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(str(CacheFault(f"Could not read cache entry: {e}", key=key, operation="read")))
            return None

        if raw is None:
            logger.info(f"No cache found for key: {key}")
            return None

        try:
            entry = json.loads(raw)
            stored_at = float(entry["timestamp"])
            data = entry.get("data")
        except (ValueError, KeyError, TypeError) as e:
            logger.error(str(CacheFault(f"Corrupt cache entry: {e}", key=key, operation="read")))
            return None

        if not is_fresh(stored_at, max_age, now=self._clock()):
            logger.info(f"Cache expired for key: {key}")
            self.invalidate(key)
            return None

        logger.info(f"Cache hit for key: {key} ({_item_count(data)} items)")
        return data

    def invalidate(self, key: str) -> None:
        """Remove the entry for `key` unconditionally."""
        try:
            self.storage.remove(self.storage_key(key))
            logger.info(f"Cache invalidated for key: {key}")
        except OSError as e:
            logger.error(str(CacheFault(f"Could not invalidate cache entry: {e}", key=key, operation="invalidate")))

    def invalidate_many(self, keys) -> None:
        """Invalidate several keys; each removal is independent."""
        for key in keys:
            self.invalidate(key)

    def clear_all(self) -> int:
        """
        Remove every cache entry (preferences are left alone).

        Returns:
            Number of entries removed
        """
        removed = 0
        try:
            cache_keys = [k for k in self.storage.keys() if k.startswith(CACHE_PREFIX)]
        except OSError as e:
            logger.error(str(CacheFault(f"Could not list cache entries: {e}", operation="clear_all")))
            return 0

        for storage_key in cache_keys:
            try:
                self.storage.remove(storage_key)
                removed += 1
            except OSError as e:
                logger.error(f"Error removing cache entry {storage_key}: {e}")

        logger.info(f"Cleared {removed} cache entries")
        return removed
