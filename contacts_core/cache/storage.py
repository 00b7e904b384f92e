# =============================================================================
# contacts_core/cache/storage.py
# Key/Value Storage Backends for the Local Cache
# =============================================================================
"""
Durable string key/value storage.

The cache and the preference flags share one storage instance, the way the
dashboard's browser storage did: cache entries live under `cache_`-prefixed
keys, preferences under plain keys.
"""

from __future__ import annotations
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol
from urllib.parse import quote, unquote

from contacts_core.logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    """Minimal storage contract used by LocalCacheStore and PreferencesStore."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class MemoryKeyValueStorage:
    """In-process storage; nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class FileKeyValueStorage:
    """
    One file per key under a directory.

    Directory Structure:
    -------------------
    .cache/local_storage/
    ├── cache_parsing_results.json
    ├── cache_task_history.json
    ├── cache_contacts_data.json
    └── telegramBotToken.json
    """

    SUFFIX = ".json"

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        # Write to a temp file in the same directory, then swap it in so a
        # reader never sees a half-written entry.
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    def keys(self) -> List[str]:
        return [
            unquote(path.name[: -len(self.SUFFIX)])
            for path in self.directory.glob(f"*{self.SUFFIX}")
        ]


class PreferencesStore:
    """Plain, non-expiring preference flags (notification toggle, bot token, ...)."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        try:
            value = self.storage.get(key)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading preference '{key}': {e}")
            return default
        return default if value is None else value

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return value == "true"

    def set(self, key: str, value: str) -> None:
        self.storage.set(key, value)

    def set_bool(self, key: str, value: bool) -> None:
        self.set(key, "true" if value else "false")

    def remove(self, key: str) -> None:
        self.storage.remove(key)
