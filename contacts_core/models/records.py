# =============================================================================
# contacts_core/models/records.py
# Typed Records for Parsed Organization Contacts
# =============================================================================
"""
Record and TaskAggregate types.

Rows coming back from the `parsing_results` table are loosely typed dicts.
They are turned into `Record` objects exactly once, right after a fetch
(`Record.from_row`), so timestamp parsing and date fallbacks live here and
nowhere else.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

UNNAMED_TASK = "Unnamed Task"
UNKNOWN_QUERY = "Unknown Query"

TIMESTAMP_FIELDS = ("parsing_timestamp", "created_at", "updated_at")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp into a timezone-aware UTC datetime.

    Accepts ISO strings (as returned by PostgREST), datetimes and
    pandas Timestamps. Unparseable or empty values become None.
    """
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 string for cache payloads."""
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class Record:
    """One parsed organization contact from the `parsing_results` table."""
    id: Any
    organization_name: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    country: Optional[str] = None
    task_name: Optional[str] = None
    search_query: Optional[str] = None
    original_query: Optional[str] = None
    parsing_timestamp: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> Record:
        """Normalize one database row (or cached dict) into a Record."""
        return cls(
            id=row.get("id"),
            organization_name=row.get("organization_name"),
            email=row.get("email"),
            description=row.get("description"),
            website=row.get("website"),
            country=row.get("country"),
            task_name=row.get("task_name"),
            search_query=row.get("search_query") or row.get("query"),
            original_query=row.get("original_query"),
            parsing_timestamp=parse_timestamp(row.get("parsing_timestamp")),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for name in TIMESTAMP_FIELDS:
            data[name] = format_timestamp(data[name])
        return data

    @property
    def has_email(self) -> bool:
        return bool(self.email and self.email.strip())

    def dated_or(self, fallback: datetime) -> datetime:
        """Parsing time, then creation time, then `fallback`."""
        return self.parsing_timestamp or self.created_at or fallback

    @property
    def display_timestamp(self) -> datetime:
        """Date shown in tables: parsing time, then creation time, then now."""
        return self.dated_or(datetime.now(timezone.utc))


@dataclass(frozen=True)
class TaskAggregate:
    """Per-task rollup shown in the history view. Never stored remotely."""
    task_name: str
    search_query: str
    total_results: int
    contacts_count: int
    latest_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TaskAggregate:
        return cls(
            task_name=data.get("task_name") or UNNAMED_TASK,
            search_query=data.get("search_query") or UNKNOWN_QUERY,
            total_results=int(data.get("total_results") or 0),
            contacts_count=int(data.get("contacts_count") or 0),
            latest_date=parse_timestamp(data.get("latest_date")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["latest_date"] = format_timestamp(self.latest_date)
        return data


def records_from_rows(rows: Optional[Iterable[Dict[str, Any]]]) -> List[Record]:
    return [Record.from_row(row) for row in rows or []]


def to_dicts(items: Iterable[Any]) -> List[Dict[str, Any]]:
    """Serialize Records or TaskAggregates for the cache."""
    return [item.to_dict() for item in items]
