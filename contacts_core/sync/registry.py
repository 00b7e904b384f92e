# =============================================================================
# contacts_core/sync/registry.py
# Per-Kind Sync Configuration
# =============================================================================
"""
One DataKindSpec per DataKind: where a dataset is cached, how it is fetched,
how fetched rows and cached payloads become display items, and which change
detector and placeholder messages apply. Built once per controller.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from contacts_core.cache import PARSING_RESULTS_KEY, TASK_HISTORY_KEY, CONTACTS_DATA_KEY
from contacts_core.data import DataStore, QueryResult, ParsingResultsRepository, PARSING_RESULTS_TABLE
from contacts_core.models import Record, TaskAggregate, records_from_rows
from contacts_core.sync.change_detector import (
    ChangeDetector,
    RESULTS_DETECTOR,
    CONTACTS_DETECTOR,
    HISTORY_DETECTOR,
)
from contacts_core.sync.grouping import group_by_task
from contacts_core.sync.render import DataKind

Rows = List[Dict[str, Any]]


@dataclass(frozen=True)
class DataKindSpec:
    """
    Everything the sync controller needs to know about one data kind.

    Attributes:
        kind: The data kind described
        cache_key: LocalCacheStore key for the prepared dataset
        fetch: Coroutine function issuing the remote query on a DataStore
        prepare: Fetched rows -> display items (normalize, group, filter)
        decode: Cached payload -> display items
        detector: Change detector for this kind's item shape
    """
    kind: DataKind
    cache_key: str
    fetch: Callable[[DataStore], Awaitable[QueryResult]]
    prepare: Callable[[Rows], List[Any]]
    decode: Callable[[Rows], List[Any]]
    detector: ChangeDetector
    loading_message: str
    empty_message: str
    error_message: str
    collection: str = PARSING_RESULTS_TABLE


def contacts_from_rows(rows: Optional[Rows]) -> List[Record]:
    """Records that carry a usable email address."""
    return [record for record in records_from_rows(rows) if record.has_email]


def history_from_rows(rows: Optional[Rows]) -> List[TaskAggregate]:
    return group_by_task(records_from_rows(rows))


def aggregates_from_dicts(rows: Optional[Rows]) -> List[TaskAggregate]:
    return [TaskAggregate.from_dict(row) for row in rows or []]


def build_registry(
    contacts_limit: Optional[int] = None,
    table: str = PARSING_RESULTS_TABLE,
) -> Dict[DataKind, DataKindSpec]:
    """
    Build the DataKind -> DataKindSpec table.

    Args:
        contacts_limit: Row cap for the contacts query (None = all rows)
        table: Name of the parsing results table

    Returns:
        Dict with one entry per DataKind
    """
    def repository(store: DataStore) -> ParsingResultsRepository:
        return ParsingResultsRepository(store, table)

    async def fetch_results(store: DataStore) -> QueryResult:
        return await repository(store).fetch_results()

    async def fetch_history(store: DataStore) -> QueryResult:
        return await repository(store).fetch_history_rows()

    async def fetch_contacts(store: DataStore) -> QueryResult:
        return await repository(store).fetch_contacts(limit=contacts_limit)

    return {
        DataKind.RESULTS: DataKindSpec(
            kind=DataKind.RESULTS,
            cache_key=PARSING_RESULTS_KEY,
            fetch=fetch_results,
            prepare=records_from_rows,
            decode=records_from_rows,
            detector=RESULTS_DETECTOR,
            loading_message="Loading data...",
            empty_message="No parsing results yet",
            error_message="Could not load parsing results",
            collection=table,
        ),
        DataKind.HISTORY: DataKindSpec(
            kind=DataKind.HISTORY,
            cache_key=TASK_HISTORY_KEY,
            fetch=fetch_history,
            prepare=history_from_rows,
            decode=aggregates_from_dicts,
            detector=HISTORY_DETECTOR,
            loading_message="Loading history...",
            empty_message="No parsing tasks yet",
            error_message="Could not load task history",
            collection=table,
        ),
        DataKind.CONTACTS: DataKindSpec(
            kind=DataKind.CONTACTS,
            cache_key=CONTACTS_DATA_KEY,
            fetch=fetch_contacts,
            prepare=contacts_from_rows,
            decode=records_from_rows,
            detector=CONTACTS_DETECTOR,
            loading_message="Loading contacts...",
            empty_message="No contacts with an email address yet",
            error_message="Could not load contacts",
            collection=table,
        ),
    }
