# =============================================================================
# contacts_core/data/parsing_results.py
# Repository for the `parsing_results` Table
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, Optional

from contacts_core.data.store import DataStore, QueryResult
from contacts_core.models import UNNAMED_TASK

PARSING_RESULTS_TABLE = "parsing_results"


class ParsingResultsRepository:
    """Named queries over parsing_results; all return QueryResult."""

    def __init__(self, store: DataStore, table: str = PARSING_RESULTS_TABLE):
        self.store = store
        self.table = table

    async def fetch_results(self) -> QueryResult:
        """All records, newest created first."""
        return await self.store.select(self.table, order=("created_at", True))

    async def fetch_history_rows(self) -> QueryResult:
        """All records, newest parsed first (input for task grouping)."""
        return await self.store.select(self.table, order=("parsing_timestamp", True))

    async def fetch_contacts(self, limit: Optional[int] = None) -> QueryResult:
        """Records for the contacts view, newest created first."""
        return await self.store.select(self.table, order=("created_at", True), limit=limit)

    async def fetch_task_results(self, task_name: str) -> QueryResult:
        """Records of one task; the unnamed-task group matches NULL task names."""
        return await self.store.select(
            self.table,
            filters={"task_name": None if task_name == UNNAMED_TASK else task_name},
            order=("parsing_timestamp", True),
        )

    async def update_record(self, record_id: Any, values: Dict[str, Any]) -> QueryResult:
        return await self.store.update(self.table, {"id": record_id}, values)

    async def delete_record(self, record_id: Any) -> QueryResult:
        return await self.store.delete(self.table, {"id": record_id})
