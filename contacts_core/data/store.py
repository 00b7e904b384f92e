# =============================================================================
# contacts_core/data/store.py
# DataStore Capability and its Supabase Implementation
# =============================================================================
"""
The relational store is consumed through four operations that never raise:
each returns a QueryResult carrying either rows or an error string.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from contacts_core.logging import get_logger

logger = get_logger(__name__)

# (column, descending)
Order = Tuple[str, bool]

PAGE_SIZE = 1000  # PostgREST default max rows per request


@dataclass
class QueryResult:
    """Rows returned by the store, or the error it reported."""
    rows: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str) -> QueryResult:
        return cls(rows=[], error=error)


class DataStore(Protocol):
    """Async select/insert/update/delete over named collections."""

    async def select(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> QueryResult: ...

    async def insert(self, collection: str, values: Any) -> QueryResult: ...

    async def update(
        self,
        collection: str,
        matcher: Dict[str, Any],
        values: Dict[str, Any],
    ) -> QueryResult: ...

    async def delete(self, collection: str, matcher: Dict[str, Any]) -> QueryResult: ...


class SupabaseDataStore:
    """
    DataStore backed by the async Supabase client.

    Usage:
        store = SupabaseDataStore(await acreate_client(url, key))
        result = await store.select("parsing_results", order=("created_at", True))
        if result.ok:
            rows = result.rows
    """

    def __init__(self, client: Any, tiebreak: Optional[str] = "id"):
        self.client = client
        self.tiebreak = tiebreak

    @staticmethod
    def _apply_filters(query, filters: Optional[Dict[str, Any]]):
        for column, value in (filters or {}).items():
            if value is None:
                query = query.is_(column, "null")
            else:
                query = query.eq(column, value)
        return query

    async def select(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> QueryResult:
        """
        Fetch rows; without a limit, pages through the whole table.

        Args:
            collection: Table name
            filters: Column equality filters
            order: (column, descending) ordering
            limit: Maximum number of rows (None = all)
        """
        def build():
            query = self.client.table(collection).select("*")
            query = self._apply_filters(query, filters)
            if order:
                column, descending = order
                query = query.order(column, desc=descending)
            # range() pages need a total order
            if self.tiebreak and (not order or order[0] != self.tiebreak):
                query = query.order(self.tiebreak)
            return query

        try:
            if limit is not None:
                response = await build().limit(limit).execute()
                return QueryResult(rows=list(response.data or []))

            all_rows: List[Dict[str, Any]] = []
            offset = 0
            while True:
                response = await build().range(offset, offset + PAGE_SIZE - 1).execute()
                batch = response.data or []
                all_rows.extend(batch)
                if len(batch) < PAGE_SIZE:
                    break
                offset += PAGE_SIZE

            return QueryResult(rows=all_rows)

        except Exception as e:
            logger.error(f"Error fetching data from {collection}: {e}")
            return QueryResult.failed(str(e))

    async def insert(self, collection: str, values: Any) -> QueryResult:
        try:
            response = await self.client.table(collection).insert(values).execute()
            return QueryResult(rows=list(response.data or []))
        except Exception as e:
            logger.error(f"Error inserting into {collection}: {e}")
            return QueryResult.failed(str(e))

    async def update(
        self,
        collection: str,
        matcher: Dict[str, Any],
        values: Dict[str, Any],
    ) -> QueryResult:
        try:
            query = self._apply_filters(self.client.table(collection).update(values), matcher)
            response = await query.execute()
            return QueryResult(rows=list(response.data or []))
        except Exception as e:
            logger.error(f"Error updating {collection}: {e}")
            return QueryResult.failed(str(e))

    async def delete(self, collection: str, matcher: Dict[str, Any]) -> QueryResult:
        try:
            query = self._apply_filters(self.client.table(collection).delete(), matcher)
            response = await query.execute()
            return QueryResult(rows=list(response.data or []))
        except Exception as e:
            logger.error(f"Error deleting from {collection}: {e}")
            return QueryResult.failed(str(e))
