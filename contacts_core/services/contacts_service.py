# =============================================================================
# contacts_core/services/contacts_service.py
# Record Editing, Task Drill-Down and Parsing Completion
# =============================================================================
"""
ContactsService - mutations and one-off queries on parsing results.

Every mutation drops the three record-derived cache entries so the next
visit to any dataset runs a full fetch-and-compare cycle.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from contacts_core.cache import LocalCacheStore, RECORD_DATASET_KEYS
from contacts_core.data import ParsingResultsRepository
from contacts_core.errors import DataValidationError, RemoteQueryError
from contacts_core.models import Record, records_from_rows
from contacts_core.notifications import ParsingSummary, TelegramNotifier
from contacts_core.services.base_service import BaseService, ServiceResult

EDITABLE_FIELDS = ("organization_name", "email", "website", "country", "description")


@dataclass
class RecordEdit:
    """User-entered values for the edit form."""
    organization_name: str
    email: Optional[str] = None
    website: Optional[str] = None
    country: Optional[str] = None
    description: Optional[str] = None

    def to_values(self) -> Dict[str, Any]:
        """
        Column values for the update.

        Raises:
            DataValidationError: if the organization name is blank
        """
        name = (self.organization_name or "").strip()
        if not name:
            raise DataValidationError("Organization name is required", field="organization_name")

        values: Dict[str, Any] = {"organization_name": name}
        for column in EDITABLE_FIELDS[1:]:
            value = (getattr(self, column) or "").strip()
            values[column] = value or None
        values["updated_at"] = datetime.now(timezone.utc).isoformat()
        return values

    @classmethod
    def from_record(cls, record: Record) -> RecordEdit:
        return cls(**{column: getattr(record, column) or "" for column in EDITABLE_FIELDS})


@dataclass
class ParsingParams:
    """Input handed to the pipeline orchestrator."""
    task_name: str
    search_query: str
    options: Dict[str, Any] = field(default_factory=dict)


class PipelineOrchestrator(Protocol):
    """External search/scrape/enrich workflow."""

    async def execute_pipeline(self, params: ParsingParams) -> Any: ...


def _raise_on_error(result, operation: str, collection: str) -> None:
    if not result.ok:
        raise RemoteQueryError(result.error, collection=collection, operation=operation)


class ContactsService(BaseService):
    """
    Usage:
        service = ContactsService(repository, context.cache, context.notifier)
        result = await service.edit_record(42, RecordEdit("Acme"))
        if not result:
            notify_user(result.error)
    """

    def __init__(
        self,
        repository: ParsingResultsRepository,
        cache: LocalCacheStore,
        notifier: Optional[TelegramNotifier] = None,
    ):
        super().__init__()
        self.repository = repository
        self.cache = cache
        self.notifier = notifier

    def invalidate_record_caches(self) -> None:
        self.cache.invalidate_many(RECORD_DATASET_KEYS)
        self.logger.info("Record caches invalidated (parsing_results + task_history + contacts_data)")

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    async def edit_record(self, record_id: Any, edit: RecordEdit) -> ServiceResult:
        """Update the editable columns of one record."""
        async def run() -> List[Record]:
            values = edit.to_values()
            result = await self.repository.update_record(record_id, values)
            _raise_on_error(result, "update", self.repository.table)
            self.invalidate_record_caches()
            return records_from_rows(result.rows)

        return await self.safe_execute(f"Updating record {record_id}", run)

    async def delete_record(self, record_id: Any) -> ServiceResult:
        async def run() -> Any:
            result = await self.repository.delete_record(record_id)
            _raise_on_error(result, "delete", self.repository.table)
            self.invalidate_record_caches()
            return record_id

        return await self.safe_execute(f"Deleting record {record_id}", run)

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def view_task_results(self, task_name: str) -> ServiceResult:
        """All records of one task, newest parsed first."""
        async def run() -> List[Record]:
            result = await self.repository.fetch_task_results(task_name)
            _raise_on_error(result, "select", self.repository.table)
            return records_from_rows(result.rows)

        return await self.safe_execute(f"Loading results for task '{task_name}'", run)

    # =========================================================================
    # PARSING COMPLETION
    # =========================================================================

    async def run_parsing(
        self,
        orchestrator: PipelineOrchestrator,
        params: ParsingParams,
    ) -> ServiceResult:
        """
        Run the pipeline and handle its completion.

        On a non-empty result the record caches are invalidated and the
        Telegram notification is sent; a failed notification does not fail
        the run.

        Returns:
            ServiceResult whose data is the ParsingSummary
        """
        async def run() -> ParsingSummary:
            output = await orchestrator.execute_pipeline(params)
            summary = ParsingSummary.from_pipeline(params.task_name, params.search_query, output)

            if summary.result_count == 0:
                raise DataValidationError("No results found", field="results")

            self.invalidate_record_caches()
            if self.notifier is not None:
                await self.notifier.send_parsing_notification(summary)
            return summary

        return await self.safe_execute(f"Parsing task '{params.task_name}'", run)
