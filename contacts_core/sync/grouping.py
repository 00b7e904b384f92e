# =============================================================================
# contacts_core/sync/grouping.py
# Task-Level Aggregation for the History View
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from contacts_core.models import Record, TaskAggregate, UNNAMED_TASK, UNKNOWN_QUERY


@dataclass
class _TaskAccumulator:
    task_name: str
    search_query: str
    total_results: int = 0
    contacts_count: int = 0
    latest_date: Optional[datetime] = None

    def add(self, record: Record) -> None:
        self.total_results += 1
        if record.has_email:
            self.contacts_count += 1
        if record.parsing_timestamp is not None and (
            self.latest_date is None or record.parsing_timestamp > self.latest_date
        ):
            self.latest_date = record.parsing_timestamp

    def freeze(self) -> TaskAggregate:
        return TaskAggregate(
            task_name=self.task_name,
            search_query=self.search_query,
            total_results=self.total_results,
            contacts_count=self.contacts_count,
            latest_date=self.latest_date,
        )


def group_by_task(records: Iterable[Record]) -> List[TaskAggregate]:
    """
    Roll records up into one TaskAggregate per task name.

    Groups keep first-seen order before the final stable sort, so ties on
    latest_date come out in the order the tasks first appeared.

    Args:
        records: Normalized records, in fetch order

    Returns:
        Aggregates sorted newest latest_date first (tasks with no dates last)
    """
    groups: Dict[str, _TaskAccumulator] = {}

    for record in records:
        name = record.task_name or UNNAMED_TASK
        group = groups.get(name)
        if group is None:
            group = _TaskAccumulator(
                task_name=name,
                search_query=record.original_query or UNKNOWN_QUERY,
                latest_date=record.parsing_timestamp,
            )
            groups[name] = group
        group.add(record)

    aggregates = [group.freeze() for group in groups.values()]
    dated = [a for a in aggregates if a.latest_date is not None]
    undated = [a for a in aggregates if a.latest_date is None]
    dated.sort(key=lambda a: a.latest_date, reverse=True)
    return dated + undated
