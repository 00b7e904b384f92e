"""Typed records shared by the data, sync and UI layers."""

from .records import (
    Record,
    TaskAggregate,
    UNNAMED_TASK,
    UNKNOWN_QUERY,
    parse_timestamp,
    records_from_rows,
    to_dicts,
)

__all__ = [
    "Record",
    "TaskAggregate",
    "UNNAMED_TASK",
    "UNKNOWN_QUERY",
    "parse_timestamp",
    "records_from_rows",
    "to_dicts",
]
