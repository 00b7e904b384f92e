"""
Cache-first synchronization of the dashboard datasets.

Typical use from a page:

    controller = context.build_sync_controller(StreamlitRenderer(...))
    asyncio.run(controller.sync(DataKind.RESULTS))
"""

from .render import DataKind, PlaceholderKind, RenderBoundary
from .change_detector import (
    ChangeDetector,
    needs_update,
    RESULTS_DETECTOR,
    CONTACTS_DETECTOR,
    HISTORY_DETECTOR,
)
from .grouping import group_by_task
from .sorting import SortDirection, SortController, sort_by_date
from .registry import DataKindSpec, build_registry
from .controller import RemoteSyncController, SyncPhase, SyncReport

__all__ = [
    "DataKind",
    "PlaceholderKind",
    "RenderBoundary",
    "ChangeDetector",
    "needs_update",
    "RESULTS_DETECTOR",
    "CONTACTS_DETECTOR",
    "HISTORY_DETECTOR",
    "group_by_task",
    "SortDirection",
    "SortController",
    "sort_by_date",
    "DataKindSpec",
    "build_registry",
    "RemoteSyncController",
    "SyncPhase",
    "SyncReport",
]
