# =============================================================================
# contacts_core/sync/controller.py
# Stale-While-Revalidate Sync Controller
# =============================================================================
"""
RemoteSyncController - cache-first loading for the dashboard datasets.

For one DataKind a sync runs:

    read cache -> draw it (or a loading placeholder)
    -> await the remote store -> fetch
    -> compare with what is on screen -> redraw only if it changed
    -> write the fresh dataset to the cache

Failures end the invocation. Cached data already drawn stays on screen; an
error placeholder is drawn only when nothing was shown. Nothing is retried
and nothing is raised to the page; the next navigation starts a new cycle.
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from contacts_core.cache import LocalCacheStore
from contacts_core.data.readiness import ClientReadiness
from contacts_core.errors import CacheFault, ContactsCoreError, RemoteQueryError
from contacts_core.logging import get_logger
from contacts_core.models import to_dicts
from contacts_core.sync.registry import DataKindSpec, build_registry
from contacts_core.sync.render import DataKind, PlaceholderKind, RenderBoundary
from contacts_core.sync.sorting import SortController

logger = get_logger(__name__)


class SyncPhase(Enum):
    """States a single sync invocation passes through."""
    IDLE = "idle"
    CACHE_READ = "cache_read"
    RENDERED_FROM_CACHE = "rendered_from_cache"
    RENDERED_EMPTY = "rendered_empty"
    REMOTE_FETCH_PENDING = "remote_fetch_pending"
    FETCH_SUCCEEDED = "fetch_succeeded"
    FETCH_FAILED = "fetch_failed"
    CHANGE_CHECK = "change_check"
    RENDERED_FROM_REMOTE = "rendered_from_remote"
    NO_OP = "no_op"
    CACHE_WRITE = "cache_write"


@dataclass
class SyncReport:
    """What one sync invocation did."""
    kind: DataKind
    phases: List[SyncPhase] = field(default_factory=list)
    cached_count: int = 0
    fetched_count: Optional[int] = None
    redrawn: bool = False
    cache_written: bool = False
    error: Optional[ContactsCoreError] = None

    def enter(self, phase: SyncPhase) -> None:
        self.phases.append(phase)
        logger.debug(f"[{self.kind.value}] -> {phase.value}")

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def shown_from_cache(self) -> bool:
        return SyncPhase.RENDERED_FROM_CACHE in self.phases


class RemoteSyncController:
    """
    Runs cache-then-remote syncs for every DataKind.

    Args:
        cache: Local cache for prepared datasets
        readiness: Awaitable remote store handle
        renderer: Presentation boundary receiving items and placeholders
        sort_controller: Orders the contacts view; bound to the renderer here
        registry: Per-kind specs (defaults to build_registry())
        max_age: Cache age ceiling in seconds (defaults to the cache's own)
        dedupe_in_flight: Share one running sync per kind between callers

    Usage:
        controller = RemoteSyncController(cache, readiness, renderer, sorter)
        report = await controller.sync(DataKind.CONTACTS)
        controller.toggle_contacts_sort()
    """

    def __init__(
        self,
        cache: LocalCacheStore,
        readiness: ClientReadiness,
        renderer: RenderBoundary,
        sort_controller: Optional[SortController] = None,
        registry: Optional[Dict[DataKind, DataKindSpec]] = None,
        max_age: Optional[float] = None,
        dedupe_in_flight: bool = False,
    ):
        self.cache = cache
        self.readiness = readiness
        self.renderer = renderer
        self.sort_controller = sort_controller or SortController()
        self.registry = registry if registry is not None else build_registry()
        self.max_age = max_age
        self.dedupe_in_flight = dedupe_in_flight

        # Dataset currently on screen per kind, in fetch order
        self._rendered: Dict[DataKind, List[Any]] = {}
        self._in_flight: Dict[DataKind, asyncio.Task] = {}

        self.sort_controller.bind(
            lambda items: self.renderer.render(DataKind.CONTACTS, items)
        )

    def rendered(self, kind: DataKind) -> Optional[List[Any]]:
        """Dataset most recently drawn for `kind` (None if nothing was)."""
        return self._rendered.get(kind)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    async def sync(self, kind: DataKind) -> SyncReport:
        """
        Run one stale-while-revalidate cycle for `kind`.

        Never raises; inspect the returned report for the outcome.
        """
        if not self.dedupe_in_flight:
            return await self._run(kind)

        running = self._in_flight.get(kind)
        if running is not None and not running.done():
            logger.info(f"[{kind.value}] Sync already in flight, joining it")
            return await asyncio.shield(running)

        task = asyncio.ensure_future(self._run(kind))
        self._in_flight[kind] = task
        try:
            return await task
        finally:
            if self._in_flight.get(kind) is task:
                del self._in_flight[kind]

    async def sync_many(self, kinds: Iterable[DataKind]) -> List[SyncReport]:
        """Sync several kinds concurrently on the running loop."""
        return list(await asyncio.gather(*(self.sync(kind) for kind in kinds)))

    def toggle_contacts_sort(self) -> List[Any]:
        """Flip the contacts date order and redraw; no fetch is made."""
        return self.sort_controller.toggle()

    # =========================================================================
    # SYNC CYCLE
    # =========================================================================

    async def _run(self, kind: DataKind) -> SyncReport:
        spec = self.registry[kind]
        report = SyncReport(kind=kind)
        report.enter(SyncPhase.IDLE)

        report.enter(SyncPhase.CACHE_READ)
        cached = self._read_cache(spec)
        if cached:
            self._show(spec, cached)
            report.cached_count = len(cached)
            report.enter(SyncPhase.RENDERED_FROM_CACHE)
        else:
            self.renderer.placeholder(kind, PlaceholderKind.LOADING, spec.loading_message)
            self._rendered[kind] = []
            report.enter(SyncPhase.RENDERED_EMPTY)

        report.enter(SyncPhase.REMOTE_FETCH_PENDING)
        try:
            fresh = await self._fetch(spec)
        except ContactsCoreError as e:
            report.error = e
            report.enter(SyncPhase.FETCH_FAILED)
            logger.warning(f"[{kind.value}] Sync failed: {e}")
            if not cached:
                self.renderer.placeholder(kind, PlaceholderKind.ERROR, spec.error_message)
            report.enter(SyncPhase.IDLE)
            return report

        report.fetched_count = len(fresh)
        report.enter(SyncPhase.FETCH_SUCCEEDED)

        report.enter(SyncPhase.CHANGE_CHECK)
        if spec.detector.needs_update(self._rendered.get(kind), fresh):
            if fresh:
                self._show(spec, fresh)
            else:
                self.renderer.placeholder(kind, PlaceholderKind.EMPTY, spec.empty_message)
                self._rendered[kind] = []
            report.redrawn = True
            report.enter(SyncPhase.RENDERED_FROM_REMOTE)
        else:
            logger.info(f"[{kind.value}] No visible changes, skipping redraw")
            report.enter(SyncPhase.NO_OP)

        report.enter(SyncPhase.CACHE_WRITE)
        report.cache_written = self.cache.write(spec.cache_key, to_dicts(fresh))

        report.enter(SyncPhase.IDLE)
        return report

    def _read_cache(self, spec: DataKindSpec) -> List[Any]:
        data = self.cache.read(spec.cache_key, max_age=self.max_age)
        if not data:
            return []
        try:
            return spec.decode(data)
        except (TypeError, ValueError, AttributeError) as e:
            fault = CacheFault(f"Undecodable cache payload: {e}", key=spec.cache_key, operation="read")
            logger.error(str(fault))
            return []

    async def _fetch(self, spec: DataKindSpec) -> List[Any]:
        """
        Await the store, query it and prepare the rows.

        Raises:
            RemoteUnavailableError: store handle not ready in time
            RemoteQueryError: the backend reported an error
        """
        store = await self.readiness.wait()
        try:
            result = await spec.fetch(store)
        except Exception as e:
            logger.error(f"[{spec.kind.value}] Fetch raised: {e}", exc_info=True)
            raise RemoteQueryError(str(e), collection=spec.collection, operation="select") from e

        if not result.ok:
            raise RemoteQueryError(result.error, collection=spec.collection, operation="select")

        items = spec.prepare(result.rows)
        logger.info(f"[{spec.kind.value}] Fetched {len(result.rows)} rows -> {len(items)} items")
        return items

    def _show(self, spec: DataKindSpec, items: List[Any]) -> None:
        if spec.kind is DataKind.CONTACTS:
            self.renderer.render(spec.kind, self.sort_controller.apply(items))
        else:
            self.renderer.render(spec.kind, items)
        self._rendered[spec.kind] = list(items)
