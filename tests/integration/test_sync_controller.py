# =============================================================================
# tests/integration/test_sync_controller.py
# Integration Tests: cache -> render -> fetch -> compare -> cache
# =============================================================================
"""
Drives RemoteSyncController end to end with the in-memory cache, a fake
DataStore and a recording renderer.
"""

import asyncio

from contacts_core.cache import (
    CONTACTS_DATA_KEY,
    PARSING_RESULTS_KEY,
    TASK_HISTORY_KEY,
    FileKeyValueStorage,
    LocalCacheStore,
)
from contacts_core.data.readiness import ClientReadiness
from contacts_core.errors import RemoteQueryError, RemoteUnavailableError
from contacts_core.sync import (
    DataKind,
    PlaceholderKind,
    RemoteSyncController,
    SortController,
    SortDirection,
    SyncPhase,
)


def _controller(cache, renderer, store, **kwargs):
    return RemoteSyncController(cache, ClientReadiness.resolved(store), renderer, **kwargs)


def _unavailable():
    async def never_ready():
        await asyncio.sleep(10)
    return ClientReadiness(never_ready, timeout=0.05)


class BrokenStore:
    """Store whose select raises instead of reporting an error"""

    async def select(self, collection, filters=None, order=None, limit=None):
        raise RuntimeError("socket closed")


# =============================================================================
# CACHE MISS
# =============================================================================

class TestColdStart:
    """No cached data"""

    def test_loading_then_fresh_render(self, cache, renderer, fake_store):
        report = asyncio.run(_controller(cache, renderer, fake_store).sync(DataKind.RESULTS))

        assert renderer.placeholders(DataKind.RESULTS) == [PlaceholderKind.LOADING]
        assert [[r.id for r in items] for items in renderer.renders(DataKind.RESULTS)] == [[3, 2, 1]]
        assert report.phases == [
            SyncPhase.IDLE,
            SyncPhase.CACHE_READ,
            SyncPhase.RENDERED_EMPTY,
            SyncPhase.REMOTE_FETCH_PENDING,
            SyncPhase.FETCH_SUCCEEDED,
            SyncPhase.CHANGE_CHECK,
            SyncPhase.RENDERED_FROM_REMOTE,
            SyncPhase.CACHE_WRITE,
            SyncPhase.IDLE,
        ]
        assert [row["id"] for row in cache.read(PARSING_RESULTS_KEY)] == [3, 2, 1]

    def test_empty_remote_draws_empty_state(self, cache, renderer, store_factory):
        report = asyncio.run(_controller(cache, renderer, store_factory([])).sync(DataKind.RESULTS))

        assert renderer.placeholders(DataKind.RESULTS) == [PlaceholderKind.LOADING, PlaceholderKind.EMPTY]
        assert renderer.renders() == []
        assert report.redrawn
        assert cache.read(PARSING_RESULTS_KEY) == []

    def test_unavailable_draws_one_error(self, cache, renderer):
        controller = RemoteSyncController(cache, _unavailable(), renderer)

        report = asyncio.run(controller.sync(DataKind.RESULTS))

        assert renderer.placeholders(DataKind.RESULTS) == [PlaceholderKind.LOADING, PlaceholderKind.ERROR]
        assert isinstance(report.error, RemoteUnavailableError)
        assert report.phases[-2:] == [SyncPhase.FETCH_FAILED, SyncPhase.IDLE]
        assert cache.read(PARSING_RESULTS_KEY) is None

    def test_expired_cache_is_a_miss(self, cache, renderer, fake_store, sample_rows, clock):
        cache.write(PARSING_RESULTS_KEY, sample_rows)
        clock.advance(120)

        report = asyncio.run(_controller(cache, renderer, fake_store, max_age=60).sync(DataKind.RESULTS))

        assert not report.shown_from_cache
        assert renderer.placeholders(DataKind.RESULTS) == [PlaceholderKind.LOADING]


# =============================================================================
# CACHE HIT
# =============================================================================

class TestStaleWhileRevalidate:
    """Cached data is drawn first, then revalidated"""

    def test_unchanged_head_skips_redraw_but_refreshes_cache(
        self, cache, renderer, store_factory, sample_rows, row_factory
    ):
        cache.write(PARSING_RESULTS_KEY, sample_rows)
        remote = [dict(r) for r in sample_rows]
        remote[1]["updated_at"] = "2024-04-01T00:00:00+00:00"

        report = asyncio.run(_controller(cache, renderer, store_factory(remote)).sync(DataKind.RESULTS))

        assert len(renderer.renders(DataKind.RESULTS)) == 1
        assert report.shown_from_cache
        assert not report.redrawn
        assert SyncPhase.NO_OP in report.phases
        assert cache.read(PARSING_RESULTS_KEY)[1]["updated_at"] == "2024-04-01T00:00:00+00:00"

    def test_new_record_redraws(self, cache, renderer, store_factory, sample_rows, row_factory):
        cache.write(PARSING_RESULTS_KEY, sample_rows)
        remote = [row_factory(4, parsed="2024-03-04T10:00:00+00:00")] + sample_rows

        report = asyncio.run(_controller(cache, renderer, store_factory(remote)).sync(DataKind.RESULTS))

        shown = renderer.renders(DataKind.RESULTS)
        assert [len(items) for items in shown] == [3, 4]
        assert report.redrawn
        assert report.cached_count == 3
        assert report.fetched_count == 4

    def test_unavailable_keeps_cached_view(self, cache, renderer, sample_rows):
        cache.write(PARSING_RESULTS_KEY, sample_rows[:2])
        controller = RemoteSyncController(cache, _unavailable(), renderer)

        report = asyncio.run(controller.sync(DataKind.RESULTS))

        assert [len(items) for items in renderer.renders(DataKind.RESULTS)] == [2]
        assert renderer.placeholders() == []
        assert not report.succeeded
        assert len(controller.rendered(DataKind.RESULTS)) == 2

    def test_query_error_leaves_cache_untouched(self, cache, renderer, store_factory, sample_rows):
        cache.write(PARSING_RESULTS_KEY, sample_rows)

        report = asyncio.run(
            _controller(cache, renderer, store_factory(error="JWT expired")).sync(DataKind.RESULTS)
        )

        assert isinstance(report.error, RemoteQueryError)
        assert report.error.details["collection"] == "parsing_results"
        assert not report.cache_written
        assert cache.read(PARSING_RESULTS_KEY) == sample_rows
        assert renderer.placeholders() == []

    def test_raising_store_is_a_query_error(self, cache, renderer):
        report = asyncio.run(_controller(cache, renderer, BrokenStore()).sync(DataKind.CONTACTS))

        assert isinstance(report.error, RemoteQueryError)
        assert "socket closed" in report.error.message
        assert renderer.placeholders(DataKind.CONTACTS) == [PlaceholderKind.LOADING, PlaceholderKind.ERROR]

    def test_binary_cache_file_is_a_miss(self, tmp_path, clock, renderer, fake_store):
        (tmp_path / "cache_parsing_results.json").write_bytes(b"\xff\xfe\x00garbage")
        cache = LocalCacheStore(FileKeyValueStorage(tmp_path), clock=clock)

        report = asyncio.run(_controller(cache, renderer, fake_store).sync(DataKind.RESULTS))

        assert not report.shown_from_cache
        assert report.succeeded
        assert [row["id"] for row in cache.read(PARSING_RESULTS_KEY)] == [3, 2, 1]

    def test_undecodable_cache_is_a_miss(self, cache, renderer, fake_store):
        cache.write(TASK_HISTORY_KEY, ["not an aggregate"])

        report = asyncio.run(_controller(cache, renderer, fake_store).sync(DataKind.HISTORY))

        assert not report.shown_from_cache
        assert report.succeeded


# =============================================================================
# PER-KIND PREPARATION
# =============================================================================

class TestKinds:
    """History grouping and contacts filtering"""

    def test_history_is_grouped_and_cached_as_aggregates(self, cache, renderer, store_factory, row_factory):
        store = store_factory([
            row_factory(3, task_name="B", parsed="2024-01-03T00:00:00+00:00"),
            row_factory(2, task_name="A", email="", parsed="2024-01-02T00:00:00+00:00"),
            row_factory(1, task_name="A", parsed="2024-01-01T00:00:00+00:00"),
        ])

        asyncio.run(_controller(cache, renderer, store).sync(DataKind.HISTORY))

        [aggregates] = renderer.renders(DataKind.HISTORY)
        assert [(a.task_name, a.total_results, a.contacts_count) for a in aggregates] == [
            ("B", 1, 1),
            ("A", 2, 1),
        ]
        assert cache.read(TASK_HISTORY_KEY)[0]["task_name"] == "B"

    def test_history_served_from_cache(self, cache, renderer, fake_store):
        asyncio.run(_controller(cache, renderer, fake_store).sync(DataKind.HISTORY))
        second = type(renderer)()

        report = asyncio.run(_controller(cache, second, fake_store).sync(DataKind.HISTORY))

        assert report.shown_from_cache
        assert not report.redrawn
        assert second.renders(DataKind.HISTORY)[0][0].task_name == "Berlin studios"

    def test_contacts_filtered_and_sorted(self, cache, renderer, store_factory, row_factory):
        store = store_factory([
            row_factory(1, parsed="2024-01-01T00:00:00+00:00"),
            row_factory(2, email="  ", parsed="2024-01-05T00:00:00+00:00"),
            row_factory(3, parsed="2024-01-03T00:00:00+00:00"),
        ])

        asyncio.run(_controller(cache, renderer, store).sync(DataKind.CONTACTS))

        assert [r.id for r in renderer.renders(DataKind.CONTACTS)[-1]] == [3, 1]
        assert [row["id"] for row in cache.read(CONTACTS_DATA_KEY)] == [1, 3]

    def test_contacts_limit(self, cache, renderer, fake_store):
        from contacts_core.sync import build_registry

        controller = _controller(cache, renderer, fake_store, registry=build_registry(contacts_limit=2))
        asyncio.run(controller.sync(DataKind.CONTACTS))

        assert fake_store.calls[0][4] == 2


# =============================================================================
# SORT TOGGLE
# =============================================================================

class TestSortToggle:
    """Toggling re-sorts what is shown without fetching"""

    def test_toggle_twice_no_fetch(self, cache, renderer, fake_store):
        sorter = SortController()
        controller = _controller(cache, renderer, fake_store, sort_controller=sorter)
        asyncio.run(controller.sync(DataKind.CONTACTS))
        calls_after_sync = len(fake_store.calls)

        ascending = controller.toggle_contacts_sort()
        descending = controller.toggle_contacts_sort()

        assert [r.id for r in ascending] == [1, 2, 3]
        assert [r.id for r in descending] == [3, 2, 1]
        assert sorter.direction is SortDirection.DESCENDING
        assert len(fake_store.calls) == calls_after_sync
        assert len(renderer.renders(DataKind.CONTACTS)) == 3

    def test_direction_survives_to_next_sync(self, cache, renderer, fake_store):
        sorter = SortController(SortDirection.ASCENDING)

        asyncio.run(_controller(cache, renderer, fake_store, sort_controller=sorter).sync(DataKind.CONTACTS))

        assert [r.id for r in renderer.renders(DataKind.CONTACTS)[-1]] == [1, 2, 3]


# =============================================================================
# CONCURRENCY
# =============================================================================

class TestConcurrentSyncs:
    """Overlapping invocations"""

    def test_dedupe_shares_one_fetch(self, cache, renderer, fake_store):
        controller = _controller(cache, renderer, fake_store, dedupe_in_flight=True)

        async def main():
            return await asyncio.gather(controller.sync(DataKind.RESULTS), controller.sync(DataKind.RESULTS))

        first, second = asyncio.run(main())

        assert first is second
        assert len(fake_store.calls) == 1

    def test_without_dedupe_both_fetch(self, cache, renderer, fake_store):
        controller = _controller(cache, renderer, fake_store)

        async def main():
            return await asyncio.gather(controller.sync(DataKind.RESULTS), controller.sync(DataKind.RESULTS))

        asyncio.run(main())

        assert len(fake_store.calls) == 2

    def test_sync_many(self, cache, renderer, fake_store):
        controller = _controller(cache, renderer, fake_store)

        reports = asyncio.run(controller.sync_many([DataKind.RESULTS, DataKind.HISTORY, DataKind.CONTACTS]))

        assert [r.kind for r in reports] == [DataKind.RESULTS, DataKind.HISTORY, DataKind.CONTACTS]
        assert all(r.succeeded for r in reports)
        assert all(cache.read(key) for key in (PARSING_RESULTS_KEY, TASK_HISTORY_KEY, CONTACTS_DATA_KEY))


