# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

from contacts_core.cache import LocalCacheStore, MemoryKeyValueStorage, PreferencesStore
from contacts_core.data import QueryResult


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

def make_row(
    record_id: int,
    task_name: Optional[str] = "Berlin studios",
    email: Optional[str] = None,
    parsed: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Row shaped like the parsing_results table returns it"""
    row = {
        "id": record_id,
        "organization_name": f"Org {record_id}",
        "email": email if email is not None else f"info{record_id}@example.com",
        "website": f"https://org{record_id}.example.com",
        "country": "DE",
        "task_name": task_name,
        "original_query": "dance studios berlin",
        "parsing_timestamp": parsed,
        "created_at": parsed,
        "updated_at": parsed,
    }
    row.update(extra)
    return row


@pytest.fixture
def sample_rows() -> List[Dict[str, Any]]:
    """Three records, newest first"""
    return [
        make_row(3, parsed="2024-03-03T10:00:00+00:00"),
        make_row(2, parsed="2024-03-02T10:00:00+00:00"),
        make_row(1, parsed="2024-03-01T10:00:00+00:00"),
    ]


@pytest.fixture
def utc():
    def build(*args) -> datetime:
        return datetime(*args, tzinfo=timezone.utc)
    return build


# =============================================================================
# CACHE FIXTURES
# =============================================================================

class FakeClock:
    """Controllable epoch-seconds clock"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest.fixture
def cache(storage, clock) -> LocalCacheStore:
    return LocalCacheStore(storage, clock=clock)


@pytest.fixture
def prefs(storage) -> PreferencesStore:
    return PreferencesStore(storage)


# =============================================================================
# REMOTE / RENDER DOUBLES
# =============================================================================

class FakeDataStore:
    """In-memory DataStore recording every call"""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, error: Optional[str] = None):
        self.rows = list(rows or [])
        self.error = error
        self.calls: List[tuple] = []

    async def select(self, collection, filters=None, order=None, limit=None) -> QueryResult:
        self.calls.append(("select", collection, filters, order, limit))
        if self.error:
            return QueryResult.failed(self.error)
        rows = [r for r in self.rows if all(r.get(k) == v for k, v in (filters or {}).items())]
        if limit is not None:
            rows = rows[:limit]
        return QueryResult(rows=[dict(r) for r in rows])

    async def insert(self, collection, values) -> QueryResult:
        self.calls.append(("insert", collection, values))
        return QueryResult(rows=[values])

    async def update(self, collection, matcher, values) -> QueryResult:
        self.calls.append(("update", collection, matcher, values))
        if self.error:
            return QueryResult.failed(self.error)
        updated = []
        for row in self.rows:
            if all(row.get(k) == v for k, v in matcher.items()):
                row.update(values)
                updated.append(dict(row))
        return QueryResult(rows=updated)

    async def delete(self, collection, matcher) -> QueryResult:
        self.calls.append(("delete", collection, matcher))
        if self.error:
            return QueryResult.failed(self.error)
        kept = [r for r in self.rows if not all(r.get(k) == v for k, v in matcher.items())]
        removed = [r for r in self.rows if r not in kept]
        self.rows = kept
        return QueryResult(rows=removed)


class RecordingRenderer:
    """RenderBoundary that remembers what was drawn"""

    def __init__(self):
        self.events: List[tuple] = []

    def render(self, kind, items) -> None:
        self.events.append(("render", kind, list(items)))

    def placeholder(self, kind, placeholder, message) -> None:
        self.events.append(("placeholder", kind, placeholder))

    def renders(self, kind=None) -> List[list]:
        return [e[2] for e in self.events if e[0] == "render" and (kind is None or e[1] is kind)]

    def placeholders(self, kind=None) -> List[Any]:
        return [e[2] for e in self.events if e[0] == "placeholder" and (kind is None or e[1] is kind)]


@pytest.fixture
def fake_store(sample_rows) -> FakeDataStore:
    return FakeDataStore(sample_rows)


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


# =============================================================================
# MOCK FIXTURES
# =============================================================================

class SessionState(dict):
    """dict with attribute access, like st.session_state"""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture
def mock_streamlit(monkeypatch):
    """Mock Streamlit inside the auth helpers"""
    from contacts_core.auth import authentication

    mock_st = MagicMock()
    mock_st.session_state = SessionState()
    monkeypatch.setattr(authentication, "st", mock_st)
    return mock_st


@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock()
    return mock_client


@pytest.fixture
def row_factory():
    """make_row as a fixture"""
    return make_row


@pytest.fixture
def store_factory():
    """FakeDataStore class, for tests that need their own rows or error"""
    return FakeDataStore
