# =============================================================================
# tests/unit/test_records.py
# Unit Tests for Record / TaskAggregate normalization
# =============================================================================

from datetime import datetime, timezone

from contacts_core.models import (
    Record,
    TaskAggregate,
    UNKNOWN_QUERY,
    UNNAMED_TASK,
    parse_timestamp,
    records_from_rows,
    to_dicts,
)


class TestParseTimestamp:
    """Test timestamp normalization"""

    def test_iso_string_with_offset(self):
        ts = parse_timestamp("2024-03-01T12:00:00+02:00")
        assert ts == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)

    def test_naive_string_is_utc(self):
        assert parse_timestamp("2024-03-01T12:00:00") == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_empty_and_garbage(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("not a date") is None


class TestRecord:
    """Test Record.from_row and derived fields"""

    def test_from_row(self, row_factory):
        record = Record.from_row(row_factory(5, parsed="2024-03-01T10:00:00+00:00"))

        assert record.id == 5
        assert record.organization_name == "Org 5"
        assert record.email == "info5@example.com"
        assert record.parsing_timestamp == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)

    def test_missing_columns_are_none(self):
        record = Record.from_row({"id": 1})
        assert record.email is None
        assert record.created_at is None

    def test_query_column_fallback(self):
        assert Record.from_row({"id": 1, "query": "q"}).search_query == "q"

    def test_has_email(self):
        assert Record(id=1, email="a@b.c").has_email
        assert not Record(id=1, email="  ").has_email
        assert not Record(id=1, email=None).has_email

    def test_display_timestamp_fallbacks(self):
        parsed = datetime(2024, 1, 1, tzinfo=timezone.utc)
        created = datetime(2023, 1, 1, tzinfo=timezone.utc)

        assert Record(id=1, parsing_timestamp=parsed, created_at=created).display_timestamp == parsed
        assert Record(id=1, created_at=created).display_timestamp == created

        before = datetime.now(timezone.utc)
        assert Record(id=1).display_timestamp >= before

    def test_to_dict_round_trip(self, sample_rows):
        records = records_from_rows(sample_rows)
        assert records_from_rows(to_dicts(records)) == records

    def test_to_dict_uses_iso_strings(self, row_factory):
        data = Record.from_row(row_factory(1, parsed="2024-03-01T10:00:00+00:00")).to_dict()
        assert data["parsing_timestamp"] == "2024-03-01T10:00:00+00:00"

    def test_records_from_none(self):
        assert records_from_rows(None) == []


class TestTaskAggregate:
    """Test the history cache payload"""

    def test_from_dict_defaults(self):
        aggregate = TaskAggregate.from_dict({})

        assert aggregate.task_name == UNNAMED_TASK
        assert aggregate.search_query == UNKNOWN_QUERY
        assert aggregate.total_results == 0
        assert aggregate.latest_date is None

    def test_dict_round_trip(self):
        aggregate = TaskAggregate(
            task_name="T",
            search_query="q",
            total_results=3,
            contacts_count=2,
            latest_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert TaskAggregate.from_dict(aggregate.to_dict()) == aggregate
