# =============================================================================
# tests/unit/test_change_detector.py
# Unit Tests for the head-record change heuristic
# =============================================================================

from dataclasses import replace

from contacts_core.models import Record, TaskAggregate, records_from_rows
from contacts_core.sync import (
    CONTACTS_DETECTOR,
    HISTORY_DETECTOR,
    RESULTS_DETECTOR,
    needs_update,
)


class TestNeedsUpdatePolicy:
    """Test the ordered rules"""

    def test_empty_old_always_updates(self, sample_rows):
        new = records_from_rows(sample_rows)
        assert needs_update([], new)
        assert needs_update(None, new)
        assert needs_update([], [])

    def test_transition_to_empty_updates(self, sample_rows):
        assert needs_update(records_from_rows(sample_rows), [])
        assert needs_update(records_from_rows(sample_rows), None)

    def test_same_dataset_does_not_update(self, sample_rows):
        records = records_from_rows(sample_rows)
        assert needs_update(records, records) is False
        assert needs_update(records, records_from_rows(sample_rows)) is False

    def test_prepended_record_updates(self, sample_rows, row_factory):
        old = records_from_rows(sample_rows)
        new = records_from_rows([row_factory(4, parsed="2024-03-04T10:00:00+00:00")] + sample_rows)
        assert needs_update(old, new)

    def test_length_change_updates(self, sample_rows):
        records = records_from_rows(sample_rows)
        assert needs_update(records, records[:2])

    def test_head_updated_at_change_updates(self, sample_rows):
        records = records_from_rows(sample_rows)
        edited = [replace(records[0], updated_at=records[1].updated_at)] + records[1:]
        assert needs_update(records, edited)

    def test_non_head_change_is_not_detected(self, sample_rows):
        """Known gap: edits below the head with equal length go unnoticed"""
        records = records_from_rows(sample_rows)
        edited = records[:2] + [replace(records[2], organization_name="Renamed", updated_at=records[0].updated_at)]
        assert needs_update(records, edited) is False


class TestDetectorVariants:
    """Each kind compares its own head fields"""

    def test_contacts_detector_watches_email(self):
        old = [Record(id=1, organization_name="A", email="a@x.io")]
        new = [Record(id=1, organization_name="A", email="b@x.io")]

        assert CONTACTS_DETECTOR.needs_update(old, new)
        assert RESULTS_DETECTOR.needs_update(old, new) is False

    def test_contacts_detector_watches_name(self):
        old = [Record(id=1, organization_name="A", email="a@x.io")]
        new = [Record(id=1, organization_name="B", email="a@x.io")]
        assert CONTACTS_DETECTOR.needs_update(old, new)

    def test_history_detector_watches_totals(self, utc):
        old = [TaskAggregate("T", "q", total_results=2, contacts_count=1, latest_date=utc(2024, 1, 1))]
        more = [TaskAggregate("T", "q", total_results=3, contacts_count=1, latest_date=utc(2024, 1, 1))]
        later = [TaskAggregate("T", "q", total_results=2, contacts_count=1, latest_date=utc(2024, 1, 2))]
        contacts_only = [TaskAggregate("T", "q", total_results=2, contacts_count=2, latest_date=utc(2024, 1, 1))]

        assert HISTORY_DETECTOR.needs_update(old, more)
        assert HISTORY_DETECTOR.needs_update(old, later)
        assert HISTORY_DETECTOR.needs_update(old, contacts_only) is False
