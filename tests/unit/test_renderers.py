# =============================================================================
# tests/unit/test_renderers.py
# Unit Tests for the DataFrame builders, chart and StreamlitRenderer
# =============================================================================

from unittest.mock import MagicMock

import pytest

from contacts_core.models import Record, TaskAggregate
from contacts_core.sync import DataKind, PlaceholderKind, SortController, SortDirection
from contacts_core.ui import (
    draw_sort_button,
    history_frame,
    record_choices,
    records_frame,
    task_results_chart,
)
from contacts_core.ui import renderers


@pytest.fixture
def mock_st(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(renderers, "st", mock)
    return mock


class TestFrames:
    """Test table construction"""

    def test_records_frame_columns(self, utc):
        df = records_frame([Record(id=1, organization_name="Acme", email="a@x.io", parsing_timestamp=utc(2024, 1, 1))])

        assert list(df.columns) == ["Organization", "Email", "Website", "Country", "Task", "Date"]
        assert df.iloc[0]["Organization"] == "Acme"
        assert df.iloc[0]["Website"] == ""

    def test_history_frame(self, utc):
        df = history_frame([TaskAggregate("T", "q", 3, 2, utc(2024, 1, 1))])

        assert list(df.columns) == ["Task", "Query", "Results", "With email", "Last run"]
        assert df.iloc[0]["Results"] == 3

    def test_empty_history_frame(self):
        assert history_frame([]).empty


class TestContactsControls:
    """Test the contacts page widgets"""

    def test_same_name_and_email_stay_distinct(self):
        twins = [Record(id=1, organization_name="Acme", email="a@x.io"), Record(id=2, organization_name="Acme", email="a@x.io")]

        choices = record_choices(twins)

        assert [r.id for r in choices.values()] == [1, 2]

    def test_sort_label_follows_toggle(self, utc):
        sorter = SortController()
        sorter.apply([Record(id=1, parsing_timestamp=utc(2024, 1, 1))])
        slot = MagicMock()

        sorter.toggle()
        draw_sort_button(slot, sorter, on_click=None)

        assert slot.button.call_args.args[0] == f"Date {SortDirection.ASCENDING.arrow}"


class TestChart:
    """Test the history bar chart"""

    def test_two_traces_capped(self):
        aggregates = [TaskAggregate(f"T{i}", "q", i, 0) for i in range(20)]

        fig = task_results_chart(aggregates, max_tasks=5)

        assert [trace.name for trace in fig.data] == ["Results", "With email"]
        assert list(fig.data[0].x) == ["T0", "T1", "T2", "T3", "T4"]


class TestStreamlitRenderer:
    """Test slot handling"""

    def test_unbound_kind_is_skipped(self, mock_st):
        renderer = renderers.StreamlitRenderer()

        renderer.render(DataKind.CONTACTS, [Record(id=1)])
        renderer.placeholder(DataKind.CONTACTS, PlaceholderKind.ERROR, "boom")

        assert renderer.drawn == {}
        mock_st.dataframe.assert_not_called()

    def test_render_into_bound_slot(self, mock_st):
        renderer = renderers.StreamlitRenderer()
        renderer.bind(DataKind.RESULTS)

        renderer.render(DataKind.RESULTS, [Record(id=1)])

        assert [r.id for r in renderer.drawn[DataKind.RESULTS]] == [1]
        mock_st.dataframe.assert_called_once()

    def test_placeholders(self, mock_st):
        renderer = renderers.StreamlitRenderer()
        renderer.bind(DataKind.HISTORY)
        slot = mock_st.empty.return_value

        renderer.placeholder(DataKind.HISTORY, PlaceholderKind.LOADING, "Loading history...")
        renderer.placeholder(DataKind.HISTORY, PlaceholderKind.ERROR, "Could not load task history")

        slot.info.assert_called_once_with("⏳ Loading history...")
        slot.error.assert_called_once_with("❌ Could not load task history")
        assert renderer.drawn[DataKind.HISTORY] == []
