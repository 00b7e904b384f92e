# =============================================================================
# contacts_core/ui/renderers.py
# Streamlit Implementation of the Render Boundary
# =============================================================================
"""
StreamlitRenderer draws synced datasets into `st.empty()` slots.

A page binds one slot per DataKind it shows. Items for a kind with no slot
are dropped, so a sync started for a section the page does not display
draws nothing.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
import streamlit as st

from contacts_core.logging import get_logger
from contacts_core.models import Record, TaskAggregate
from contacts_core.sync import DataKind, PlaceholderKind, SortController
from contacts_core.ui.charts import task_results_chart

logger = get_logger(__name__)

RECORD_COLUMNS = {
    "organization_name": "Organization",
    "email": "Email",
    "website": "Website",
    "country": "Country",
    "task_name": "Task",
    "date": "Date",
}

HISTORY_COLUMNS = {
    "task_name": "Task",
    "search_query": "Query",
    "total_results": "Results",
    "contacts_count": "With email",
    "latest_date": "Last run",
}


def records_frame(records: Sequence[Record]) -> pd.DataFrame:
    """Table of records with display dates."""
    rows = [
        {
            "organization_name": r.organization_name or "",
            "email": r.email or "",
            "website": r.website or "",
            "country": r.country or "",
            "task_name": r.task_name or "",
            "date": r.display_timestamp,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=list(RECORD_COLUMNS)).rename(columns=RECORD_COLUMNS)


def record_choices(records: Sequence[Record]) -> Dict[str, Record]:
    """Selectbox labels for records; the id keeps same-named records apart."""
    return {
        f"#{r.id} · {r.organization_name or '(no name)'} · {r.email or ''}": r
        for r in records
    }


def draw_sort_button(container: Any, sorter: SortController, on_click) -> None:
    """Date sort button labelled with the direction the sorter holds now."""
    container.button(
        f"Date {sorter.direction.arrow}",
        key="contacts_sort_btn",
        help="Toggle newest/oldest first",
        on_click=on_click,
    )


def history_frame(aggregates: Sequence[TaskAggregate]) -> pd.DataFrame:
    rows = [a.to_dict() for a in aggregates]
    df = pd.DataFrame(rows, columns=list(HISTORY_COLUMNS))
    df["latest_date"] = pd.to_datetime(df["latest_date"], utc=True, errors="coerce")
    return df.rename(columns=HISTORY_COLUMNS)


class StreamlitRenderer:
    """
    Usage:
        renderer = StreamlitRenderer()
        renderer.bind(DataKind.CONTACTS)
        controller = context.build_sync_controller(renderer)
    """

    def __init__(self):
        self._slots: Dict[DataKind, Any] = {}
        self.drawn: Dict[DataKind, List[Any]] = {}

    def bind(self, kind: DataKind, container: Optional[Any] = None) -> None:
        """Reserve an empty slot for `kind` in `container` (or the page)."""
        target = container if container is not None else st
        self._slots[kind] = target.empty()

    def _slot(self, kind: DataKind) -> Optional[Any]:
        slot = self._slots.get(kind)
        if slot is None:
            logger.debug(f"No slot bound for {kind.value}, skipping draw")
        return slot

    def render(self, kind: DataKind, items: Sequence[Any]) -> None:
        slot = self._slot(kind)
        if slot is None:
            return

        self.drawn[kind] = list(items)
        with slot.container():
            if kind is DataKind.HISTORY:
                st.plotly_chart(task_results_chart(items), use_container_width=True)
                st.dataframe(history_frame(items), use_container_width=True, hide_index=True)
            else:
                st.caption(f"{len(items)} records")
                st.dataframe(records_frame(items), use_container_width=True, hide_index=True)

    def placeholder(self, kind: DataKind, placeholder: PlaceholderKind, message: str) -> None:
        slot = self._slot(kind)
        if slot is None:
            return

        self.drawn[kind] = []
        if placeholder is PlaceholderKind.LOADING:
            slot.info(f"⏳ {message}")
        elif placeholder is PlaceholderKind.EMPTY:
            slot.info(message)
        else:
            slot.error(f"❌ {message}")
