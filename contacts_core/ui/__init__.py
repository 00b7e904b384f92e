"""Streamlit presentation of synced datasets."""

from .charts import task_results_chart
from .renderers import (
    StreamlitRenderer,
    draw_sort_button,
    history_frame,
    record_choices,
    records_frame,
)

__all__ = [
    "task_results_chart",
    "StreamlitRenderer",
    "draw_sort_button",
    "history_frame",
    "record_choices",
    "records_frame",
]
