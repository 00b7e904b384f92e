# =============================================================================
# contacts_core/ui/charts.py
# Plotly Figures for the History View
# =============================================================================

from __future__ import annotations
from typing import Sequence

import plotly.graph_objects as go

from contacts_core.models import TaskAggregate

CHART_COLORS = {
    "results": "#3b82f6",
    "contacts": "#22c55e",
    "text": "#e2e8f0",
    "grid": "rgba(148, 163, 184, 0.2)",
}


def task_results_chart(aggregates: Sequence[TaskAggregate], max_tasks: int = 15) -> go.Figure:
    """
    Grouped bar chart of results vs. contacts for the newest tasks.

    Args:
        aggregates: Task rollups, newest first
        max_tasks: Number of tasks shown

    Returns:
        Plotly Figure
    """
    shown = list(aggregates[:max_tasks])
    names = [a.task_name for a in shown]

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=names,
        y=[a.total_results for a in shown],
        name="Results",
        marker_color=CHART_COLORS["results"],
    ))
    fig.add_trace(go.Bar(
        x=names,
        y=[a.contacts_count for a in shown],
        name="With email",
        marker_color=CHART_COLORS["contacts"],
    ))

    fig.update_layout(
        barmode="group",
        height=320,
        margin=dict(l=20, r=20, t=30, b=20),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        font=dict(color=CHART_COLORS["text"]),
        legend=dict(orientation="h", y=1.1),
    )
    fig.update_yaxes(showgrid=True, gridcolor=CHART_COLORS["grid"])
    return fig
