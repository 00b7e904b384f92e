# =============================================================================
# 01_Task_History.py - Parsing Tasks Rolled Up per Task Name
# =============================================================================
"""
Task History

1. Per-task totals (results, results with email, last run), cache first
2. Drill-down into the records of one task
"""
from __future__ import annotations
import asyncio

import streamlit as st

from contacts_core.auth import require_authentication
from contacts_core.auth.navigation import add_logout_button
from contacts_core.context import get_app_context
from contacts_core.errors import ContactsCoreError
from contacts_core.errors.handlers import handle_error, notify_user
from contacts_core.sync import DataKind
from contacts_core.ui import StreamlitRenderer, records_frame

st.set_page_config(
    page_title="Task History - Contact Parsing Dashboard",
    page_icon="🗂️",
    layout="wide",
)

# ============================================================================
# AUTHENTICATION CHECK
# ============================================================================
require_authentication()
context = get_app_context()
add_logout_button(context)

st.title("🗂️ Task history")

renderer = StreamlitRenderer()
renderer.bind(DataKind.HISTORY)
controller = context.build_sync_controller(renderer)
asyncio.run(controller.sync(DataKind.HISTORY))

# ============================================================================
# TASK DRILL-DOWN
# ============================================================================
tasks = [aggregate.task_name for aggregate in renderer.drawn.get(DataKind.HISTORY, [])]
if tasks:
    st.subheader("Task results")
    selected = st.selectbox("Task", tasks, key="history_task")

    if st.button("Show results", key="history_show_results"):
        async def load_task(task_name: str):
            service = await context.contacts_service()
            return await service.view_task_results(task_name)

        try:
            result = asyncio.run(load_task(selected))
        except ContactsCoreError as e:
            handle_error(e)
        else:
            if result.success:
                st.caption(f"{len(result.data)} records in '{selected}'")
                st.dataframe(records_frame(result.data), use_container_width=True, hide_index=True)
            else:
                notify_user(f"Could not load task results: {result.error}")
