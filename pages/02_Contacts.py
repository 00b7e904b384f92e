# =============================================================================
# 02_Contacts.py - Organizations with an Email Address
# =============================================================================
"""
Contacts

1. Records with an email, cache first, sortable by date without refetching
2. Edit or delete a record (record caches are invalidated afterwards)
"""
from __future__ import annotations
import asyncio

import streamlit as st

from contacts_core.auth import require_authentication
from contacts_core.auth.navigation import add_logout_button
from contacts_core.context import get_app_context
from contacts_core.errors import ContactsCoreError
from contacts_core.errors.handlers import handle_error, notify_user
from contacts_core.services import RecordEdit
from contacts_core.sync import DataKind
from contacts_core.ui import StreamlitRenderer, draw_sort_button, record_choices

SORT_TOGGLED_KEY = "_contacts_sort_toggled"

st.set_page_config(
    page_title="Contacts - Contact Parsing Dashboard",
    page_icon="📧",
    layout="wide",
)

# ============================================================================
# AUTHENTICATION CHECK
# ============================================================================
require_authentication()
context = get_app_context()
add_logout_button(context)

st.title("📧 Contacts")


def _request_sort_toggle() -> None:
    st.session_state[SORT_TOGGLED_KEY] = True


# Filled after any toggle below so the arrow matches the order shown
sort_slot = st.empty()

renderer = StreamlitRenderer()
renderer.bind(DataKind.CONTACTS)
controller = context.build_sync_controller(renderer)

if st.session_state.pop(SORT_TOGGLED_KEY, False) and context.sort_controller.last_rendered:
    # Re-sort what is already on screen; no fetch
    controller.toggle_contacts_sort()
    st.caption(f"Sorted {context.sort_controller.direction.value}")
else:
    asyncio.run(controller.sync(DataKind.CONTACTS))

draw_sort_button(sort_slot, context.sort_controller, _request_sort_toggle)

# ============================================================================
# EDIT / DELETE
# ============================================================================
shown = context.sort_controller.last_rendered
if shown:
    st.subheader("Edit a record")
    labels = record_choices(shown)
    choice = st.selectbox("Record", list(labels), key="contacts_record")
    record = labels[choice]
    current = RecordEdit.from_record(record)

    with st.form(f"edit_form_{record.id}"):
        organization_name = st.text_input("Organization name", value=current.organization_name)
        email = st.text_input("Email", value=current.email)
        website = st.text_input("Website", value=current.website)
        country = st.text_input("Country", value=current.country)
        description = st.text_area("Description", value=current.description)
        col_save, col_delete = st.columns(2)
        save = col_save.form_submit_button("Save", type="primary", use_container_width=True)
        delete = col_delete.form_submit_button("Delete", use_container_width=True)

    async def mutate():
        service = await context.contacts_service()
        if delete:
            return await service.delete_record(record.id)
        return await service.edit_record(
            record.id,
            RecordEdit(
                organization_name=organization_name,
                email=email,
                website=website,
                country=country,
                description=description,
            ),
        )

    if save or delete:
        try:
            result = asyncio.run(mutate())
        except ContactsCoreError as e:
            handle_error(e)
        else:
            if result.success:
                notify_user("Record deleted" if delete else "Record saved", level="success")
                st.rerun()
            else:
                notify_user(result.error)
