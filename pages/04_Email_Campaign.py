# =============================================================================
# 04_Email_Campaign.py - Email Campaign Draft Wizard
# =============================================================================
"""
Email Campaign

Step 1: compose subject and body
Step 2: pick recipients from the contacts list and export them

Wizard progress is kept in the local cache (`email_session`), so a reload
within the hour resumes at the same step.
"""
from __future__ import annotations

import pandas as pd
import streamlit as st

from contacts_core.auth import require_authentication
from contacts_core.auth.navigation import add_logout_button
from contacts_core.cache import CONTACTS_DATA_KEY
from contacts_core.context import get_app_context
from contacts_core.errors.handlers import notify_user
from contacts_core.models import records_from_rows

st.set_page_config(
    page_title="Email Campaign - Contact Parsing Dashboard",
    page_icon="✉️",
    layout="wide",
)

require_authentication()
context = get_app_context()
add_logout_button(context)

st.title("✉️ Email campaign")

session = context.email_session.load() or {"step": 1, "subject": "", "body": "", "recipients": []}
if session.get("step") == 2:
    st.info("Session restored. Continue setting up the campaign.")

# ============================================================================
# STEP 1 - COMPOSE
# ============================================================================
if session.get("step", 1) == 1:
    with st.form("email_compose"):
        subject = st.text_input("Subject", value=session.get("subject", ""))
        body = st.text_area("Message", value=session.get("body", ""), height=240)
        next_step = st.form_submit_button("Save and choose recipients", type="primary")

    if next_step:
        if not subject.strip() or not body.strip():
            notify_user("Subject and message are required", level="warning")
        else:
            context.email_session.save({"step": 2, "subject": subject, "body": body, "recipients": []})
            st.rerun()

# ============================================================================
# STEP 2 - RECIPIENTS
# ============================================================================
else:
    st.markdown(f"**Subject:** {session.get('subject', '')}")
    with st.expander("Message", expanded=False):
        st.text(session.get("body", ""))

    contacts = context.sort_controller.last_rendered or records_from_rows(
        context.cache.read(CONTACTS_DATA_KEY) or []
    )
    if not contacts:
        st.warning("No contacts loaded yet. Open the Contacts page first.")
    else:
        options = sorted({r.email.strip() for r in contacts if r.has_email})
        selected = st.multiselect(
            "Recipients",
            options,
            default=[e for e in session.get("recipients", []) if e in options],
        )
        if selected != session.get("recipients", []):
            session["recipients"] = selected
            context.email_session.save(session)

        st.download_button(
            "Export recipients (CSV)",
            pd.DataFrame({"email": selected}).to_csv(index=False),
            file_name="recipients.csv",
            mime="text/csv",
            disabled=not selected,
        )

    col_back, col_reset = st.columns(2)
    if col_back.button("Back to message"):
        session["step"] = 1
        context.email_session.save(session)
        st.rerun()
    if col_reset.button("Start over"):
        context.email_session.clear()
        st.rerun()
