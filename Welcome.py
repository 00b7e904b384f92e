from __future__ import annotations
import asyncio

import streamlit as st

from contacts_core.auth import (
    SupabaseAuthProvider,
    check_authentication,
    initialize_session_state,
    store_session,
)
from contacts_core.auth.navigation import add_logout_button
from contacts_core.context import get_app_context
from contacts_core.errors import ConfigurationError, ContactsCoreError
from contacts_core.errors.handlers import handle_error
from contacts_core.logging import setup_logging
from contacts_core.sync import DataKind
from contacts_core.ui import StreamlitRenderer

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="Contact Parsing Dashboard",
    page_icon="📇",
    layout="wide",
)

setup_logging()
initialize_session_state()
context = get_app_context()


def _auth_provider() -> SupabaseAuthProvider:
    from contacts_core.data.supabase_client import get_cached_supabase_client
    return SupabaseAuthProvider(get_cached_supabase_client(), context.settings)


# ============================================================================
# SIGN IN / REGISTER
# ============================================================================
def render_auth_forms() -> None:
    st.title("📇 Contact Parsing Dashboard")
    st.caption("Sign in to browse parsed organizations, task history and contacts.")

    if not context.settings.has_supabase:
        handle_error(ConfigurationError("Supabase is not configured. Add [supabase] url and key to secrets.toml."))
        return

    login_tab, register_tab = st.tabs(["Sign in", "Register"])

    with login_tab:
        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)
        if submitted:
            try:
                store_session(_auth_provider().login(username.strip(), password))
                st.rerun()
            except ContactsCoreError as e:
                st.error(e.message)

    with register_tab:
        with st.form("register_form"):
            col1, col2 = st.columns(2)
            first_name = col1.text_input("First name")
            last_name = col2.text_input("Last name")
            username = st.text_input("Username", help="3-20 characters: letters, digits, underscore")
            email = st.text_input("Email")
            password = st.text_input("Password", type="password", help="At least 6 characters")
            secret_code = st.text_input("Registration code", type="password")
            submitted = st.form_submit_button("Create account", use_container_width=True)
        if submitted:
            try:
                result = _auth_provider().register({
                    "first_name": first_name,
                    "last_name": last_name,
                    "username": username.strip(),
                    "email": email.strip(),
                    "password": password,
                    "secret_code": secret_code,
                })
                if result.needs_confirmation:
                    st.success("Account created. Confirm your email, then sign in.")
                else:
                    st.success("Account created. You can sign in now.")
            except ContactsCoreError as e:
                st.error(e.message)


# ============================================================================
# OVERVIEW
# ============================================================================
def render_overview() -> None:
    add_logout_button(context)
    st.title("📇 Parsing results")
    st.caption("Shown from the local cache first, then refreshed from the database.")

    renderer = StreamlitRenderer()
    renderer.bind(DataKind.RESULTS)
    controller = context.build_sync_controller(renderer)
    report = asyncio.run(controller.sync(DataKind.RESULTS))

    if report.error is not None and report.shown_from_cache:
        st.caption("⚠️ Showing cached data, the database could not be reached.")

    st.page_link("pages/01_Task_History.py", label="Task history", icon="🗂️")
    st.page_link("pages/02_Contacts.py", label="Contacts", icon="📧")
    st.page_link("pages/03_Settings.py", label="Settings", icon="⚙️")
    st.page_link("pages/04_Email_Campaign.py", label="Email campaign", icon="✉️")


if check_authentication():
    render_overview()
else:
    render_auth_forms()
