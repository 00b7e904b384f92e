"""
Sidebar navigation: signed-in user info and the logout button.
"""

import streamlit as st

from contacts_core.auth.authentication import (
    SupabaseAuthProvider,
    check_authentication,
    logout_user,
)


def add_logout_button(context) -> None:
    """
    Show the signed-in user and a logout button in the sidebar.

    Args:
        context: AppContext of the session (settings and cache for logout)
    """
    if not check_authentication():
        return

    with st.sidebar:
        st.markdown(f"👤 **{st.session_state.get('name') or st.session_state.get('username')}**")
        if st.button("Log out", key="logout_btn", use_container_width=True):
            from contacts_core.data.supabase_client import get_cached_supabase_client

            provider = SupabaseAuthProvider(get_cached_supabase_client(), context.settings)
            logout_user(provider, cache=context.cache)
            st.rerun()
