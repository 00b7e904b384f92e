# =============================================================================
# contacts_core/data/supabase_client.py
# Supabase Client Construction
# =============================================================================
"""
Two clients are built from the same credentials:

* a synchronous client (cached per process) for Supabase Auth calls made
  from Streamlit callbacks;
* an async client per event loop, wrapped in a SupabaseDataStore, that the
  sync controller awaits through ClientReadiness before fetching.
"""

from __future__ import annotations
from typing import Dict, Optional

import streamlit as st
from supabase import Client, create_client, acreate_client

from contacts_core.config import AppSettings, load_settings
from contacts_core.data.store import DataStore, SupabaseDataStore
from contacts_core.logging import get_logger

logger = get_logger(__name__)


def get_supabase_client(settings: AppSettings) -> Client:
    """
    Create a synchronous Supabase client.

    Raises:
        ConfigurationError: if the URL or key is missing
    """
    settings.require_supabase()
    return create_client(settings.supabase_url, settings.supabase_key)


@st.cache_resource(ttl=3600)  # rebuilt hourly
def get_cached_supabase_client() -> Client:
    """Process-wide synchronous client built from the loaded settings."""
    return get_supabase_client(load_settings())


async def create_async_store(
    settings: AppSettings,
    session_tokens: Optional[Dict[str, str]] = None,
) -> DataStore:
    """
    Build the async client for the running loop and wrap it as a DataStore.

    Args:
        settings: Resolved app settings (Supabase URL and key required)
        session_tokens: {"access_token", "refresh_token"} of the signed-in user,
            attached so row-level security applies to data queries

    Returns:
        SupabaseDataStore over a fresh AsyncClient
    """
    settings.require_supabase()
    client = await acreate_client(settings.supabase_url, settings.supabase_key)
    if session_tokens and session_tokens.get("access_token"):
        await client.auth.set_session(
            session_tokens["access_token"],
            session_tokens.get("refresh_token", ""),
        )
    return SupabaseDataStore(client)
