# =============================================================================
# contacts_core/context.py
# Application Context
# =============================================================================
"""
AppContext - everything a page needs, built once per Streamlit session.

Holds the loop-independent state (settings, cache, preferences, sort order,
remote readiness). Renderers and sync controllers are built per page run
from it, because each run draws into fresh Streamlit slots on a new event
loop.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional

from contacts_core.cache import (
    EmailSessionStore,
    FileKeyValueStorage,
    KeyValueStorage,
    LocalCacheStore,
    PreferencesStore,
)
from contacts_core.config import AppSettings, load_settings
from contacts_core.data import DataStore, ParsingResultsRepository
from contacts_core.data.readiness import ClientFactory, ClientReadiness
from contacts_core.logging import get_logger
from contacts_core.notifications import TelegramGateway, TelegramNotifier
from contacts_core.services import ContactsService
from contacts_core.sync import RemoteSyncController, RenderBoundary, SortController, build_registry

logger = get_logger(__name__)

APP_CONTEXT_KEY = "app_context"


@dataclass
class AppContext:
    """Shared services for one user session."""
    settings: AppSettings
    storage: KeyValueStorage
    cache: LocalCacheStore
    prefs: PreferencesStore
    readiness: ClientReadiness
    notifier: TelegramNotifier
    email_session: EmailSessionStore
    sort_controller: SortController = field(default_factory=SortController)

    def build_sync_controller(
        self,
        renderer: RenderBoundary,
        dedupe_in_flight: bool = False,
    ) -> RemoteSyncController:
        """Wire a sync controller for this run's renderer."""
        return RemoteSyncController(
            cache=self.cache,
            readiness=self.readiness,
            renderer=renderer,
            sort_controller=self.sort_controller,
            registry=build_registry(contacts_limit=self.settings.contacts_limit),
            max_age=self.settings.cache_max_age,
            dedupe_in_flight=dedupe_in_flight,
        )

    async def repository(self) -> ParsingResultsRepository:
        """
        Repository over the ready remote store.

        Raises:
            RemoteUnavailableError: store not ready in time
        """
        store: DataStore = await self.readiness.wait()
        return ParsingResultsRepository(store)

    async def contacts_service(self) -> ContactsService:
        return ContactsService(await self.repository(), self.cache, self.notifier)


def build_app_context(
    settings: AppSettings,
    storage: Optional[KeyValueStorage] = None,
    client_factory: Optional[ClientFactory] = None,
) -> AppContext:
    """
    Assemble an AppContext.

    Args:
        settings: Resolved settings
        storage: Key/value backend (defaults to files under settings.cache_dir)
        client_factory: Coroutine function returning the DataStore
            (defaults to the Supabase async client for the signed-in user)
    """
    if storage is None:
        storage = FileKeyValueStorage(settings.cache_dir)

    if client_factory is None:
        from contacts_core.auth import get_session_tokens
        from contacts_core.data.supabase_client import create_async_store

        def client_factory():
            return create_async_store(settings, get_session_tokens())

    cache = LocalCacheStore(storage, default_max_age=settings.cache_max_age)
    prefs = PreferencesStore(storage)

    return AppContext(
        settings=settings,
        storage=storage,
        cache=cache,
        prefs=prefs,
        readiness=ClientReadiness(client_factory, timeout=settings.readiness_timeout),
        notifier=TelegramNotifier(TelegramGateway(settings.telegram_api_base), prefs),
        email_session=EmailSessionStore(cache),
    )


def get_app_context() -> AppContext:
    """
    Get or create the AppContext of the current Streamlit session.

    Returns:
        AppContext instance kept in st.session_state
    """
    import streamlit as st

    context: Any = st.session_state.get(APP_CONTEXT_KEY)
    if context is None:
        context = build_app_context(load_settings())
        st.session_state[APP_CONTEXT_KEY] = context
        logger.info("Application context created")
    return context
