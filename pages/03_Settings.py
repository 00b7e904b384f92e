# =============================================================================
# 03_Settings.py - Telegram Notifications and Local Cache
# =============================================================================
from __future__ import annotations

import streamlit as st

from contacts_core.auth import SupabaseAuthProvider, require_authentication
from contacts_core.auth.navigation import add_logout_button
from contacts_core.context import get_app_context
from contacts_core.errors import ContactsCoreError
from contacts_core.errors.handlers import ErrorContext, handle_error, notify_user
from contacts_core.notifications import chat_id_kind

st.set_page_config(
    page_title="Settings - Contact Parsing Dashboard",
    page_icon="⚙️",
    layout="wide",
)

require_authentication()
context = get_app_context()
add_logout_button(context)
notifier = context.notifier


def _provider() -> SupabaseAuthProvider:
    from contacts_core.data.supabase_client import get_cached_supabase_client
    return SupabaseAuthProvider(get_cached_supabase_client(), context.settings)


st.title("⚙️ Settings")

# ============================================================================
# TELEGRAM
# ============================================================================
st.subheader("Telegram notifications")
settings = notifier.settings

if settings.bot_token:
    st.success(f"Connected bot: {settings.bot_name or 'Bot connected'}")
else:
    # Profile copy wins over the local one, as on other devices
    try:
        stored = _provider().get_telegram_connection(st.session_state.get("user_id"))
    except ContactsCoreError as e:
        handle_error(e, show_user_message=False)
        stored = None
    if stored:
        settings.bot_token = stored["token"]
        settings.bot_name = stored["bot_name"]
        settings.chat_id = stored["chat_id"]
        settings.save(context.prefs)
        st.success(f"Connected bot: {settings.bot_name or 'Bot connected'}")

with st.form("telegram_form"):
    token = st.text_input("Bot API token", value=settings.bot_token or "", type="password",
                          help="From @BotFather, e.g. 123456789:ABC...")
    chat_id = st.text_input("Chat ID", value=settings.chat_id or "",
                            help="User ID, -100... group ID or @channel")
    col_connect, col_test = st.columns(2)
    connect = col_connect.form_submit_button("Connect", type="primary", use_container_width=True)
    test = col_test.form_submit_button("Send test message", use_container_width=True)

if connect:
    try:
        bot = notifier.connect_bot(token, chat_id)
        _provider().save_telegram_connection(
            st.session_state.get("user_id"), notifier.settings.bot_token, bot.display_name, notifier.settings.chat_id
        )
        notify_user(f"Bot {bot.display_name} connected ({chat_id_kind(chat_id)} chat)", level="success")
        st.rerun()
    except ContactsCoreError as e:
        st.error(e.message)

if test:
    try:
        notifier.send_test_notification(token or None, chat_id or None)
        notify_user("Test message sent", level="success")
    except ContactsCoreError as e:
        st.error(e.message)

enabled = st.toggle("Notify me when parsing completes", value=settings.parse_notifications)
if enabled != settings.parse_notifications:
    notifier.set_parse_notifications(enabled)

if settings.bot_token and st.button("Disconnect bot"):
    notifier.disconnect_bot()
    with ErrorContext("Removing the Telegram connection from the profile"):
        _provider().save_telegram_connection(st.session_state.get("user_id"), None, None, None)
    st.rerun()

# ============================================================================
# LOCAL CACHE
# ============================================================================
st.subheader("Local cache")
st.caption(
    f"Datasets are cached in `{context.settings.cache_dir}` for "
    f"{int(context.settings.cache_max_age // 60)} minutes and refreshed on every visit."
)
if st.button("Clear cache"):
    with ErrorContext("Clearing the local cache"):
        removed = context.cache.clear_all()
        notify_user(f"Cleared {removed} cache entries", level="success")
