"""
Authentication for the Contact Parsing Dashboard.

Users sign in with a username. The username is resolved to an email through
the `profiles` table and the password is checked by Supabase Auth, so row
level security applies to every later data query made with the session.
New accounts need the registration code handed out by an administrator.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import streamlit as st

from contacts_core.config import AppSettings
from contacts_core.errors import AuthenticationError, DataValidationError
from contacts_core.logging import get_logger

logger = get_logger(__name__)

PROFILES_TABLE = "profiles"
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
REQUIRED_REGISTRATION_FIELDS = ("email", "password", "first_name", "last_name", "username")

# Session-state keys owned by this module
AUTH_STATE_KEYS = [
    "authenticated",
    "username",
    "name",
    "email",
    "user_id",
    "access_token",
    "refresh_token",
]


# ==================== PROVIDER ====================

@dataclass
class RegistrationResult:
    """Outcome of a sign-up."""
    user: Any
    session: Any = None

    @property
    def needs_confirmation(self) -> bool:
        return self.session is None


@dataclass
class LoginResult:
    """Signed-in user, its Supabase session and profile columns."""
    user: Any
    session: Any
    profile: Dict[str, Any]

    @property
    def display_name(self) -> str:
        first = self.profile.get("first_name") or ""
        last = self.profile.get("last_name") or ""
        return f"{first} {last}".strip() or self.profile.get("username", "")


class SupabaseAuthProvider:
    """
    Login, registration and session access over Supabase Auth.

    Usage:
        provider = SupabaseAuthProvider(get_cached_supabase_client(), settings)
        result = provider.login("alice", "secret1")
        store_session(result)
    """

    def __init__(self, client: Any, settings: AppSettings):
        self.client = client
        self.settings = settings

    def _find_profile(self, username: str) -> Optional[Dict[str, Any]]:
        response = (
            self.client.table(PROFILES_TABLE)
            .select("id, email, username, first_name, last_name")
            .eq("username", username)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    def login(self, username: str, password: str) -> LoginResult:
        """
        Sign in with username and password.

        Raises:
            AuthenticationError: unknown user, bad credentials or no session
        """
        if not username or not password:
            raise AuthenticationError("Username and password are required", username=username)

        try:
            profile = self._find_profile(username)
        except Exception as e:
            logger.error(f"Profile lookup failed for {username}: {e}")
            raise AuthenticationError(f"Could not look up user: {e}", username=username) from e

        if not profile or not profile.get("email"):
            raise AuthenticationError("No user with this username", username=username)

        try:
            response = self.client.auth.sign_in_with_password(
                {"email": profile["email"], "password": password}
            )
        except Exception as e:
            message = str(e)
            if "Invalid login credentials" in message:
                raise AuthenticationError("Wrong username or password", username=username) from e
            if "Email not confirmed" in message:
                raise AuthenticationError(
                    "Email not confirmed. Check your inbox or contact an administrator.",
                    username=username,
                ) from e
            raise AuthenticationError(f"Login failed: {message}", username=username) from e

        if response.session is None:
            raise AuthenticationError("Could not create a session", username=username)

        logger.info(f"User signed in: {username}")
        return LoginResult(user=response.user, session=response.session, profile=profile)

    def validate_registration(self, fields: Dict[str, str]) -> None:
        """
        Check a registration form before anything is sent.

        Raises:
            DataValidationError: on the first failing rule
        """
        expected_code = self.settings.registration_code
        if not expected_code or fields.get("secret_code") != expected_code:
            raise DataValidationError(
                "Invalid registration code. Ask an administrator for one.",
                field="secret_code",
            )

        missing = [name for name in REQUIRED_REGISTRATION_FIELDS if not (fields.get(name) or "").strip()]
        if missing:
            raise DataValidationError(
                "All fields are required",
                field=missing[0],
                details={"missing": missing},
            )

        if not USERNAME_PATTERN.match(fields["username"]):
            raise DataValidationError(
                "Username must be 3-20 characters: letters, digits or underscore",
                field="username",
                expected=USERNAME_PATTERN.pattern,
            )

        if not EMAIL_PATTERN.match(fields["email"]):
            raise DataValidationError("Invalid email address", field="email")

        if len(fields["password"]) < MIN_PASSWORD_LENGTH:
            raise DataValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )

    def register(self, fields: Dict[str, str]) -> RegistrationResult:
        """
        Create an account and its profile row.

        Args:
            fields: email, password, first_name, last_name, username, secret_code

        Raises:
            DataValidationError: form rules or username already taken
            AuthenticationError: Supabase rejected the sign-up
        """
        self.validate_registration(fields)
        username = fields["username"]

        try:
            existing = (
                self.client.table(PROFILES_TABLE)
                .select("username")
                .eq("username", username)
                .execute()
            )
        except Exception as e:
            raise AuthenticationError(f"Could not check username availability: {e}", username=username) from e

        if existing.data:
            raise DataValidationError("This username is already taken", field="username")

        try:
            response = self.client.auth.sign_up({
                "email": fields["email"],
                "password": fields["password"],
                "options": {
                    "data": {
                        "first_name": fields["first_name"],
                        "last_name": fields["last_name"],
                        "username": username,
                    }
                },
            })
        except Exception as e:
            if "already registered" in str(e):
                raise AuthenticationError("A user with this email is already registered", username=username) from e
            raise AuthenticationError(f"Registration failed: {e}", username=username) from e

        if response.user is None:
            raise AuthenticationError("Could not create the user", username=username)

        try:
            self.client.table(PROFILES_TABLE).insert({
                "id": response.user.id,
                "username": username,
                "first_name": fields["first_name"],
                "last_name": fields["last_name"],
                "email": fields["email"],
            }).execute()
        except Exception as e:
            raise AuthenticationError(f"Could not create the user profile: {e}", username=username) from e

        logger.info(f"User registered: {username}")
        return RegistrationResult(user=response.user, session=response.session)

    def get_session(self) -> Tuple[Optional[Any], Optional[str]]:
        """Return (session, None) or (None, error message)."""
        try:
            return self.client.auth.get_session(), None
        except Exception as e:
            logger.warning(f"Session lookup failed: {e}")
            return None, str(e)

    def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except Exception as e:
            logger.warning(f"Sign-out failed: {e}")

    # ==================== TELEGRAM CONNECTION ====================

    def get_telegram_connection(self, user_id: Any) -> Optional[Dict[str, Any]]:
        """
        Telegram bot stored on the user's profile, if any.

        Returns:
            {"token", "bot_name", "chat_id", "connected_at"} or None
        """
        try:
            response = (
                self.client.table(PROFILES_TABLE)
                .select("telegram_bot_token, telegram_bot_name, telegram_chat_id, telegram_connected_at")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise AuthenticationError(f"Could not load the Telegram connection: {e}") from e

        rows = response.data or []
        if not rows or not rows[0].get("telegram_bot_token"):
            return None

        row = rows[0]
        return {
            "token": row["telegram_bot_token"],
            "bot_name": row.get("telegram_bot_name"),
            "chat_id": row.get("telegram_chat_id"),
            "connected_at": row.get("telegram_connected_at"),
        }

    def save_telegram_connection(
        self,
        user_id: Any,
        token: Optional[str],
        bot_name: Optional[str],
        chat_id: Optional[str],
    ) -> None:
        """Store (or, with all None, remove) the Telegram bot on the profile."""
        connected_at = datetime.now(timezone.utc).isoformat() if token else None
        try:
            (
                self.client.table(PROFILES_TABLE)
                .update({
                    "telegram_bot_token": token,
                    "telegram_bot_name": bot_name,
                    "telegram_chat_id": chat_id,
                    "telegram_connected_at": connected_at,
                })
                .eq("id", user_id)
                .execute()
            )
        except Exception as e:
            raise AuthenticationError(f"Could not save the Telegram connection: {e}") from e
        logger.info(f"Telegram connection {'saved' if token else 'removed'} for user {user_id}")


# ==================== SESSION STATE HELPERS ====================

def check_authentication() -> bool:
    """
    Check if the current user is authenticated.

    Returns:
        bool: True if user is authenticated, False otherwise
    """
    return st.session_state.get("authenticated", False)


def get_username() -> Optional[str]:
    if not check_authentication():
        return None
    return st.session_state.get("username")


def get_session_tokens() -> Optional[Dict[str, str]]:
    """Access/refresh tokens of the signed-in user for the async data client."""
    if not check_authentication() or not st.session_state.get("access_token"):
        return None
    return {
        "access_token": st.session_state.get("access_token"),
        "refresh_token": st.session_state.get("refresh_token") or "",
    }


def store_session(result: LoginResult) -> None:
    """Record a successful login in session state."""
    st.session_state.authenticated = True
    st.session_state.username = result.profile.get("username")
    st.session_state.name = result.display_name
    st.session_state.email = result.profile.get("email")
    st.session_state.user_id = getattr(result.user, "id", None) or result.profile.get("id")
    st.session_state.access_token = getattr(result.session, "access_token", None)
    st.session_state.refresh_token = getattr(result.session, "refresh_token", None)


def logout_user(provider: Optional[SupabaseAuthProvider] = None, cache=None) -> None:
    """
    Logout the current user and clear session state.

    Args:
        provider: Signs out of Supabase when given
        cache: LocalCacheStore cleared when `clear_cache_on_logout` is set
    """
    if provider is not None:
        provider.sign_out()
        if cache is not None and provider.settings.clear_cache_on_logout:
            cache.clear_all()

    for key in AUTH_STATE_KEYS:
        if key in st.session_state:
            del st.session_state[key]
    logger.info("User logged out")


def initialize_session_state():
    """
    Initialize session state variables for authentication.
    Call this at the start of your main app.
    """
    for key in AUTH_STATE_KEYS:
        if key not in st.session_state:
            st.session_state[key] = False if key == "authenticated" else None


def require_authentication(welcome_page: str = "Welcome.py") -> None:
    """
    Stop the page unless a user is signed in.

    Args:
        welcome_page: Page offered as the sign-in link
    """
    initialize_session_state()
    if check_authentication():
        return

    st.warning("Please sign in to view this page.")
    st.page_link(welcome_page, label="Go to sign in", icon="🔐")
    st.stop()
