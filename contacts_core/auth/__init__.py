"""
Authentication module for the Contact Parsing Dashboard.
"""

from .authentication import (
    SupabaseAuthProvider,
    LoginResult,
    RegistrationResult,
    check_authentication,
    get_username,
    get_session_tokens,
    store_session,
    logout_user,
    initialize_session_state,
    require_authentication,
)

__all__ = [
    "SupabaseAuthProvider",
    "LoginResult",
    "RegistrationResult",
    "check_authentication",
    "get_username",
    "get_session_tokens",
    "store_session",
    "logout_user",
    "initialize_session_state",
    "require_authentication",
]
