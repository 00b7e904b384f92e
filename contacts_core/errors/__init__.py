# =============================================================================
# contacts_core/errors/__init__.py
# Centralized Error Handling for the Contact Parsing Dashboard
# =============================================================================

from .exceptions import (
    ContactsCoreError,
    CacheFault,
    RemoteUnavailableError,
    RemoteQueryError,
    DataValidationError,
    ValidationError,
    AuthenticationError,
    NotificationError,
    ConfigurationError,
)

__all__ = [
    "ContactsCoreError",
    "CacheFault",
    "RemoteUnavailableError",
    "RemoteQueryError",
    "DataValidationError",
    "ValidationError",
    "AuthenticationError",
    "NotificationError",
    "ConfigurationError",
]
