# =============================================================================
# contacts_core/errors/exceptions.py
# Custom Exception Hierarchy for the Contact Parsing Dashboard
# =============================================================================

from typing import Optional, Dict, Any


class ContactsCoreError(Exception):
    """
    Base exception for all dashboard errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "CACHE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "CORE_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# CACHE EXCEPTIONS
# =============================================================================

class CacheFault(ContactsCoreError):
    """Raised internally when a cache entry cannot be serialized, stored or read"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if key:
            details["key"] = key
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            code="CACHE_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# REMOTE STORE EXCEPTIONS
# =============================================================================

class RemoteUnavailableError(ContactsCoreError):
    """Raised when the remote client handle does not become ready in time"""

    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if timeout is not None:
            details["timeout"] = timeout

        super().__init__(
            message=message,
            code="REMOTE_001",
            details=details,
            **kwargs,
        )


class RemoteQueryError(ContactsCoreError):
    """Raised when the backend answers a query with an error field"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            code="REMOTE_002",
            details=details,
            **kwargs,
        )


# =============================================================================
# INPUT / DOMAIN EXCEPTIONS
# =============================================================================

class DataValidationError(ContactsCoreError):
    """Raised when user-entered data fails a format check"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if expected:
            details["expected"] = expected

        super().__init__(
            message=message,
            code="DATA_001",
            details=details,
            **kwargs,
        )


# Short name used at the input boundary
ValidationError = DataValidationError


class AuthenticationError(ContactsCoreError):
    """Raised when login, registration or session retrieval fails"""

    def __init__(
        self,
        message: str,
        username: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if username:
            details["username"] = username

        super().__init__(
            message=message,
            code="AUTH_001",
            details=details,
            **kwargs,
        )


class NotificationError(ContactsCoreError):
    """Raised when the messaging provider rejects or fails a request"""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if method:
            details["method"] = method
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(
            message=message,
            code="NOTIFY_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(ContactsCoreError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
