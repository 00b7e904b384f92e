# =============================================================================
# contacts_core/errors/handlers.py
# Error Handling Utilities for the Contact Parsing Dashboard
# =============================================================================

from __future__ import annotations
import traceback
from typing import Optional
import streamlit as st

from contacts_core.logging import get_logger
from .exceptions import ContactsCoreError

logger = get_logger(__name__)


def notify_user(message: str, level: str = "error") -> None:
    """Show a transient toast; the page keeps rendering."""
    icons = {"error": "❌", "warning": "⚠️", "success": "✅", "info": "ℹ️"}
    st.toast(message, icon=icons.get(level, "ℹ️"))


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Centralized error handling function.

    Args:
        error: The exception to handle
        show_user_message: Whether to display the error as a toast
        log_error: Whether to log the error
        user_message: Custom message to show user (uses error message if None)
    """
    if isinstance(error, ContactsCoreError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        logger.error(
            f"[{code}] {message}",
            extra={"details": details},
            exc_info=True,
        )

    if show_user_message:
        if recoverable:
            notify_user(f"Error: {message}")
        else:
            st.error(f"Critical Error: {message}. Please contact support.")

        if details and st.session_state.get("debug_mode", False):
            with st.expander("Error Details", expanded=False):
                st.json(details)


class ErrorContext:
    """
    Context manager for error handling with automatic logging and user feedback.

    Usage:
        with ErrorContext("Saving Telegram settings"):
            settings.save(preferences)
    """

    def __init__(
        self,
        operation: str,
        recoverable: bool = True,
        show_success: bool = False,
        success_message: Optional[str] = None,
    ):
        self.operation = operation
        self.recoverable = recoverable
        self.show_success = show_success
        self.success_message = success_message

    def __enter__(self) -> ErrorContext:
        logger.info(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            if isinstance(exc_val, ContactsCoreError):
                handle_error(exc_val)
            else:
                handle_error(
                    exc_val,
                    user_message=f"Error during: {self.operation}",
                )
            return self.recoverable

        logger.info(f"Completed: {self.operation}")
        if self.show_success:
            notify_user(self.success_message or f"{self.operation} completed", level="success")

        return False
