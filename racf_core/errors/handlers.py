# =============================================================================
# racf_core/errors/handlers.py
# Operator-facing error reporting for the console pages
# =============================================================================
"""
Domain errors (RACFAdminError) carry text written for the operator and are
shown as-is. Anything else is logged with its traceback and shown only as
GENERIC_FAILURE_MESSAGE, so internals never reach the page.
"""

from __future__ import annotations
import traceback
from typing import Any, Dict, Optional
import streamlit as st

from racf_core.logging import get_logger
from .exceptions import RACFAdminError

logger = get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong while processing the request"


def user_message_for(error: BaseException) -> str:
    """Text the operator may see for ``error``."""
    if isinstance(error, RACFAdminError):
        return error.message
    return GENERIC_FAILURE_MESSAGE


def _debug_details(error: BaseException) -> Dict[str, Any]:
    if isinstance(error, RACFAdminError):
        return error.details
    return {
        "type": type(error).__name__,
        "traceback": "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ),
    }


def handle_error(
    error: BaseException,
    show_user_message: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Log ``error`` and, unless ``show_user_message`` is False, report it on the page.

    Expected failures (duplicate userid, unknown id, remote rejection) are
    logged as warnings; unexpected ones as errors with a traceback. With
    ``debug_mode`` on, the details are shown in an expander.
    """
    message = user_message or user_message_for(error)

    if isinstance(error, RACFAdminError):
        logger.warning(f"[{error.code}] {error.message}", extra={"details": error.details})
        critical = not error.recoverable
    else:
        logger.error(f"Unexpected {type(error).__name__}: {error}", exc_info=error)
        critical = False

    if not show_user_message:
        return

    if critical:
        st.error(f"Critical Error: {message}. Please contact support.")
    else:
        st.error(f"Error: {message}")

    details = _debug_details(error)
    if details and st.session_state.get("debug_mode", False):
        with st.expander("Error Details", expanded=False):
            st.json(details)


class ErrorContext:
    """
    Wraps a UI action. A failure is reported through handle_error and kept on
    ``error``; recoverable failures are swallowed so the page keeps rendering.

    Usage:
        with ErrorContext("Creating user JDOE") as ctx:
            service.data_service.create_user(payload)
        if not ctx.failed:
            st.rerun()
    """

    def __init__(self, operation: str, recoverable: bool = True):
        self.operation = operation
        self.recoverable = recoverable
        self.error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def __enter__(self) -> ErrorContext:
        logger.debug(f"{self.operation}: started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None:
            logger.info(f"{self.operation}: done")
            return False

        self.error = exc_val
        handle_error(exc_val)
        return self.recoverable
