# =============================================================================
# racf_core/errors/__init__.py
# Centralized Error Handling for the RACF Admin console
# =============================================================================

from .exceptions import (
    RACFAdminError,
    UserValidationError,
    DuplicateUserError,
    UserNotFoundError,
    RemoteUnavailableError,
    RemoteRequestError,
    StorageError,
    DuplicateKeyError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    user_message_for,
    ErrorContext,
)

__all__ = [
    # Exceptions
    "RACFAdminError",
    "UserValidationError",
    "DuplicateUserError",
    "UserNotFoundError",
    "RemoteUnavailableError",
    "RemoteRequestError",
    "StorageError",
    "DuplicateKeyError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "user_message_for",
    "ErrorContext",
]
