# =============================================================================
# racf_core/errors/exceptions.py
# Exception Hierarchy for the RACF Admin data-access layer
# =============================================================================

from typing import Optional, Dict, Any, List


class RACFAdminError(Exception):
    """
    Base exception for all RACF Admin errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "USER_001")
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
        self.code = code or "RACF_000"
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
# USER RECORD EXCEPTIONS
# =============================================================================

class UserValidationError(RACFAdminError):
    """Raised when a user payload is malformed. Surfaced before any write."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        issues: Optional[List[Dict[str, str]]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if issues:
            details["issues"] = issues

        super().__init__(
            message=message,
            code="USER_001",
            details=details,
            **kwargs,
        )
        self.field = field
        self.issues = issues or []


class DuplicateUserError(RACFAdminError):
    """Raised when a userid already exists (case-insensitive)"""

    def __init__(self, userid: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message=message or f"User {userid} already exists",
            code="USER_002",
            details={"userid": userid},
            **kwargs,
        )
        self.userid = userid


class UserNotFoundError(RACFAdminError):
    """Raised when a record id does not exist"""

    def __init__(self, record_id: str, message: Optional[str] = None, **kwargs):
        super().__init__(
            message=message or f"User with id {record_id} not found",
            code="USER_003",
            details={"id": record_id},
            **kwargs,
        )
        self.record_id = record_id


# =============================================================================
# REMOTE SERVICE EXCEPTIONS
# =============================================================================

class RemoteUnavailableError(RACFAdminError):
    """
    Raised when the remote user service cannot be reached or answers with
    something that is not a usable response.

    The data service converts this into a local fallback; it is never shown
    to the operator.
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if url:
            details["url"] = url

        super().__init__(
            message=message,
            code="REMOTE_001",
            details=details,
            **kwargs,
        )


class RemoteRequestError(RACFAdminError):
    """Raised when the remote user service explicitly rejects a request"""

    def __init__(self, status: int, message: str, **kwargs):
        details = kwargs.pop("details", {})
        details["status"] = status

        super().__init__(
            message=message,
            code="REMOTE_002",
            details=details,
            **kwargs,
        )
        self.status = status


# =============================================================================
# LOCAL STORAGE EXCEPTIONS
# =============================================================================

class StorageError(RACFAdminError):
    """Raised when the local persistence layer fails (disk full, locked, denied)"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        if path:
            details["path"] = path

        super().__init__(
            message=message,
            code="STORE_001",
            details=details,
            **kwargs,
        )


class DuplicateKeyError(StorageError):
    """Raised when inserting a record whose id is already stored"""

    def __init__(self, record_id: str, **kwargs):
        super().__init__(
            message=f"Record {record_id} already exists",
            operation="insert",
            **kwargs,
        )
        self.code = "STORE_002"
        self.details["id"] = record_id
        self.record_id = record_id


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(RACFAdminError):
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
