# =============================================================================
# racf_core/services/base_service.py
# Result container and shared plumbing for the page-facing services
# =============================================================================

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from racf_core.errors import RACFAdminError, user_message_for
from racf_core.logging import LogContext, get_logger


@dataclass
class ServiceResult:
    """
    Outcome of a service call. Pages branch on truthiness and show ``error``;
    ``error`` is always safe to display.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, metadata: Optional[Dict[str, Any]] = None) -> ServiceResult:
        return cls(True, data=data, metadata=metadata)

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        return cls(False, error=error, error_code=error_code, metadata=metadata)

    @classmethod
    def from_exception(cls, e: BaseException) -> ServiceResult:
        if isinstance(e, RACFAdminError):
            return cls.fail(user_message_for(e), error_code=e.code, metadata=e.details)
        return cls.fail(user_message_for(e), error_code="EXCEPTION")


class BaseService(ABC):
    """
    Base for services called from the pages.

    Subclasses wrap data calls in ``safe_execute`` so pages receive a
    ServiceResult instead of an exception:

        class UserManagementService(BaseService):
            def list_users(self) -> ServiceResult:
                return self.safe_execute("Listing users", self._data_service.list_users)
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str) -> LogContext:
        """Timing and outcome logging; domain errors are logged as warnings."""
        return LogContext(self.logger, operation, expected=(RACFAdminError,))

    def safe_execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> ServiceResult:
        """Run ``func`` and fold any exception into a failed ServiceResult."""
        try:
            with self.log_operation(operation):
                data = func(*args, **kwargs)
        except Exception as e:
            return ServiceResult.from_exception(e)
        return ServiceResult.ok(data)
