# =============================================================================
# racf_core/services/__init__.py
# Service Layer for the RACF Admin console
# Separates user-management logic from UI presentation
# =============================================================================
"""
Service Layer for the RACF Admin console

Usage Example:
-------------
    from racf_core.services import UserManagementService, build_adduser_command

    service = UserManagementService()
    result = service.list_users()
    if result.success:
        df = service.users_frame(result.data)

    print(build_adduser_command("jdoe", "Jane Doe", "staff"))
"""

from .base_service import BaseService, ServiceResult
from .user_service import UserManagementService, USER_TABLE_COLUMNS
from .command_preview import (
    AUTH_OPTION_LABELS,
    build_adduser_command,
    check_credentials,
)

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # User management
    "UserManagementService",
    "USER_TABLE_COLUMNS",
    # Command preview
    "AUTH_OPTION_LABELS",
    "build_adduser_command",
    "check_credentials",
]
