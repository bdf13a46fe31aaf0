# =============================================================================
# racf_core/services/user_service.py
# User management operations for the UI pages
# =============================================================================

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from racf_core.errors import RACFAdminError, user_message_for
from racf_core.models.user import CreateUserPayload, UpdateUserPayload, UserRecord
from racf_core.offline.unified_data_service import UnifiedDataService, get_data_service

from .base_service import BaseService, ServiceResult


# Record attribute -> table heading
USER_TABLE_COLUMNS = {
    "userid": "User ID",
    "name": "Name",
    "default_group": "Default Group",
    "owner": "Owner",
    "status": "Status",
}


class UserManagementService(BaseService):
    """
    Wraps the UnifiedDataService with ServiceResult returns and the bulk
    actions of the user management page.

    Usage:
        service = UserManagementService()
        result = service.delete_users(selected_ids)
        if not result:
            st.error(result.error)
    """

    MAX_WORKERS = 8

    def __init__(self, data_service: Optional[UnifiedDataService] = None):
        super().__init__()
        self._data_service = data_service or get_data_service()

    @property
    def data_service(self) -> UnifiedDataService:
        return self._data_service

    def list_users(self) -> ServiceResult:
        return self.safe_execute("Listing users", self._data_service.list_users)

    def create_user(self, payload: Union[CreateUserPayload, Dict[str, Any]]) -> ServiceResult:
        return self.safe_execute("Creating user", self._data_service.create_user, payload)

    def update_user(
        self,
        record_id: str,
        payload: Union[UpdateUserPayload, Dict[str, Any]],
    ) -> ServiceResult:
        return self.safe_execute(
            f"Updating user {record_id}", self._data_service.update_user, record_id, payload
        )

    def delete_users(self, record_ids: Sequence[str]) -> ServiceResult:
        """
        Delete several users concurrently.

        Each delete is independent and idempotent: the ones that succeed stay
        deleted even if others fail. Failures are reported together.

        Returns:
            ServiceResult whose metadata holds ``deleted`` (ids) and
            ``failed`` (id -> message)
        """
        ids = list(dict.fromkeys(record_ids))
        if not ids:
            return ServiceResult.ok(data=0, metadata={"deleted": [], "failed": {}})

        deleted: List[str] = []
        failed: Dict[str, str] = {}

        with self.log_operation(f"Deleting {len(ids)} user(s)"):
            with ThreadPoolExecutor(max_workers=min(self.MAX_WORKERS, len(ids))) as pool:
                futures = {
                    record_id: pool.submit(self._data_service.delete_user, record_id)
                    for record_id in ids
                }
                for record_id, future in futures.items():
                    try:
                        future.result()
                    except Exception as e:
                        if not isinstance(e, RACFAdminError):
                            self.logger.error(f"Deleting user {record_id} failed", exc_info=e)
                        failed[record_id] = user_message_for(e)
                    else:
                        deleted.append(record_id)

        metadata = {"deleted": deleted, "failed": failed}
        if failed:
            return ServiceResult.fail(
                f"{len(failed)} of {len(ids)} user(s) could not be deleted",
                error_code="BULK_DELETE",
                metadata=metadata,
            )
        return ServiceResult.ok(data=len(deleted), metadata=metadata)

    @staticmethod
    def users_frame(users: List[UserRecord]) -> pd.DataFrame:
        """Table of users for display, indexed by record id."""
        if not users:
            return pd.DataFrame(columns=list(USER_TABLE_COLUMNS.values()))

        df = pd.DataFrame([
            {attribute: getattr(user, attribute) for attribute in USER_TABLE_COLUMNS}
            for user in users
        ], index=[user.id for user in users])
        return df.rename(columns=USER_TABLE_COLUMNS)
