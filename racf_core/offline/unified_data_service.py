# =============================================================================
# racf_core/offline/unified_data_service.py
# Unified Data Service - Single API for remote/local user operations
# =============================================================================
"""
UnifiedDataService - the only data API the UI uses.

For every operation it:
1. Validates and normalizes the payload (same rules for both backends)
2. Probes the remote user service
3. Runs the whole operation on the remote service if it answered, or on the
   seeded local store if it did not

An operation is never split between backends and remote and local state are
never merged. If the remote service drops out in the middle of a call, the
operation is run again on the local store instead.

Usage:
------
from racf_core.offline import get_data_service

service = get_data_service()
users = service.list_users()
service.create_user({"userid": "jdoe", "name": "Jane Doe", "defaultGroup": "staff"})
"""

from __future__ import annotations
import threading
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union
import logging

from racf_core.errors import RemoteUnavailableError
from racf_core.models.user import (
    CreateUserPayload,
    UpdateUserPayload,
    UserRecord,
    normalize_create,
    normalize_update,
)
from racf_core.offline.backends import LocalBackend, RemoteBackend, UserBackend
from racf_core.offline.connection_manager import ConnectionManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnifiedDataService:
    """
    Data access facade choosing the remote or local backend per call.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        local_backend: LocalBackend,
        remote_backend: Optional[RemoteBackend] = None,
    ):
        self._connection_manager = connection_manager
        self._local = local_backend
        self._remote = remote_backend

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    @property
    def is_online(self) -> bool:
        """Whether the last operation could use the remote service."""
        return self._connection_manager.is_online

    @property
    def connection_status(self) -> str:
        return self._connection_manager.status.value

    def get_status(self) -> Dict[str, Any]:
        return self._connection_manager.get_status_display()

    # =========================================================================
    # BACKEND SELECTION
    # =========================================================================

    def _select_backend(self) -> UserBackend:
        if self._remote is not None and self._connection_manager.is_remote_available():
            return self._remote
        return self._local

    def _run(self, operation: str, call: Callable[[UserBackend], T]) -> T:
        backend = self._select_backend()
        logger.debug(f"{operation} via {backend.name} backend")

        if backend is self._local:
            return call(self._local)

        try:
            return call(backend)
        except RemoteUnavailableError as e:
            logger.warning(f"{operation}: remote service unavailable ({e.message}), using local store")
            return call(self._local)

    # =========================================================================
    # USER OPERATIONS
    # =========================================================================

    def list_users(self) -> List[UserRecord]:
        """All users ordered by userid."""
        users = self._run("List users", lambda backend: backend.list_users())
        return sorted(users, key=lambda user: (user.userid, user.id))

    def create_user(self, payload: Union[CreateUserPayload, Dict[str, Any]]) -> UserRecord:
        """
        Create a user.

        Raises:
            UserValidationError: invalid payload (before anything is written)
            DuplicateUserError: userid already taken
            RemoteRequestError: the remote service rejected the request
            StorageError: the local store failed
        """
        normalized = normalize_create(payload)
        return self._run(
            f"Create user {normalized.userid}",
            lambda backend: backend.create_user(normalized),
        )

    def update_user(
        self,
        record_id: str,
        payload: Union[UpdateUserPayload, Dict[str, Any]],
    ) -> UserRecord:
        """
        Update only the fields present in ``payload``.

        Raises:
            UserValidationError: invalid payload (before anything is written)
            UserNotFoundError: no record with this id
            DuplicateUserError: the new userid belongs to another record
            RemoteRequestError: the remote service rejected the request
            StorageError: the local store failed
        """
        normalized = normalize_update(payload)
        return self._run(
            f"Update user {record_id}",
            lambda backend: backend.update_user(record_id, normalized),
        )

    def delete_user(self, record_id: str) -> None:
        """Delete a user. Deleting an id that does not exist succeeds."""
        self._run(
            f"Delete user {record_id}",
            lambda backend: backend.delete_user(record_id),
        )


# Singleton accessor
_data_service: Optional[UnifiedDataService] = None
_data_service_lock = threading.Lock()


def build_data_service(config_manager=None) -> UnifiedDataService:
    """Wire a UnifiedDataService from configuration."""
    from racf_core.api.config_manager import APIConfigManager
    from racf_core.api.user_connector import UserAPIConnector
    from racf_core.offline.local_database import LocalDatabase
    from racf_core.offline.seed_manager import SeedManager
    from racf_core.offline.settings_store import SettingsStore

    config_manager = config_manager or APIConfigManager()
    data_dir = config_manager.data_dir

    database = LocalDatabase(data_dir / "racf_users.db")
    database.initialize()
    seed_manager = SeedManager(database, SettingsStore(data_dir / "settings.json"))
    local_backend = LocalBackend(database, seed_manager)

    connector = None
    remote_backend = None
    if config_manager.is_remote_configured:
        connector = UserAPIConnector(config_manager.get_user_api_config())
        remote_backend = RemoteBackend(connector)
    else:
        logger.info("No remote user service configured, working from the local store")

    return UnifiedDataService(
        connection_manager=ConnectionManager(connector),
        local_backend=local_backend,
        remote_backend=remote_backend,
    )


def get_data_service() -> UnifiedDataService:
    """
    Get the global UnifiedDataService instance.

    Returns:
        UnifiedDataService singleton
    """
    global _data_service
    if _data_service is None:
        with _data_service_lock:
            if _data_service is None:
                _data_service = build_data_service()
                logger.info("UnifiedDataService initialized")
    return _data_service
