# =============================================================================
# racf_core/offline/__init__.py
# Remote-or-local data access for the RACF Admin console
# =============================================================================
"""
Offline-Capable Data Access Module

The console works the same whether the remote user service is reachable or
not. Every operation probes the service and runs entirely on one backend.

Architecture:
------------
                    ┌──────────────────────────┐
                    │    UnifiedDataService    │
                    │  (Single API - UI uses)  │
                    └────────────┬─────────────┘
                                 │ per call
                    ┌────────────┴─────────────┐
                    ▼                          ▼
          ┌──────────────────┐       ┌──────────────────┐
          │ ConnectionManager│       │   LocalBackend   │
          │  (health probe)  │       │  seeded SQLite   │
          └────────┬─────────┘       └──────────────────┘
                   ▼
          ┌──────────────────┐
          │  RemoteBackend   │
          │ UserAPIConnector │
          └──────────────────┘

Usage:
------
from racf_core.offline import get_data_service

service = get_data_service()
users = service.list_users()
print(service.connection_status)  # "online" / "offline"
"""

from racf_core.offline.connection_manager import (
    ConnectionManager,
    ConnectionState,
    ConnectionStatus,
)

from racf_core.offline.local_database import LocalDatabase

from racf_core.offline.settings_store import SettingsStore

from racf_core.offline.seed_manager import (
    SeedManager,
    SeedState,
    DEFAULT_USERS,
)

from racf_core.offline.backends import (
    UserBackend,
    LocalBackend,
    RemoteBackend,
)

from racf_core.offline.unified_data_service import (
    UnifiedDataService,
    build_data_service,
    get_data_service,
)

__all__ = [
    # Connection Management
    "ConnectionManager",
    "ConnectionState",
    "ConnectionStatus",
    # Local storage
    "LocalDatabase",
    "SettingsStore",
    # Seeding
    "SeedManager",
    "SeedState",
    "DEFAULT_USERS",
    # Backends
    "UserBackend",
    "LocalBackend",
    "RemoteBackend",
    # Unified Service (Main API)
    "UnifiedDataService",
    "build_data_service",
    "get_data_service",
]
