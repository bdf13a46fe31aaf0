# =============================================================================
# racf_core/offline/connection_manager.py
# Remote User Service Availability Detection
# =============================================================================
"""
ConnectionManager - decides, per operation, whether the remote user service
can be used.

Every check issues a fresh health probe with a short timeout. Nothing is
cached between calls, so a service that comes up or goes down between two
actions is noticed on the next one.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import logging

from racf_core.api.base_connector import BaseAPIConnector
from racf_core.errors import RACFAdminError

logger = logging.getLogger(__name__)


class ConnectionStatus(Enum):
    """Connection status states."""
    ONLINE = "online"           # Health probe succeeded
    OFFLINE = "offline"         # Probe failed or no remote configured
    UNKNOWN = "unknown"         # No probe yet


@dataclass
class ConnectionState:
    """Outcome of the most recent probe."""
    status: ConnectionStatus = ConnectionStatus.UNKNOWN
    remote_configured: bool = False
    last_check: Optional[datetime] = None
    last_online: Optional[datetime] = None
    consecutive_failures: int = 0
    error_message: Optional[str] = None


class ConnectionManager:
    """
    Health prober for the remote user service.

    Usage:
        manager = ConnectionManager(connector)
        if manager.is_remote_available():
            # Use the remote service
        else:
            # Use the local store
    """

    def __init__(
        self,
        connector: Optional[BaseAPIConnector],
        health_timeout: Optional[float] = None,
    ):
        """
        Args:
            connector: Remote connector; None means offline-only mode
            health_timeout: Probe timeout in seconds (defaults to the connector config)
        """
        self._connector = connector
        if health_timeout is None and connector is not None:
            health_timeout = connector.config.health_timeout
        self.health_timeout = health_timeout
        self._state = ConnectionState(remote_configured=connector is not None)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return self._state.status

    @property
    def is_online(self) -> bool:
        """Result of the last probe (does not probe)."""
        return self._state.status == ConnectionStatus.ONLINE

    def is_remote_available(self) -> bool:
        """Probe the remote service now."""
        return self.check_connection().status == ConnectionStatus.ONLINE

    def check_connection(self) -> ConnectionState:
        """
        Perform a health probe and update state.

        Returns:
            Updated ConnectionState
        """
        old_status = self._state.status
        self._state.last_check = datetime.now()

        if self._connector is None:
            self._state.status = ConnectionStatus.OFFLINE
            self._state.error_message = "No remote user service configured"
        else:
            try:
                self._connector.health(timeout=self.health_timeout)
            except RACFAdminError as e:
                self._state.status = ConnectionStatus.OFFLINE
                self._state.consecutive_failures += 1
                self._state.error_message = e.message
                logger.debug(f"Health probe failed: {e.message}")
            else:
                self._state.status = ConnectionStatus.ONLINE
                self._state.last_online = self._state.last_check
                self._state.consecutive_failures = 0
                self._state.error_message = None

        if old_status != self._state.status:
            logger.info(f"User service {old_status.value} -> {self._state.status.value}")

        return self._state

    def get_status_display(self) -> Dict[str, Any]:
        """Snapshot of the last probe for the sidebar badge."""
        state = self._state
        return {
            "status": state.status.value,
            "is_online": state.status == ConnectionStatus.ONLINE,
            "remote_configured": state.remote_configured,
            "last_check": _iso(state.last_check),
            "last_online": _iso(state.last_online),
            "failures": state.consecutive_failures,
            "error": state.error_message,
        }


def _iso(moment: Optional[datetime]) -> Optional[str]:
    return moment.isoformat(timespec="seconds") if moment else None
