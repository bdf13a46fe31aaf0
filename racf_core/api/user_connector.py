"""
User Service API Connector
Reads and writes user records through the remote user service

Endpoints (relative to the configured base URL):
    GET    health       -> {"status": "ok"}
    GET    users        -> [UserRecord, ...]
    POST   users        -> 201 UserRecord | 400 | 409
    PUT    users/{id}   -> 200 UserRecord | 400 | 404 | 409
    DELETE users/{id}   -> 204 (404 is also accepted: the record is gone either way)
"""
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import logging

from racf_core.errors import RemoteRequestError, RemoteUnavailableError
from racf_core.models.user import CreateUserPayload, UpdateUserPayload, UserRecord

from .base_connector import BaseAPIConnector

logger = logging.getLogger(__name__)


class UserAPIConnector(BaseAPIConnector):
    """
    Connector for the remote user service

    Usage:
        connector = UserAPIConnector(APIConfig("users", "http://localhost:4000/api"))
        users = connector.list_users()
    """

    def health(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        body = self._make_request("health", timeout=timeout)
        return body if isinstance(body, dict) else {}

    def list_users(self) -> List[UserRecord]:
        """Fetch every record. The server's ordering is not relied upon."""
        body = self._make_request("users")
        if body is None:
            return []
        if not isinstance(body, list):
            raise RemoteUnavailableError(
                f"Malformed user list from {self.config.api_name}",
                url=self._build_url("users"),
            )
        return [self._to_record(item) for item in body]

    def create_user(self, payload: CreateUserPayload) -> UserRecord:
        body = self._make_request("users", method="POST", data=payload.to_dict())
        return self._to_record(body)

    def update_user(self, record_id: str, payload: UpdateUserPayload) -> UserRecord:
        body = self._make_request(
            f"users/{quote(record_id, safe='')}",
            method="PUT",
            data=payload.to_dict(),
        )
        return self._to_record(body)

    def delete_user(self, record_id: str) -> None:
        try:
            self._make_request(f"users/{quote(record_id, safe='')}", method="DELETE")
        except RemoteRequestError as e:
            if e.status != 404:
                raise
            logger.debug(f"Remote delete of {record_id}: already absent")

    def _to_record(self, data: Any) -> UserRecord:
        """Parse a record from the response body; an unusable body is a transport fault."""
        if not isinstance(data, dict):
            raise RemoteUnavailableError(
                f"Malformed user record from {self.config.api_name}"
            )
        try:
            return UserRecord.from_dict(data)
        except (KeyError, TypeError) as e:
            raise RemoteUnavailableError(
                f"Malformed user record from {self.config.api_name}: missing {e}"
            ) from e
