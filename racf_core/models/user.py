# =============================================================================
# racf_core/models/user.py
# User record model, request payloads and the shared normalization rules
# =============================================================================
"""
User records and payloads.

The same validation and normalization functions are used by every path that
produces a stored record (remote create, local create, update, seeding and the
bundled user service), so a record looks identical no matter which backend
handled the call.

Wire format (JSON) uses camelCase field names:
    id, userid, name, defaultGroup, owner, status, createdAt,
    authOption, expiration
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from racf_core.errors import UserValidationError


# Field rules
USERID_MAX_LENGTH = 8
DEFAULT_OWNER = "IBMUSER"
USER_STATUSES = ("Active", "Inactive")
DEFAULT_STATUS = "Active"
AUTH_OPTIONS = ("1", "2", "3", "4")
DEFAULT_AUTH_OPTION = "1"

# python attribute -> wire name
WIRE_NAMES = {
    "id": "id",
    "userid": "userid",
    "name": "name",
    "default_group": "defaultGroup",
    "owner": "owner",
    "status": "status",
    "created_at": "createdAt",
    "auth_option": "authOption",
    "expiration": "expiration",
}

UPDATABLE_FIELDS = (
    "userid", "name", "default_group", "owner", "status", "auth_option", "expiration",
)


class _Unset:
    """Marker for a field that is absent from an update payload."""

    _instance: Optional[_Unset] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# RECORD
# =============================================================================

@dataclass
class UserRecord:
    """A stored user. ``id`` and ``created_at`` never change after creation."""
    id: str
    userid: str
    name: str
    default_group: str
    owner: str = DEFAULT_OWNER
    status: str = DEFAULT_STATUS
    created_at: str = field(default_factory=utc_timestamp)
    auth_option: Optional[str] = None
    expiration: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using wire field names."""
        return {WIRE_NAMES[name]: getattr(self, name) for name in WIRE_NAMES}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UserRecord:
        """
        Build a record from its wire representation.

        Raises:
            KeyError: if a required field is missing
        """
        return cls(
            id=data["id"],
            userid=data["userid"],
            name=data["name"],
            default_group=data["defaultGroup"],
            owner=data.get("owner") or DEFAULT_OWNER,
            status=data.get("status") or DEFAULT_STATUS,
            created_at=data["createdAt"],
            auth_option=data.get("authOption"),
            expiration=data.get("expiration"),
        )


# =============================================================================
# PAYLOADS
# =============================================================================

@dataclass
class CreateUserPayload:
    """Fields accepted when creating a user."""
    userid: str
    name: str
    default_group: str
    owner: Optional[str] = None
    status: Optional[str] = None
    auth_option: Optional[str] = None
    expiration: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "userid": self.userid,
            "name": self.name,
            "defaultGroup": self.default_group,
        }
        for name in ("owner", "status", "auth_option", "expiration"):
            value = getattr(self, name)
            if value is not None:
                data[WIRE_NAMES[name]] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CreateUserPayload:
        if not isinstance(data, dict):
            raise UserValidationError("Invalid user payload", issues=[
                {"message": "Expected an object", "path": ""}
            ])
        return cls(
            userid=data.get("userid"),
            name=data.get("name"),
            default_group=data.get("defaultGroup"),
            owner=data.get("owner"),
            status=data.get("status"),
            auth_option=data.get("authOption"),
            expiration=data.get("expiration"),
        )


@dataclass
class UpdateUserPayload:
    """
    Partial update. Every field is tri-state:

    - ``UNSET``: absent, the stored value is left alone
    - a value: the field is replaced (after normalization)
    - ``None`` or ``""`` (``expiration`` only): the stored expiration is cleared
    """
    userid: Any = UNSET
    name: Any = UNSET
    default_group: Any = UNSET
    owner: Any = UNSET
    status: Any = UNSET
    auth_option: Any = UNSET
    expiration: Any = UNSET

    def present_fields(self) -> Dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in UPDATABLE_FIELDS
            if getattr(self, name) is not UNSET
        }

    def to_dict(self) -> Dict[str, Any]:
        return {WIRE_NAMES[name]: value for name, value in self.present_fields().items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UpdateUserPayload:
        if not isinstance(data, dict):
            raise UserValidationError("Invalid user payload", issues=[
                {"message": "Expected an object", "path": ""}
            ])
        return cls(**{
            name: data[WIRE_NAMES[name]]
            for name in UPDATABLE_FIELDS
            if WIRE_NAMES[name] in data
        })


# =============================================================================
# VALIDATION AND NORMALIZATION
# =============================================================================

def _required_text(value: Any, path: str, label: str, issues: List[Dict[str, str]]) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        issues.append({"message": f"{label} is required", "path": path})
        return None
    return value.strip()


def _userid(value: Any, issues: List[Dict[str, str]]) -> Optional[str]:
    text = _required_text(value, "userid", "User ID", issues)
    if text is None:
        return None
    if len(text) > USERID_MAX_LENGTH:
        issues.append({
            "message": f"User ID must be at most {USERID_MAX_LENGTH} characters",
            "path": "userid",
        })
        return None
    return text.upper()


def _owner(value: Any, issues: List[Dict[str, str]]) -> str:
    if value is None:
        return DEFAULT_OWNER
    if not isinstance(value, str):
        issues.append({"message": "Owner must be a string", "path": "owner"})
        return DEFAULT_OWNER
    return value.strip().upper() or DEFAULT_OWNER


def _status(value: Any, issues: List[Dict[str, str]]) -> str:
    if value is None:
        return DEFAULT_STATUS
    if value not in USER_STATUSES:
        issues.append({
            "message": f"Status must be one of {', '.join(USER_STATUSES)}",
            "path": "status",
        })
    return value


def _auth_option(value: Any, issues: List[Dict[str, str]]) -> str:
    if value is None:
        return DEFAULT_AUTH_OPTION
    if value not in AUTH_OPTIONS:
        issues.append({
            "message": f"Auth option must be one of {', '.join(AUTH_OPTIONS)}",
            "path": "authOption",
        })
    return value


def _expiration(value: Any, issues: List[Dict[str, str]]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        issues.append({"message": "Expiration must be a date string", "path": "expiration"})
        return None
    return value.strip() or None


def _raise_if_invalid(issues: List[Dict[str, str]]) -> None:
    if issues:
        raise UserValidationError(
            "Invalid user payload",
            field=issues[0]["path"],
            issues=issues,
        )


def normalize_create(payload: Union[CreateUserPayload, Dict[str, Any]]) -> CreateUserPayload:
    """
    Validate a create payload and return a normalized copy with defaults applied.

    Raises:
        UserValidationError: listing every invalid field
    """
    if not isinstance(payload, CreateUserPayload):
        payload = CreateUserPayload.from_dict(payload)

    issues: List[Dict[str, str]] = []
    normalized = CreateUserPayload(
        userid=_userid(payload.userid, issues),
        name=_required_text(payload.name, "name", "Name", issues),
        default_group=_required_text(payload.default_group, "defaultGroup", "Default group", issues),
        owner=_owner(payload.owner, issues),
        status=_status(payload.status, issues),
        auth_option=_auth_option(payload.auth_option, issues),
        expiration=_expiration(payload.expiration, issues),
    )
    _raise_if_invalid(issues)

    normalized.default_group = normalized.default_group.upper()
    return normalized


def normalize_update(payload: Union[UpdateUserPayload, Dict[str, Any]]) -> UpdateUserPayload:
    """
    Validate the present fields of an update payload and return a normalized
    copy. Absent fields stay ``UNSET``; a blank or null expiration becomes
    ``None`` (clear).

    Raises:
        UserValidationError: listing every invalid field
    """
    if not isinstance(payload, UpdateUserPayload):
        payload = UpdateUserPayload.from_dict(payload)

    issues: List[Dict[str, str]] = []
    normalized = UpdateUserPayload()
    present = payload.present_fields()

    if "userid" in present:
        normalized.userid = _userid(present["userid"], issues)
    if "name" in present:
        normalized.name = _required_text(present["name"], "name", "Name", issues)
    if "default_group" in present:
        group = _required_text(present["default_group"], "defaultGroup", "Default group", issues)
        normalized.default_group = group.upper() if group else group
    if "owner" in present:
        normalized.owner = _owner(present["owner"], issues)
    if "status" in present:
        if present["status"] is None:
            issues.append({"message": "Status cannot be cleared", "path": "status"})
        normalized.status = _status(present["status"], issues)
    if "auth_option" in present:
        if present["auth_option"] is None:
            issues.append({"message": "Auth option cannot be cleared", "path": "authOption"})
        normalized.auth_option = _auth_option(present["auth_option"], issues)
    if "expiration" in present:
        normalized.expiration = _expiration(present["expiration"], issues)

    _raise_if_invalid(issues)
    return normalized


def build_record(
    payload: CreateUserPayload,
    record_id: str,
    created_at: Optional[str] = None,
) -> UserRecord:
    """Turn a normalized create payload into a record."""
    return UserRecord(
        id=record_id,
        userid=payload.userid,
        name=payload.name,
        default_group=payload.default_group,
        owner=payload.owner or DEFAULT_OWNER,
        status=payload.status or DEFAULT_STATUS,
        created_at=created_at or utc_timestamp(),
        auth_option=payload.auth_option,
        expiration=payload.expiration,
    )
