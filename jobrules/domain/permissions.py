"""
Permission policy for job requests and notifications.

Permissions use the document store's wire format, e.g.
``read("user:c1")``.  Only the two principals of a job request ever
receive access; the driver can never delete.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .enums import PermissionAction
from .errors import InvalidInputError

_PERMISSION_RE = re.compile(r'^(?P<action>\w+)\("(?P<role>[^"]+)"\)$')


@dataclass(frozen=True)
class Permission:
    action: PermissionAction
    role: str

    @classmethod
    def for_user(cls, action: PermissionAction, user_id: str) -> Permission:
        return cls(action, f"user:{user_id}")

    @classmethod
    def parse(cls, text: str) -> Permission:
        match = _PERMISSION_RE.match(text.strip())
        if not match:
            raise ValueError(f"Not a permission string: {text!r}")
        return cls(PermissionAction(match["action"]), match["role"])

    def __str__(self) -> str:
        return f'{self.action.value}("{self.role}")'


def _require(user_id: str | None, name: str) -> str:
    if not user_id:
        raise InvalidInputError(f"{name} must be a non-empty user id")
    return user_id


def job_request_permissions(
    client_id: str | None, driver_id: str | None
) -> list[Permission]:
    """Client: read/update/delete.  Driver: read/update."""
    client = _require(client_id, "clientId")
    driver = _require(driver_id, "driverId")
    return [
        Permission.for_user(PermissionAction.READ, client),
        Permission.for_user(PermissionAction.READ, driver),
        Permission.for_user(PermissionAction.UPDATE, client),
        Permission.for_user(PermissionAction.UPDATE, driver),
        Permission.for_user(PermissionAction.DELETE, client),
    ]


def notification_permissions(user_id: str | None) -> list[Permission]:
    user = _require(user_id, "userId")
    return [
        Permission.for_user(action, user)
        for action in (
            PermissionAction.READ,
            PermissionAction.UPDATE,
            PermissionAction.DELETE,
        )
    ]


def grants_for(permissions: list[str], user_id: str) -> set[PermissionAction]:
    """Actions granted to *user_id* by a list of wire-format permissions."""
    role = f"user:{user_id}"
    return {
        p.action for p in map(Permission.parse, permissions) if p.role == role
    }


def to_wire(permissions: list[Permission]) -> list[str]:
    return [str(p) for p in permissions]
