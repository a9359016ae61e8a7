from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """
    Account roles:
    - ADMIN: moderation, statistics, any post
    - USER: own posts and comments only
    """

    ADMIN = "ADMIN"
    USER = "USER"

    @classmethod
    def values(cls) -> list[str]:
        return [role.value for role in cls]


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]


ALL_ROLES: set[str] = set(Role.values())

DEFAULT_ROLE = Role.USER


def normalize_role(raw: str | Role | None, default: Role = DEFAULT_ROLE) -> str:
    """
    Clean an externally supplied role:
    - None or empty => default
    - strip, upper-case
    - must be a registered role
    """
    if isinstance(raw, Role):
        return raw.value
    if not raw:
        return default.value
    value = str(raw).strip().upper()
    if value not in ALL_ROLES:
        raise ValueError(f"unknown role: {raw}")
    return value


def normalize_user_status(raw: str | None) -> str:
    value = (raw or "").strip().upper()
    if value not in UserStatus.values():
        raise ValueError(f"unknown user status: {raw}")
    return value
