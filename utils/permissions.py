from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import g

from constants.roles import Role
from utils.exceptions import AuthenticationError, ForbiddenError


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as attached to the request by ``auth_required``."""

    id: int
    email: str
    role: str
    email_verified: bool
    name: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            email_verified=bool(user.email_verified),
            name=user.name,
        )

    def has_role(self, *roles: Role | str) -> bool:
        wanted = {r.value if isinstance(r, Role) else str(r).upper() for r in roles if r}
        return (self.role or "").upper() in wanted

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    def can_modify(self, owner_id: int | None, allow_admin: bool = True) -> bool:
        if owner_id is not None and owner_id == self.id:
            return True
        return allow_admin and self.is_admin

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "emailVerified": self.email_verified,
        }


def get_principal(default=None) -> Principal | None:
    return getattr(g, "principal", default)


def require_principal(principal: Principal | None = None) -> Principal:
    principal = principal or get_principal()
    if principal is None:
        raise AuthenticationError()
    return principal


def assert_can_modify(
    principal: Principal | None,
    owner_id: int | None,
    *,
    allow_admin: bool = True,
    message: str = "Unauthorized: you do not own this resource",
) -> Principal:
    """Owner (or admin, when ``allow_admin``) check shared by posts and comments."""
    principal = require_principal(principal)
    if not principal.can_modify(owner_id, allow_admin=allow_admin):
        raise ForbiddenError(message)
    return principal


def assert_admin(principal: Principal | None = None):
    principal = require_principal(principal)
    if not principal.is_admin:
        raise ForbiddenError("Forbidden: Insufficient permissions")
    return principal
