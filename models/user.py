# -*- coding: utf-8 -*-
"""
user.py
--------------------------------------------------------------------
Account entity.
- role: ADMIN / USER (constants.roles.Role)
- email_verified: unverified accounts can sign in but every protected
  endpoint rejects them.
- status: BLOCKED accounts are rejected at sign-in and by auth_required,
  rows are never deleted so authored posts/comments keep their author.
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, iso
from constants.roles import Role, UserStatus


class User(TimestampMixin, db.Model):
    __tablename__ = "user"
    __table_args__ = (COMMON_TABLE_ARGS,)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(16), nullable=False, default=Role.USER.value, server_default=Role.USER.value)
    email_verified = db.Column(db.Boolean, nullable=False, default=False, server_default="0")
    status = db.Column(db.String(16), nullable=False, default=UserStatus.ACTIVE.value,
                       server_default=UserStatus.ACTIVE.value)

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "emailVerified": bool(self.email_verified),
            "status": self.status,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
