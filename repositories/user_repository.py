# repositories/user_repository.py
from __future__ import annotations
from typing import List, Optional, Tuple

from sqlalchemy import select, func, desc
from sqlalchemy.exc import IntegrityError

from models.user import User
from extensions.database import db
from constants.roles import Role, UserStatus


class UserRepository:
    """
    Account persistence.
    - No business rules here (password policy, last-admin guard live in the services).
    - Writes never commit on their own; callers commit so several writes share a transaction.
    """

    @staticmethod
    def find_by_email(email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def find_by_id(user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    @staticmethod
    def add(user: User):
        db.session.add(user)

    @staticmethod
    def list(page: int, limit: int, role: Optional[str] = None, status: Optional[str] = None,
             search: Optional[str] = None) -> Tuple[List[User], int]:
        stmt = select(User)
        count_stmt = select(func.count(User.id))
        conditions = []
        if role:
            conditions.append(User.role == role)
        if status:
            conditions.append(User.status == status)
        if search:
            term = search.strip()
            conditions.append(
                User.name.icontains(term, autoescape=True) | User.email.icontains(term, autoescape=True)
            )
        if conditions:
            stmt = stmt.where(*conditions)
            count_stmt = count_stmt.where(*conditions)
        total = db.session.execute(count_stmt).scalar() or 0
        stmt = stmt.order_by(desc(User.created_at), desc(User.id)).offset((page - 1) * limit).limit(limit)
        return db.session.execute(stmt).scalars().all(), total

    @staticmethod
    def count_admins_except_user(user_id: int, active_only: bool = True) -> int:
        stmt = select(func.count(User.id)).where(User.role == Role.ADMIN.value, User.id != user_id)
        if active_only:
            stmt = stmt.where(User.status == UserStatus.ACTIVE.value)
        return db.session.execute(stmt).scalar() or 0

    @staticmethod
    def commit():
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def rollback():
        db.session.rollback()
