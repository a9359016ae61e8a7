# services/user_service.py
import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.user import User
from repositories.user_repository import UserRepository
from utils.password import hash_password, verify_password, validate_password_policy
from utils.validators import validate_email, normalize_email
from utils.exceptions import BizError, ValidationError, ConflictError, NotFoundError, ForbiddenError
from utils.permissions import Principal, assert_admin
from extensions.database import db
from extensions.jwt import create_token, decode_token, TokenError, VERIFY_EMAIL_PURPOSE
from constants.roles import Role, UserStatus, normalize_role, normalize_user_status

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def sign_up(name: str, email: str, password: str) -> User:
        email = normalize_email(email)
        name = (name or "").strip()
        if not name or not email or not password:
            raise ValidationError("name, email and password are required")
        if not validate_email(email):
            raise ValidationError("Invalid email address")
        problems = validate_password_policy(email, password)
        if problems:
            raise ValidationError("Weak password: " + "; ".join(problems), data={"errors": problems})
        if UserRepository.find_by_email(email):
            raise ConflictError("Email already registered")

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=Role.USER.value,
            email_verified=bool(current_app.config.get("AUTH_AUTO_VERIFY_EMAIL")),
            status=UserStatus.ACTIVE.value,
        )
        UserRepository.add(user)
        try:
            UserRepository.commit()
        except IntegrityError:
            UserRepository.rollback()
            raise ConflictError("Email already registered")
        except SQLAlchemyError:
            UserRepository.rollback()
            raise BizError("Database error", code=500)
        logger.info("user signed up: id=%s", user.id)
        return user

    @staticmethod
    def issue_verification_token(user: User) -> str:
        return create_token(
            user.id, user.email, user.role,
            purpose=VERIFY_EMAIL_PURPOSE,
            expires_seconds=current_app.config.get("EMAIL_VERIFY_EXPIRES_SECONDS", 24 * 3600),
        )

    @staticmethod
    def verify_email(token: str) -> User:
        if not token:
            raise ValidationError("token is required")
        try:
            payload = decode_token(token, check_revoked=False, purpose=VERIFY_EMAIL_PURPOSE)
        except TokenError as e:
            raise ValidationError(f"Invalid verification token: {e}")
        user = UserRepository.find_by_id(payload.get("sub"))
        if not user or user.email != payload.get("email"):
            raise NotFoundError("User not found")
        if not user.email_verified:
            user.email_verified = True
            UserRepository.commit()
            logger.info("email verified: user id=%s", user.id)
        return user

    @staticmethod
    def authenticate(email: str, password: str):
        email = normalize_email(email)
        if not email or not password:
            return None
        user = UserRepository.find_by_email(email)
        if not user or not user.is_active:
            return None
        if not verify_password(user.password_hash, password):
            return None
        return user

    @staticmethod
    def list_users(page: int, limit: int, role=None, status=None, search=None, *, principal: Principal = None):
        assert_admin(principal)
        if role:
            try:
                role = normalize_role(role)
            except ValueError:
                raise ValidationError("Invalid role")
        if status:
            try:
                status = normalize_user_status(status)
            except ValueError:
                raise ValidationError("Invalid status")
        return UserRepository.list(page=page, limit=limit, role=role, status=status, search=search)

    @staticmethod
    def update_user(target_user_id: int, role=None, email_verified=None, status=None, *,
                    principal: Principal = None) -> User:
        """
        Admin-only account changes (role / emailVerified / status).
          - cannot change your own role
          - cannot demote or block the last active admin
          - no-op when nothing actually changes
        """
        principal = assert_admin(principal)
        target = UserRepository.find_by_id(target_user_id)
        if not target:
            raise NotFoundError("User not found")

        new_role = None
        if role is not None:
            try:
                new_role = normalize_role(role)
            except ValueError:
                raise ValidationError("Invalid role")
        new_status = None
        if status is not None:
            try:
                new_status = normalize_user_status(status)
            except ValueError:
                raise ValidationError("Invalid status")

        if new_role is not None and new_role != target.role and target.id == principal.id:
            raise ForbiddenError("You cannot change your own role")

        losing_admin = target.role == Role.ADMIN.value and (
            (new_role is not None and new_role != Role.ADMIN.value)
            or (new_status == UserStatus.BLOCKED.value)
        )
        if losing_admin and UserRepository.count_admins_except_user(target.id) == 0:
            raise ValidationError("Cannot remove the last admin")

        if new_role is not None:
            target.role = new_role
        if new_status is not None:
            target.status = new_status
        if email_verified is not None:
            target.email_verified = bool(email_verified)

        if not db.session.is_modified(target):
            return target
        try:
            UserRepository.commit()
        except SQLAlchemyError:
            UserRepository.rollback()
            raise BizError("Database error", code=500)
        logger.info("user %s updated by admin %s", target.id, principal.id)
        return target

    @staticmethod
    def ensure_default_admin(app):
        email = normalize_email(app.config["ADMIN_INIT_EMAIL"])
        if not UserRepository.find_by_email(email):
            user = User(
                name=app.config["ADMIN_INIT_NAME"],
                email=email,
                password_hash=hash_password(app.config["ADMIN_INIT_PASSWORD"]),
                role=Role.ADMIN.value,
                email_verified=True,
                status=UserStatus.ACTIVE.value,
            )
            db.session.add(user)
            db.session.commit()
            app.logger.info("Default admin created: %s", email)
            return user
        return None
