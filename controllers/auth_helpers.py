# controllers/auth_helpers.py
from __future__ import annotations

from functools import wraps

from flask import g, request

from constants.roles import Role
from extensions.jwt import decode_token, TokenError
from repositories.user_repository import UserRepository
from utils.permissions import Principal
from utils.response import json_response


def extract_bearer(auth_header: str | None) -> str | None:
    if not auth_header:
        return None
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        return token or None
    return None


def _resolve_user_from_token(token: str):
    """
    Decode the token and load its user.
    Raises ValueError((code, message)) so the caller decides the response.
    """
    try:
        payload = decode_token(token)
    except TokenError:
        raise ValueError(("TOKEN_INVALID", "Unauthorized: invalid or expired token"))

    user_id = payload.get("sub")
    if user_id is None:
        raise ValueError(("TOKEN_PAYLOAD_INVALID", "Unauthorized: invalid token payload"))
    user = UserRepository.find_by_id(user_id)
    if not user:
        raise ValueError(("USER_NOT_FOUND", "Unauthorized: user not found"))
    return user


def _normalize_role_value(value: Role | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, Role):
        return value.value
    value = value.strip().upper()
    return value or None


def auth_required(*roles: Role | str, require_verified: bool = True):
    """
    Session check for protected routes:
      - Authorization: Bearer <token>, signature/expiry/revocation  -> 401
      - unverified email (unless require_verified=False)            -> 403
      - blocked account                                              -> 403
      - role not in ``roles`` (when given)                           -> 403
    On success g.current_user and g.principal are set.
    """
    allowed = {_normalize_role_value(r) for r in roles if r}

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user = None
            g.principal = None
            token = extract_bearer(request.headers.get("Authorization"))
            if not token:
                return json_response(code=401, message="Unauthorized", error="unauthenticated")
            try:
                user = _resolve_user_from_token(token)
            except ValueError as ve:
                _code, msg = ve.args[0] if isinstance(ve.args[0], tuple) else ("TOKEN_ERROR", "Unauthorized")
                return json_response(code=401, message=msg, error="unauthenticated")

            if require_verified and not user.email_verified:
                return json_response(code=403, message="Email not verified", error="forbidden")
            if not user.is_active:
                return json_response(code=403, message="Account is blocked", error="forbidden")

            principal = Principal.from_user(user)
            if allowed and not principal.has_role(*allowed):
                return json_response(code=403, message="Forbidden: Insufficient permissions", error="forbidden")

            g.current_user = user
            g.principal = principal
            return fn(*args, **kwargs)

        return wrapper

    return decorator
