# extensions/jwt.py
import time, json, base64, hmac, hashlib, uuid
from flask import current_app
from redis.exceptions import RedisError
from extensions.redis_client import get_redis

SESSION_PURPOSE = "session"
VERIFY_EMAIL_PURPOSE = "verify-email"
_REVOKED_PREFIX = "jwt:blk:"


def _b64(data: bytes):
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64json(obj):
    return _b64(json.dumps(obj, separators=(",", ":")).encode())


class TokenError(ValueError):
    pass


def create_token(user_id: int, email: str, role: str, purpose: str = SESSION_PURPOSE,
                 expires_seconds: int | None = None):
    secret = current_app.config["JWT_SECRET_KEY"].encode()
    if expires_seconds is None:
        expires_seconds = current_app.config.get("JWT_EXPIRES_SECONDS", 8 * 3600)
    now = int(time.time())
    header = {"alg": "HS256", "typ": "JWT"}
    payload = {
        "sub": user_id,
        "email": email,
        "role": role,
        "pur": purpose,
        "exp": now + expires_seconds,
        "iat": now,
        "jti": uuid.uuid4().hex
    }
    h_b = _b64json(header)
    p_b = _b64json(payload)
    signing = h_b + b"." + p_b
    sig = _b64(hmac.new(secret, signing, hashlib.sha256).digest())
    return (signing + b"." + sig).decode()


def _decode_segment(seg: str):
    pad = "=" * (-len(seg) % 4)
    return json.loads(base64.urlsafe_b64decode(seg + pad).decode())


def decode_token(token: str, check_revoked: bool = True, purpose: str | None = SESSION_PURPOSE):
    secret = current_app.config["JWT_SECRET_KEY"].encode()
    try:
        h_b, p_b, sig_b = token.split(".")
        signing = f"{h_b}.{p_b}".encode()
        expected = _b64(hmac.new(secret, signing, hashlib.sha256).digest()).decode()
        if not hmac.compare_digest(expected, sig_b):
            raise TokenError("Signature mismatch")

        payload = _decode_segment(p_b)
        exp = payload.get("exp")
        if exp and time.time() > exp:
            raise TokenError("Token expired")

        if purpose is not None and payload.get("pur") != purpose:
            raise TokenError("Token not valid for this use")

        if check_revoked:
            jti = payload.get("jti")
            if jti and is_token_revoked(jti):
                raise TokenError("Token revoked")
        return payload
    except (TokenError, RedisError):
        raise
    except Exception:
        raise TokenError("Malformed token")


def revoke_token(token: str):
    """
    Put the token's jti on the Redis denylist until it would expire anyway.
    Idempotent: undecodable or expired tokens are ignored.
    """
    try:
        payload = decode_token(token, check_revoked=False)
    except TokenError:
        return
    jti = payload.get("jti")
    exp = payload.get("exp")
    if not jti or not exp:
        return
    now = int(time.time())
    ttl = max(exp - now, 1)
    r = get_redis()
    r.setex(f"{_REVOKED_PREFIX}{jti}", ttl, "1")


def is_token_revoked(jti: str) -> bool:
    r = get_redis()
    return bool(r.get(f"{_REVOKED_PREFIX}{jti}"))
