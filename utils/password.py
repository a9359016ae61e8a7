# utils/password.py
import re
from werkzeug.security import generate_password_hash, check_password_hash
from flask import current_app

LETTER = re.compile(r'[A-Za-z]')
DIGIT = re.compile(r'\d')


def hash_password(plain: str) -> str:
    return generate_password_hash(plain)


def verify_password(hashed: str, plain: str) -> bool:
    return check_password_hash(hashed, plain)


def validate_password_policy(email: str, pwd: str) -> list[str]:
    cfg = current_app.config
    min_len = cfg.get("PASSWORD_MIN_LENGTH", 8)
    errs = []
    if len(pwd) < min_len:
        errs.append(f"at least {min_len} characters")
    if not LETTER.search(pwd):
        errs.append("must contain a letter")
    if not DIGIT.search(pwd):
        errs.append("must contain a digit")
    local_part = (email or "").split("@", 1)[0].lower()
    if local_part and len(local_part) >= 4 and local_part in pwd.lower():
        errs.append("must not contain the email name")
    return errs
