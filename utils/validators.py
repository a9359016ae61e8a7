import re

EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

TRUE_VALUES = ("1", "true", "t", "yes")
FALSE_VALUES = ("0", "false", "f", "no")


def validate_email(email: str) -> bool:
    return bool(email) and bool(EMAIL_RE.match(email))


def normalize_email(email) -> str | None:
    if not isinstance(email, str):
        return None
    value = email.strip().lower()
    return value or None


def parse_bool(raw, strict: bool = True):
    """
    Query-string booleans.
      strict=True: only "true"/"false" are recognised (the posts filter contract)
      strict=False: also 1/0, yes/no, t/f
    Anything else => None, meaning "not provided".
    """
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return None
    low = str(raw).strip().lower()
    if strict:
        if low == "true":
            return True
        if low == "false":
            return False
        return None
    if low in TRUE_VALUES:
        return True
    if low in FALSE_VALUES:
        return False
    return None

