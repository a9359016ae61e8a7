# utils/exceptions.py
from enum import Enum
from typing import Any, Optional
from werkzeug.exceptions import HTTPException


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"


ERROR_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
    ErrorKind.UNAVAILABLE: 503,
}


def kind_for_status(code: int) -> ErrorKind:
    for kind, status in ERROR_KIND_STATUS.items():
        if status == code:
            return kind
    return ErrorKind.INTERNAL if code >= 500 else ErrorKind.VALIDATION


class BizError(HTTPException):
    code: int  # HTTP status
    message: str
    data: Optional[Any]
    kind: ErrorKind

    def __init__(self, message: str = "Request failed", code: int = 400, data: Any = None,
                 kind: Optional[ErrorKind] = None):
        self.kind = kind or kind_for_status(code)
        self.code = code
        self.message = message
        self.data = data
        super().__init__(description=message)


class _KindedError(BizError):
    default_kind: ErrorKind = ErrorKind.VALIDATION
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, data: Any = None):
        super().__init__(
            message=message or self.default_message,
            code=ERROR_KIND_STATUS[self.default_kind],
            data=data,
            kind=self.default_kind,
        )


class ValidationError(_KindedError):
    default_kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class AuthenticationError(_KindedError):
    default_kind = ErrorKind.UNAUTHENTICATED
    default_message = "Unauthorized"


class ForbiddenError(_KindedError):
    default_kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(_KindedError):
    default_kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class ConflictError(_KindedError):
    default_kind = ErrorKind.CONFLICT
    default_message = "Conflict"
