# -*- coding: utf-8 -*-
"""constants/comment.py
--------------------------------------------------------------------
Comment moderation states.

PENDING is only ever an initial state; moderation and self-updates move a
comment to APPROVED or REJECTED and nothing moves it back.
"""

from enum import Enum

from utils.exceptions import ValidationError


class CommentStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]


MODERATION_TARGETS = (CommentStatus.APPROVED.value, CommentStatus.REJECTED.value)


def normalize_moderation_status(raw) -> str:
    """Case-insensitive; only APPROVED / REJECTED are accepted."""

    value = str(raw).strip().upper() if raw is not None else ""
    if value not in MODERATION_TARGETS:
        raise ValidationError("status must be APPROVED or REJECTED")
    return value
