# -*- coding: utf-8 -*-
"""constants/post.py
--------------------------------------------------------------------
Post status values and the wire-name -> column mapping for sorting.
"""

from enum import Enum

from utils.exceptions import ValidationError


class PostStatus(Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]


DEFAULT_POST_STATUS = PostStatus.PUBLISHED.value

# sortBy (camelCase, as sent by clients) -> Post attribute name
POST_SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "views": "views",
    "status": "status",
    "isFeatured": "is_featured",
}


def normalize_post_status(raw) -> str:
    value = str(raw).strip().upper() if raw is not None else ""
    if value not in PostStatus.values():
        raise ValidationError(f"status must be one of {PostStatus.values()}")
    return value
