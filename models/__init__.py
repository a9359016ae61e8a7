# -*- coding: utf-8 -*-
"""
__init__.py
--------------------------------------------------------------------
Import every model here so that:
- Flask-Migrate/Alembic sees all tables.
- Callers can write: from models import Post, Comment
"""

from .mixins import TimestampMixin
from .user import User
from .post import Post, PostTag
from .comment import Comment

__all__ = ["TimestampMixin", "User", "Post", "PostTag", "Comment"]
