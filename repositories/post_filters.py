"""Translate list-posts criteria into SQLAlchemy WHERE clauses."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from models.post import Post, PostTag


@dataclass
class PostFilter:
    search: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    is_featured: Optional[bool] = None
    status: Optional[str] = None
    author_id: Optional[int] = None


def parse_tags(raw) -> List[str]:
    """``"go, rust,,"`` -> ``["go", "rust"]``; anything unusable -> ``[]``."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        parts = raw
    elif isinstance(raw, str):
        parts = raw.split(",")
    else:
        return []
    tags = []
    for part in parts:
        if not isinstance(part, str):
            continue
        name = part.strip()
        if name and name not in tags:
            tags.append(name)
    return tags


def build_post_conditions(criteria: PostFilter) -> list:
    """
    Returns a list of clauses to be AND-ed together; an empty list matches every post.
      - search: title/content contain it (case-insensitive) OR it is one of the tags
      - tags: every listed tag must be present
      - is_featured / status / author_id: equality, only when given
    """
    conditions = []

    search = (criteria.search or "").strip()
    if search:
        conditions.append(
            Post.title.icontains(search, autoescape=True)
            | Post.content.icontains(search, autoescape=True)
            | Post.tags.any(PostTag.name == search)
        )

    for tag in criteria.tags:
        conditions.append(Post.tags.any(PostTag.name == tag))

    if criteria.is_featured is not None:
        conditions.append(Post.is_featured == criteria.is_featured)

    if criteria.status:
        conditions.append(Post.status == criteria.status)

    if criteria.author_id is not None:
        conditions.append(Post.author_id == criteria.author_id)

    return conditions
