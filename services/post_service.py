import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from repositories.post_repository import PostRepository
from repositories.comment_repository import CommentRepository
from repositories.post_filters import PostFilter
from repositories.user_repository import UserRepository
from models.post import Post
from constants.post import normalize_post_status
from utils.exceptions import ValidationError, NotFoundError, ConflictError
from utils.pagination import PageOptions, total_pages
from utils.permissions import Principal, require_principal, assert_can_modify, assert_admin

logger = logging.getLogger(__name__)

# reply levels under the top-level comments of a post (3 levels in total)
POST_REPLY_DEPTH = 2


def _clean_tags(raw):
    if not isinstance(raw, list) or not all(isinstance(t, str) for t in raw):
        raise ValidationError("tags must be a list of strings")
    tags = []
    for tag in raw:
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _clean_post_payload(data: dict, *, partial: bool) -> dict:
    """Shape checks only: required fields, enum values, types."""
    cleaned = {}
    for field in ("title", "content"):
        if field in data:
            value = data.get(field)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{field} must be a non-empty string")
            cleaned[field] = value
        elif not partial:
            raise ValidationError(f"{field} is required")
    if data.get("status") is not None:
        cleaned["status"] = normalize_post_status(data["status"])
    if "tags" in data and data["tags"] is not None:
        cleaned["tags"] = _clean_tags(data["tags"])
    if "isFeatured" in data and data["isFeatured"] is not None:
        if not isinstance(data["isFeatured"], bool):
            raise ValidationError("isFeatured must be a boolean")
        cleaned["is_featured"] = data["isFeatured"]
    if "thumbnail" in data:
        thumb = data.get("thumbnail")
        if thumb is not None and not isinstance(thumb, str):
            raise ValidationError("thumbnail must be a string")
        cleaned["thumbnail"] = thumb or ""
    return cleaned


class PostService:

    @staticmethod
    def list(criteria: PostFilter, options: PageOptions) -> dict:
        items, total = PostRepository.list(
            criteria,
            skip=options.skip,
            limit=options.limit,
            sort_by=options.sort_by,
            sort_order=options.sort_order,
        )
        logger.debug("list posts skip=%s limit=%s total=%s", options.skip, options.limit, total)
        return {
            "items": [p.to_dict() for p in items],
            "pagination": {
                "totalCount": total,
                "page": options.page,
                "limit": options.limit,
                "totalPages": total_pages(total, options.limit),
            },
        }

    @staticmethod
    def get_by_id(post_id: int) -> Optional[dict]:
        """
        One transaction: views + 1, then read the post with three levels of
        APPROVED comments. Returns None (and rolls back) when the post does not exist.
        """
        try:
            if not PostRepository.increment_views(post_id):
                PostRepository.rollback()
                return None
            post = PostRepository.get_by_id(post_id, refresh=True)
            top_level = CommentRepository.list_top_level_approved(post_id)
            payload = post.to_dict()
            payload["comments"] = CommentRepository.build_reply_tree(top_level, depth=POST_REPLY_DEPTH)
            payload["commentCount"] = CommentRepository.count_by_post(post_id)
            PostRepository.commit()
        except SQLAlchemyError:
            PostRepository.rollback()
            raise
        return payload

    @staticmethod
    def create(data: dict, *, principal: Principal = None) -> Post:
        principal = require_principal(principal)
        cleaned = _clean_post_payload(data or {}, partial=False)
        if not principal.is_admin:
            cleaned.pop("is_featured", None)
        try:
            post = PostRepository.create(author_id=principal.id, **cleaned)
            PostRepository.commit()
        except IntegrityError:
            PostRepository.rollback()
            raise ConflictError("Failed to create post: constraint violation")
        logger.info("post %s created by user %s", post.id, principal.id)
        return post

    @staticmethod
    def _get_for_write(post_id: int, principal: Principal) -> Post:
        post = PostRepository.get_by_id(post_id)
        if not post:
            raise NotFoundError("Post not found")
        assert_can_modify(
            principal, post.author_id, allow_admin=True,
            message="Unauthorized: only the author or an admin can modify this post",
        )
        return post

    @staticmethod
    def update(post_id: int, data: dict, *, principal: Principal = None) -> Post:
        principal = require_principal(principal)
        post = PostService._get_for_write(post_id, principal)
        cleaned = _clean_post_payload(data or {}, partial=True)
        if not principal.is_admin and cleaned.pop("is_featured", None) is not None:
            logger.info("ignored isFeatured change on post %s by non-admin %s", post_id, principal.id)
        try:
            PostRepository.update(post, **cleaned)
            PostRepository.commit()
        except IntegrityError:
            PostRepository.rollback()
            raise ConflictError("Failed to update post: constraint violation")
        return post

    @staticmethod
    def delete(post_id: int, *, principal: Principal = None):
        principal = require_principal(principal)
        post = PostService._get_for_write(post_id, principal)
        PostRepository.delete(post)
        PostRepository.commit()
        logger.info("post %s deleted by user %s", post_id, principal.id)

    @staticmethod
    def my_posts(*, principal: Principal = None) -> dict:
        principal = require_principal(principal)
        user = UserRepository.find_by_id(principal.id)
        if not user:
            raise NotFoundError("User not found")
        posts = PostRepository.list_by_author(user.id)
        counts = CommentRepository.count_by_posts(p.id for p in posts)
        items = []
        for post in posts:
            payload = post.to_dict()
            payload["commentCount"] = counts.get(post.id, 0)
            items.append(payload)
        return {
            "user": {"id": user.id, "name": user.name, "email": user.email, "role": user.role},
            "posts": items,
            "totalPosts": len(items),
        }

    @staticmethod
    def stats(*, principal: Principal = None) -> dict:
        assert_admin(principal)
        return PostRepository.stats()
