import logging
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from repositories.comment_repository import CommentRepository
from repositories.post_repository import PostRepository
from models.comment import Comment
from constants.comment import CommentStatus, normalize_moderation_status
from utils.exceptions import ValidationError, NotFoundError
from utils.permissions import Principal, require_principal, assert_can_modify, assert_admin

logger = logging.getLogger(__name__)

# reply levels loaded under a single comment / under each comment of an author
SINGLE_COMMENT_REPLY_DEPTH = 2
AUTHOR_COMMENT_REPLY_DEPTH = 1


def _as_id(raw, field: str, required: bool = True) -> Optional[int]:
    if raw is None or raw == "":
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be an integer id")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer id")


def _post_summary(post) -> Optional[dict]:
    if post is None:
        return None
    return {"id": post.id, "title": post.title, "views": post.views}


class CommentService:

    @staticmethod
    def _initial_status(principal: Principal, requested) -> str:
        """
        Admin-authored comments are published straight away (or with the status
        the admin asked for); everyone else starts at COMMENT_DEFAULT_STATUS.
        """
        if principal.is_admin:
            if requested:
                return normalize_moderation_status(requested)
            return CommentStatus.APPROVED.value
        default = str(current_app.config.get("COMMENT_DEFAULT_STATUS") or CommentStatus.PENDING.value).upper()
        if default not in CommentStatus.values():
            default = CommentStatus.PENDING.value
        return default

    @staticmethod
    def create(post_id, content, parent_id=None, status=None, *, principal: Principal = None) -> Comment:
        principal = require_principal(principal)
        post_id = _as_id(post_id, "postId")
        parent_id = _as_id(parent_id, "parentId", required=False)
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("content is required")
        if not PostRepository.get_by_id(post_id):
            raise NotFoundError("Post not found")

        initial_status = CommentService._initial_status(principal, status)
        # parent is not checked to belong to the same post; a dangling id fails at flush
        try:
            comment = CommentRepository.create(
                post_id=post_id,
                author_id=principal.id,
                content=content,
                parent_id=parent_id,
                status=initial_status,
            )
            CommentRepository.commit()
        except IntegrityError:
            CommentRepository.rollback()
            raise ValidationError("Failed to create comment: invalid reference")
        logger.info("comment %s created on post %s by user %s", comment.id, post_id, principal.id)
        return comment

    @staticmethod
    def get_by_id(comment_id: int) -> dict:
        comment = CommentRepository.get_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        payload = CommentRepository.build_reply_tree([comment], depth=SINGLE_COMMENT_REPLY_DEPTH)[0]
        payload["post"] = _post_summary(comment.post)
        return payload

    @staticmethod
    def get_by_author(author_id: int) -> list:
        """Every comment of the author whatever its status; replies are APPROVED only."""
        comments = CommentRepository.list_by_author(author_id)
        nodes = CommentRepository.build_reply_tree(comments, depth=AUTHOR_COMMENT_REPLY_DEPTH)
        for comment, node in zip(comments, nodes):
            node["post"] = _post_summary(comment.post)
        return nodes

    @staticmethod
    def _get_own(comment_id: int, principal: Principal) -> Comment:
        comment = CommentRepository.get_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        assert_can_modify(
            principal, comment.author_id, allow_admin=False,
            message="Unauthorized: only the author can modify this comment",
        )
        return comment

    @staticmethod
    def update(comment_id: int, content=None, status=None, *, principal: Principal = None) -> Comment:
        principal = require_principal(principal)
        comment = CommentService._get_own(comment_id, principal)
        if content is None and status is None:
            raise ValidationError("content or status is required")
        if content is not None and (not isinstance(content, str) or not content.strip()):
            raise ValidationError("content must be a non-empty string")
        new_status = normalize_moderation_status(status) if status is not None else None
        CommentRepository.update(comment, content=content, status=new_status)
        CommentRepository.commit()
        return comment

    @staticmethod
    def delete(comment_id: int, *, principal: Principal = None):
        principal = require_principal(principal)
        comment = CommentService._get_own(comment_id, principal)
        CommentRepository.delete(comment)
        CommentRepository.commit()
        logger.info("comment %s deleted by user %s", comment_id, principal.id)

    @staticmethod
    def moderate(comment_id: int, status, *, principal: Principal = None) -> tuple[Comment, bool]:
        """
        Returns (comment, changed). When the comment already has the requested
        status nothing is written, so updated_at stays as it was.
        """
        principal = assert_admin(principal)
        new_status = normalize_moderation_status(status)
        comment = CommentRepository.get_by_id(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        if comment.status == new_status:
            return comment, False
        previous = comment.status
        CommentRepository.update(comment, status=new_status)
        CommentRepository.commit()
        logger.info("comment %s moderated %s -> %s by admin %s", comment_id, previous, new_status, principal.id)
        return comment, True
