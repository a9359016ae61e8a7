from typing import Dict, Iterable, List, Optional
from sqlalchemy import select, func, asc, desc
from sqlalchemy.exc import IntegrityError
from extensions.database import db
from models.comment import Comment
from constants.comment import CommentStatus

APPROVED = CommentStatus.APPROVED.value


class CommentRepository:
    """
    Comment persistence plus the level-by-level reply loader.
    Writes only flush; services decide when to commit.
    """

    @staticmethod
    def create(post_id: int, author_id: int, content: str, parent_id: Optional[int] = None,
               status: Optional[str] = None) -> Comment:
        comment = Comment(
            post_id=post_id,
            author_id=author_id,
            content=content,
            parent_id=parent_id,
            status=status or CommentStatus.PENDING.value,
        )
        db.session.add(comment)
        db.session.flush()
        return comment

    @staticmethod
    def get_by_id(comment_id: int) -> Optional[Comment]:
        return db.session.get(Comment, comment_id)

    @staticmethod
    def list_top_level_approved(post_id: int) -> List[Comment]:
        stmt = (
            select(Comment)
            .where(
                Comment.post_id == post_id,
                Comment.parent_id.is_(None),
                Comment.status == APPROVED,
            )
            .order_by(desc(Comment.created_at), desc(Comment.id))
        )
        return db.session.execute(stmt).scalars().all()

    @staticmethod
    def list_approved_replies(parent_ids: Iterable[int]) -> List[Comment]:
        ids = {pid for pid in parent_ids if pid is not None}
        if not ids:
            return []
        stmt = (
            select(Comment)
            .where(Comment.parent_id.in_(ids), Comment.status == APPROVED)
            .order_by(asc(Comment.created_at), asc(Comment.id))
        )
        return db.session.execute(stmt).scalars().all()

    @staticmethod
    def list_by_author(author_id: int) -> List[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.author_id == author_id)
            .order_by(desc(Comment.created_at), desc(Comment.id))
        )
        return db.session.execute(stmt).scalars().all()

    @staticmethod
    def count_by_post(post_id: int) -> int:
        stmt = select(func.count(Comment.id)).where(Comment.post_id == post_id)
        return db.session.execute(stmt).scalar() or 0

    @staticmethod
    def count_by_posts(post_ids: Iterable[int]) -> Dict[int, int]:
        ids = list({pid for pid in post_ids if pid is not None})
        if not ids:
            return {}
        stmt = (
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_(ids))
            .group_by(Comment.post_id)
        )
        return {post_id: count for post_id, count in db.session.execute(stmt).all()}

    @staticmethod
    def build_reply_tree(comments: List[Comment], depth: int) -> List[dict]:
        """
        Serialise ``comments`` and attach up to ``depth`` levels of APPROVED replies
        (oldest first). One query per level regardless of fan-out.
        """
        nodes = [c.to_dict() for c in comments]
        level = nodes
        for _ in range(depth):
            if not level:
                break
            by_parent: Dict[int, List[dict]] = {}
            next_level: List[dict] = []
            for reply in CommentRepository.list_approved_replies(n["id"] for n in level):
                node = reply.to_dict()
                by_parent.setdefault(reply.parent_id, []).append(node)
                next_level.append(node)
            for node in level:
                node["replies"] = by_parent.get(node["id"], [])
            level = next_level
        return nodes

    @staticmethod
    def update(comment: Comment, content: Optional[str] = None, status: Optional[str] = None) -> Comment:
        if content is not None:
            comment.content = content
        if status is not None:
            comment.status = status
        db.session.flush()
        return comment

    @staticmethod
    def delete(comment: Comment):
        db.session.delete(comment)
        db.session.flush()

    @staticmethod
    def commit():
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def rollback():
        db.session.rollback()
