# -*- coding: utf-8 -*-
"""
comment.py
--------------------------------------------------------------------
Threaded comments on posts.
- parent_id NULL => top-level comment, otherwise a reply.
- The parent is not checked to belong to the same post.
- Reply trees are never loaded through ``replies`` recursively; the
  repository fetches a fixed number of levels filtered by status.
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, iso
from constants.comment import CommentStatus


class Comment(TimestampMixin, db.Model):
    __tablename__ = "comment"
    __table_args__ = (
        db.Index("ix_comment_post_parent_status", "post_id", "parent_id", "status"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(db.Integer, db.ForeignKey("post.id", ondelete="CASCADE"), nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = db.Column(db.Integer, db.ForeignKey("comment.id", ondelete="CASCADE"), index=True)
    content = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(16), nullable=False, default=CommentStatus.PENDING.value,
                       server_default=CommentStatus.PENDING.value)

    post = db.relationship("Post", back_populates="comments")
    author = db.relationship("User", backref=db.backref("comments", passive_deletes=True))
    parent = db.relationship("Comment", remote_side=[id], back_populates="replies")
    replies = db.relationship(
        "Comment",
        back_populates="parent",
        cascade="all",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "postId": self.post_id,
            "authorId": self.author_id,
            "parentId": self.parent_id,
            "content": self.content,
            "status": self.status,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
