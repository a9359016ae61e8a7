# -*- coding: utf-8 -*-
"""
post.py
--------------------------------------------------------------------
Blog posts and their tags.
- Post: owned by its author; mutable by the author or an admin.
- PostTag: one row per (post, tag name). Tags behave as a set, the unique
  constraint keeps duplicates out and lets "has every tag" filters use one
  EXISTS per tag.
- views is only ever bumped with an in-database increment.
"""

from extensions.database import db
from .mixins import TimestampMixin, COMMON_TABLE_ARGS, iso
from constants.post import DEFAULT_POST_STATUS


class Post(TimestampMixin, db.Model):
    __tablename__ = "post"
    __table_args__ = (
        db.Index("ix_post_status_featured", "status", "is_featured"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    thumbnail = db.Column(db.String(512))
    is_featured = db.Column(db.Boolean, nullable=False, default=False, server_default="0", index=True)
    status = db.Column(db.String(16), nullable=False, default=DEFAULT_POST_STATUS,
                       server_default=DEFAULT_POST_STATUS)
    views = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    author_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)

    author = db.relationship("User", backref=db.backref("posts", passive_deletes=True))
    tags = db.relationship(
        "PostTag",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostTag.id",
        lazy="selectin",
    )
    comments = db.relationship(
        "Comment",
        back_populates="post",
        cascade="all",
    )

    @property
    def tag_names(self) -> list[str]:
        return [t.name for t in self.tags]

    def set_tags(self, names):
        wanted = []
        for name in names or []:
            if name not in wanted:
                wanted.append(name)
        existing = {t.name: t for t in self.tags}
        self.tags = [existing.get(name) or PostTag(name=name) for name in wanted]

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "thumbnail": self.thumbnail,
            "tags": self.tag_names,
            "isFeatured": bool(self.is_featured),
            "status": self.status,
            "views": self.views,
            "authorId": self.author_id,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


class PostTag(db.Model):
    __tablename__ = "post_tag"
    __table_args__ = (
        db.UniqueConstraint("post_id", "name", name="uq_post_tag_post_name"),
        db.Index("ix_post_tag_name", "name"),
        COMMON_TABLE_ARGS,
    )

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(db.Integer, db.ForeignKey("post.id", ondelete="CASCADE"), nullable=False)
    name = db.Column(db.String(64), nullable=False)

    post = db.relationship("Post", back_populates="tags")
