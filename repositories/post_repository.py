from typing import Optional, List, Tuple, Dict
from sqlalchemy import select, func, update, asc, desc
from sqlalchemy.exc import IntegrityError
from extensions.database import db
from models.post import Post
from models.comment import Comment
from models.user import User
from constants.post import POST_SORT_FIELDS, PostStatus
from constants.comment import CommentStatus
from constants.roles import Role
from repositories.post_filters import PostFilter, build_post_conditions

# page size used when the caller passes no limit at all
FALLBACK_LIST_LIMIT = 10


class PostRepository:
    @staticmethod
    def create(author_id: int, title: str, content: str, tags: Optional[List[str]] = None,
               status: Optional[str] = None, is_featured: bool = False,
               thumbnail: Optional[str] = None) -> Post:
        post = Post(
            author_id=author_id,
            title=title,
            content=content,
            thumbnail=thumbnail or None,
            is_featured=bool(is_featured),
        )
        if status:
            post.status = status
        post.set_tags(tags or [])
        db.session.add(post)
        db.session.flush()
        return post

    @staticmethod
    def get_by_id(post_id: int, refresh: bool = False) -> Optional[Post]:
        stmt = select(Post).where(Post.id == post_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        return db.session.execute(stmt).scalar_one_or_none()

    @staticmethod
    def increment_views(post_id: int) -> bool:
        """views = views + 1 inside the current transaction; False when the post is missing."""
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values(views=Post.views + 1)
            .execution_options(synchronize_session=False)
        )
        result = db.session.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    def list(
        criteria: PostFilter,
        skip: Optional[int] = None,
        limit: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "desc",
    ) -> Tuple[List[Post], int]:
        conditions = build_post_conditions(criteria)
        stmt = select(Post)
        count_stmt = select(func.count(Post.id))
        if conditions:
            stmt = stmt.where(*conditions)
            count_stmt = count_stmt.where(*conditions)

        column = getattr(Post, POST_SORT_FIELDS.get(sort_by or "", "created_at"))
        direction = asc if sort_order == "asc" else desc
        stmt = stmt.order_by(direction(column), direction(Post.id))

        stmt = stmt.offset(skip or 0).limit(limit or FALLBACK_LIST_LIMIT)
        items = db.session.execute(stmt).scalars().all()
        # separate statement: not snapshot-consistent with the page above
        total = db.session.execute(count_stmt).scalar() or 0
        return items, total

    @staticmethod
    def list_by_author(author_id: int) -> List[Post]:
        stmt = (
            select(Post)
            .where(Post.author_id == author_id)
            .order_by(desc(Post.created_at), desc(Post.id))
        )
        return db.session.execute(stmt).scalars().all()

    @staticmethod
    def update(post: Post, title: Optional[str] = None, content: Optional[str] = None,
               tags: Optional[List[str]] = None, status: Optional[str] = None,
               is_featured: Optional[bool] = None, thumbnail: Optional[str] = None) -> Post:
        if title is not None:
            post.title = title
        if content is not None:
            post.content = content
        if tags is not None:
            post.set_tags(tags)
        if status is not None:
            post.status = status
        if is_featured is not None:
            post.is_featured = bool(is_featured)
        if thumbnail is not None:
            post.thumbnail = thumbnail or None
        db.session.flush()
        return post

    @staticmethod
    def delete(post: Post):
        db.session.delete(post)
        db.session.flush()

    @staticmethod
    def stats() -> Dict[str, int]:
        """All dashboard counters in one statement, i.e. one consistent snapshot."""

        def _count(column, *conditions):
            stmt = select(func.count(column))
            if conditions:
                stmt = stmt.where(*conditions)
            return stmt.scalar_subquery()

        stmt = select(
            _count(Post.id).label("totalPosts"),
            _count(Post.id, Post.views > 0).label("viewedPosts"),
            _count(Post.id, Post.is_featured.is_(True)).label("featuredPosts"),
            _count(Post.id, Post.status == PostStatus.ARCHIVED.value).label("archivedPosts"),
            _count(Comment.id).label("totalComments"),
            _count(Comment.id, Comment.status == CommentStatus.APPROVED.value).label("approvedComments"),
            _count(Comment.id, Comment.status == CommentStatus.REJECTED.value).label("rejectedComments"),
            _count(User.id).label("totalUsers"),
            _count(User.id, User.role == Role.ADMIN.value).label("totalAdmins"),
        )
        row = db.session.execute(stmt).mappings().one()
        return {key: int(value or 0) for key, value in row.items()}

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
