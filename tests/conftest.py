import uuid
from datetime import datetime, timedelta

import fakeredis
import pytest

from app import create_app
from constants.comment import CommentStatus
from constants.roles import Role, UserStatus
from extensions import redis_client
from extensions.database import db
from extensions.jwt import create_token
from models import Comment, Post, User
from utils.password import hash_password

DEFAULT_PASSWORD = "secret123"


@pytest.fixture()
def app():
    """Flask app on an in-memory SQLite DB, Redis replaced by fakeredis."""
    app = create_app("testing")
    redis_client.set_redis(fakeredis.FakeRedis())
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
    redis_client.set_redis(None)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    def _create(role=Role.USER.value, verified=True, status=UserStatus.ACTIVE.value, name=None,
                password=DEFAULT_PASSWORD):
        suffix = uuid.uuid4().hex[:8]
        user = User(
            name=name or f"user_{suffix}",
            email=f"user_{suffix}@example.com",
            password_hash=hash_password(password),
            role=role,
            email_verified=verified,
            status=status,
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _create


@pytest.fixture()
def admin(make_user):
    return make_user(role=Role.ADMIN.value, name="admin")


@pytest.fixture()
def author(make_user):
    return make_user(name="author")


@pytest.fixture()
def reader(make_user):
    return make_user(name="reader")


@pytest.fixture()
def auth_headers(app):
    def _headers(user):
        token = create_token(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture()
def make_post(app):
    def _create(author, title="Hello", content="Body", tags=None, status="PUBLISHED",
                is_featured=False, views=0, created_at=None):
        post = Post(
            author_id=author.id,
            title=title,
            content=content,
            status=status,
            is_featured=is_featured,
            views=views,
        )
        post.set_tags(tags or [])
        if created_at is not None:
            post.created_at = created_at
        db.session.add(post)
        db.session.commit()
        return post
    return _create


@pytest.fixture()
def make_comment(app):
    base = datetime(2024, 1, 1, 12, 0, 0)

    def _create(post, author, content="nice", parent=None, status=CommentStatus.APPROVED.value,
                minutes=0):
        created_at = base + timedelta(minutes=minutes)
        comment = Comment(
            post_id=post.id,
            author_id=author.id,
            parent_id=parent.id if parent is not None else None,
            content=content,
            status=status,
            created_at=created_at,
            updated_at=created_at,
        )
        db.session.add(comment)
        db.session.commit()
        return comment
    return _create
