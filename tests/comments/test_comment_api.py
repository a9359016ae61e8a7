# -*- coding: utf-8 -*-
from datetime import datetime

import pytest
from sqlalchemy import text

from constants.comment import CommentStatus
from extensions.database import db
from models import Comment


def test_create_comment_defaults_to_pending_for_users(client, auth_headers, make_post, author, reader):
    post = make_post(author)

    resp = client.post("/comments", json={"postId": post.id, "content": "hi", "status": "APPROVED"},
                       headers=auth_headers(reader))

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["authorId"] == reader.id
    assert data["postId"] == post.id
    assert data["parentId"] is None
    assert data["status"] == "PENDING"


def test_admin_comment_is_approved_immediately(client, auth_headers, make_post, author, admin):
    post = make_post(author)

    resp = client.post("/comments", json={"postId": post.id, "content": "welcome"}, headers=auth_headers(admin))

    assert resp.get_json()["data"]["status"] == "APPROVED"


def test_create_comment_validation(client, auth_headers, make_post, author):
    post = make_post(author)
    headers = auth_headers(author)

    assert client.post("/comments", json={"content": "x"}, headers=headers).status_code == 400
    assert client.post("/comments", json={"postId": post.id, "content": "  "}, headers=headers).status_code == 400
    assert client.post("/comments", json={"postId": 9999, "content": "x"}, headers=headers).status_code == 404
    assert client.post("/comments", json={"postId": post.id, "content": "x"}).status_code == 401


def test_reply_parent_is_not_checked_against_post(client, auth_headers, make_post, make_comment, author):
    first = make_post(author)
    second = make_post(author)
    parent = make_comment(first, author)

    resp = client.post("/comments", json={"postId": second.id, "content": "cross", "parentId": parent.id},
                       headers=auth_headers(author))

    assert resp.status_code == 201
    assert resp.get_json()["data"]["parentId"] == parent.id


@pytest.fixture()
def enforce_foreign_keys(app):
    db.session.execute(text("PRAGMA foreign_keys=ON"))
    db.session.commit()
    yield
    db.session.execute(text("PRAGMA foreign_keys=OFF"))
    db.session.commit()


def test_reply_to_missing_parent_is_a_validation_error(client, auth_headers, make_post, author, enforce_foreign_keys):
    post = make_post(author)

    resp = client.post("/comments", json={"postId": post.id, "content": "x", "parentId": 99999},
                       headers=auth_headers(author))

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation"
    assert db.session.query(Comment).count() == 0


def test_get_comment_with_two_levels_of_approved_replies(client, make_post, make_comment, author, reader):
    post = make_post(author, title="Post title", views=4)
    root = make_comment(post, author, "root")
    child = make_comment(post, reader, "child", parent=root, minutes=1)
    make_comment(post, reader, "hidden", parent=root, status=CommentStatus.PENDING.value, minutes=2)
    grandchild = make_comment(post, author, "grandchild", parent=child, minutes=3)
    make_comment(post, author, "great-grandchild", parent=grandchild, minutes=4)

    resp = client.get(f"/comments/{root.id}")

    data = resp.get_json()["data"]
    assert resp.status_code == 200
    assert data["post"] == {"id": post.id, "title": "Post title", "views": 4}
    assert [r["content"] for r in data["replies"]] == ["child"]
    assert [r["content"] for r in data["replies"][0]["replies"]] == ["grandchild"]
    assert "replies" not in data["replies"][0]["replies"][0]


def test_get_missing_comment(client):
    assert client.get("/comments/12345").status_code == 404


def test_author_listing_shows_own_hidden_comments(client, make_post, make_comment, author, reader):
    post = make_post(author)
    top = make_comment(post, author, "approved top", minutes=0)
    make_comment(post, reader, "pending reply", parent=top, status=CommentStatus.PENDING.value, minutes=1)
    make_comment(post, reader, "rejected reply", parent=top, status=CommentStatus.REJECTED.value, minutes=2)
    make_comment(post, reader, "approved reply", parent=top, minutes=3)

    by_author = client.get(f"/comments/author/{author.id}").get_json()["data"]
    by_reader = client.get(f"/comments/author/{reader.id}").get_json()["data"]

    assert [r["content"] for r in by_author[0]["replies"]] == ["approved reply"]
    assert [c["content"] for c in by_reader] == ["approved reply", "rejected reply", "pending reply"]
    assert all(c["post"]["id"] == post.id for c in by_reader)
    assert all(c["replies"] == [] for c in by_reader)


def test_hidden_comments_never_in_public_tree(client, make_post, make_comment, author, reader):
    post = make_post(author)
    make_comment(post, reader, "pending", status=CommentStatus.PENDING.value)
    make_comment(post, reader, "rejected", status=CommentStatus.REJECTED.value)

    data = client.get(f"/posts/{post.id}").get_json()["data"]

    assert data["comments"] == []
    assert data["commentCount"] == 2


def test_update_comment_by_author(client, auth_headers, make_post, make_comment, author, reader):
    post = make_post(author)
    comment = make_comment(post, reader, "typo", status=CommentStatus.PENDING.value)

    resp = client.patch(f"/comments/{comment.id}", json={"content": "fixed", "status": "rejected"},
                        headers=auth_headers(reader))

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["content"] == "fixed"
    assert data["status"] == "REJECTED"


def test_update_comment_validation(client, auth_headers, make_post, make_comment, author):
    comment = make_comment(make_post(author), author)
    headers = auth_headers(author)

    assert client.patch(f"/comments/{comment.id}", json={}, headers=headers).status_code == 400
    assert client.patch(f"/comments/{comment.id}", json={"status": "PENDING"}, headers=headers).status_code == 400
    assert client.patch("/comments/9999", json={"content": "x"}, headers=headers).status_code == 404


def test_foreign_update_and_delete_are_forbidden(client, auth_headers, make_post, make_comment, author, reader, admin):
    comment = make_comment(make_post(author), author, "mine")

    for user in (reader, admin):
        upd = client.patch(f"/comments/{comment.id}", json={"content": "nope"}, headers=auth_headers(user))
        dele = client.delete(f"/comments/{comment.id}", headers=auth_headers(user))
        assert upd.status_code == 403
        assert dele.status_code == 403

    assert db.session.get(Comment, comment.id).content == "mine"


def test_foreign_update_is_forbidden_before_payload_checks(client, auth_headers, make_post, make_comment, author, reader):
    comment = make_comment(make_post(author), author)
    headers = auth_headers(reader)

    bad_status = client.patch(f"/comments/{comment.id}", json={"status": "PENDING"}, headers=headers)
    empty = client.patch(f"/comments/{comment.id}", json={}, headers=headers)

    assert bad_status.status_code == 403
    assert empty.status_code == 403


def test_delete_comment_removes_replies(client, auth_headers, make_post, make_comment, author, reader):
    post = make_post(author)
    parent = make_comment(post, author)
    reply = make_comment(post, reader, parent=parent, minutes=1)
    parent_id, reply_id = parent.id, reply.id

    resp = client.delete(f"/comments/{parent_id}", headers=auth_headers(author))

    assert resp.status_code == 200
    assert db.session.get(Comment, parent_id) is None
    assert db.session.get(Comment, reply_id) is None


def test_moderate_transitions_status(client, auth_headers, make_post, make_comment, author, admin):
    comment = make_comment(make_post(author), author, status=CommentStatus.PENDING.value)

    resp = client.patch(f"/comments/moderate/{comment.id}", json={"status": "approved"}, headers=auth_headers(admin))

    assert resp.status_code == 200
    assert resp.get_json()["data"]["changed"] is True
    assert resp.get_json()["data"]["status"] == "APPROVED"
    assert db.session.get(Comment, comment.id).updated_at > datetime(2024, 1, 1, 12, 0, 0)


def test_moderate_to_current_status_writes_nothing(client, auth_headers, make_post, make_comment, author, admin):
    comment = make_comment(make_post(author), author, "as written", status=CommentStatus.APPROVED.value)
    before = db.session.get(Comment, comment.id).updated_at

    resp = client.patch(f"/comments/moderate/{comment.id}", json={"status": "APPROVED"}, headers=auth_headers(admin))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["data"]["changed"] is False
    assert "already" in body["message"]
    assert body["data"]["updatedAt"] == "2024-01-01T12:00:00"
    stored = db.session.get(Comment, comment.id)
    assert stored.updated_at == before == datetime(2024, 1, 1, 12, 0, 0)
    assert stored.content == "as written"


def test_moderate_is_admin_only_and_validates(client, auth_headers, make_post, make_comment, author, admin):
    comment = make_comment(make_post(author), author)

    assert client.patch(f"/comments/moderate/{comment.id}", json={"status": "REJECTED"},
                        headers=auth_headers(author)).status_code == 403
    assert client.patch(f"/comments/moderate/{comment.id}", json={"status": "PENDING"},
                        headers=auth_headers(admin)).status_code == 400
    assert client.patch("/comments/moderate/9999", json={"status": "REJECTED"},
                        headers=auth_headers(admin)).status_code == 404
