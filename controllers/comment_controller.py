from flask import Blueprint, request
from utils.response import json_response
from services.comment_service import CommentService
from controllers.auth_helpers import auth_required
from constants.roles import Role
from utils.permissions import get_principal


comment_bp = Blueprint("comments", __name__, url_prefix="/comments")


@comment_bp.post("")
@auth_required(Role.USER, Role.ADMIN)
def create_comment():
    data = request.get_json(silent=True) or {}
    comment = CommentService.create(
        post_id=data.get("postId"),
        content=data.get("content"),
        parent_id=data.get("parentId"),
        status=data.get("status"),
        principal=get_principal(),
    )
    return json_response(message="Comment created", data=comment.to_dict(), code=201)


@comment_bp.get("/<int:comment_id>")
def get_comment(comment_id: int):
    return json_response(data=CommentService.get_by_id(comment_id))


@comment_bp.get("/author/<int:author_id>")
def get_comments_by_author(author_id: int):
    return json_response(data=CommentService.get_by_author(author_id))


@comment_bp.patch("/<int:comment_id>")
@auth_required(Role.USER, Role.ADMIN)
def update_comment(comment_id: int):
    data = request.get_json(silent=True) or {}
    comment = CommentService.update(
        comment_id,
        content=data.get("content"),
        status=data.get("status"),
        principal=get_principal(),
    )
    return json_response(message="Comment updated", data=comment.to_dict())


@comment_bp.delete("/<int:comment_id>")
@auth_required(Role.USER, Role.ADMIN)
def delete_comment(comment_id: int):
    CommentService.delete(comment_id, principal=get_principal())
    return json_response(message="Comment deleted successfully")


@comment_bp.patch("/moderate/<int:comment_id>")
@auth_required(Role.ADMIN)
def moderate_comment(comment_id: int):
    data = request.get_json(silent=True) or {}
    comment, changed = CommentService.moderate(comment_id, data.get("status"), principal=get_principal())
    payload = comment.to_dict()
    payload["changed"] = changed
    if not changed:
        return json_response(message=f"Comment status is already {comment.status}", data=payload)
    return json_response(message=f"Comment status updated to {comment.status}", data=payload)
