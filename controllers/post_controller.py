from flask import Blueprint, current_app, request
from utils.response import json_response
from services.post_service import PostService
from controllers.auth_helpers import auth_required
from constants.roles import Role
from constants.post import POST_SORT_FIELDS, normalize_post_status
from repositories.post_filters import PostFilter, parse_tags
from utils.pagination import paginate_and_sort
from utils.permissions import get_principal
from utils.validators import parse_bool
from utils.exceptions import ValidationError


post_bp = Blueprint("posts", __name__, url_prefix="/posts")


def _filter_from_args(args) -> PostFilter:
    search = args.get("search")
    status = args.get("status")
    raw_author = (args.get("authorId") or "").strip()
    author_id = None
    if raw_author:
        try:
            author_id = int(raw_author)
        except ValueError:
            raise ValidationError("authorId is invalid")
    return PostFilter(
        search=search.strip() if search else None,
        tags=parse_tags(args.get("tags")),
        is_featured=parse_bool(args.get("isFeatured")),
        status=normalize_post_status(status) if status else None,
        author_id=author_id,
    )


@post_bp.get("")
def list_posts():
    criteria = _filter_from_args(request.args)
    options = paginate_and_sort(
        request.args,
        default_limit=current_app.config.get("POSTS_DEFAULT_PAGE_LIMIT", 2),
        sortable=set(POST_SORT_FIELDS),
    )
    return json_response(data=PostService.list(criteria, options))


@post_bp.get("/my-posts")
@auth_required(Role.USER, Role.ADMIN)
def my_posts():
    return json_response(data=PostService.my_posts(principal=get_principal()))


@post_bp.get("/stats")
@auth_required(Role.ADMIN)
def post_stats():
    return json_response(data=PostService.stats(principal=get_principal()))


@post_bp.get("/<int:post_id>")
def get_post(post_id: int):
    post = PostService.get_by_id(post_id)
    if post is None:
        return json_response(code=404, message="Post not found", error="not_found")
    return json_response(data=post)


@post_bp.post("")
@auth_required(Role.USER, Role.ADMIN)
def create_post():
    data = request.get_json(silent=True) or {}
    post = PostService.create(data, principal=get_principal())
    return json_response(message="Post created", data=post.to_dict(), code=201)


@post_bp.patch("/update/<int:post_id>")
@auth_required(Role.USER, Role.ADMIN)
def update_post(post_id: int):
    data = request.get_json(silent=True) or {}
    post = PostService.update(post_id, data, principal=get_principal())
    return json_response(message="Post updated", data=post.to_dict())


@post_bp.delete("/delete/<int:post_id>")
@auth_required(Role.USER, Role.ADMIN)
def delete_post(post_id: int):
    PostService.delete(post_id, principal=get_principal())
    return json_response(message="Post deleted successfully")
