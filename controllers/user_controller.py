# controllers/user_controller.py
from flask import Blueprint, current_app, request
from controllers.auth_helpers import auth_required
from services.user_service import UserService
from utils.response import json_response
from utils.pagination import paginate_and_sort
from utils.permissions import get_principal
from utils.validators import parse_bool
from utils.exceptions import ValidationError
from constants.roles import Role

user_bp = Blueprint("users", __name__)


@user_bp.get("")
@auth_required(Role.ADMIN)
def list_users():
    """
    GET /api/users
      page, limit (default USERS_DEFAULT_PAGE_LIMIT)
      role, status, search (name / email, fuzzy)
    """
    options = paginate_and_sort(
        request.args,
        default_limit=current_app.config.get("USERS_DEFAULT_PAGE_LIMIT", 10),
    )
    items, total = UserService.list_users(
        page=options.page,
        limit=options.limit,
        role=request.args.get("role"),
        status=request.args.get("status"),
        search=request.args.get("search"),
        principal=get_principal(),
    )
    return json_response(
        data={
            "items": [u.to_dict() for u in items],
            "pagination": {
                "totalCount": total,
                "page": options.page,
                "limit": options.limit,
            },
        }
    )


@user_bp.patch("/<int:user_id>")
@auth_required(Role.ADMIN)
def update_user(user_id: int):
    data = request.get_json(silent=True) or {}
    email_verified = None
    if "emailVerified" in data:
        email_verified = parse_bool(data.get("emailVerified"), strict=False)
        if email_verified is None:
            raise ValidationError("emailVerified must be a boolean")
    user = UserService.update_user(
        user_id,
        role=data.get("role"),
        email_verified=email_verified,
        status=data.get("status"),
        principal=get_principal(),
    )
    return json_response(message="User updated", data=user.to_dict())
