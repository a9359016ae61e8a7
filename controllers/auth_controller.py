# controllers/auth_controller.py
from flask import Blueprint, current_app, request, g
from controllers.auth_helpers import auth_required, extract_bearer
from services.user_service import UserService
from extensions.jwt import create_token, revoke_token
from utils.permissions import get_principal
from utils.response import json_response


auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/sign-up/email")
def sign_up():
    data = request.get_json(silent=True) or {}
    user = UserService.sign_up(
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password") or "",
    )
    payload = {"user": user.to_dict()}
    if not user.email_verified:
        # no mail delivery here: the token is handed back to the caller
        payload["verificationToken"] = UserService.issue_verification_token(user)
    return json_response(message="Account created", data=payload, code=201)


@auth_bp.post("/verify-email")
def verify_email():
    data = request.get_json(silent=True) or {}
    token = (data.get("token") or request.args.get("token") or "").strip()
    user = UserService.verify_email(token)
    return json_response(message="Email verified", data=user.to_dict())


@auth_bp.post("/sign-in/email")
def sign_in():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip()
    password = data.get("password") or ""
    if not email or not password:
        return json_response(code=400, message="email and password are required", error="validation")
    user = UserService.authenticate(email, password)
    if not user:
        current_app.logger.info("failed sign-in for %s", email)
        return json_response(code=401, message="Invalid email or password", error="unauthenticated")
    token = create_token(user.id, user.email, user.role)
    return json_response(data={"token": token, "user": user.to_dict()})


@auth_bp.post("/sign-out")
def sign_out():
    token = extract_bearer(request.headers.get("Authorization"))
    if token:
        revoke_token(token)
    return json_response(message="Signed out")


@auth_bp.get("/get-session")
@auth_required(require_verified=False)
def get_session():
    return json_response(data={"user": get_principal().to_dict(), "status": g.current_user.status})
