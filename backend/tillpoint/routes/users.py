# Overview: Flask API routes for users and login; parses input and returns JSON responses.

"""
User routes.

Registration and login are public. Reading users requires a token;
editing and deleting them requires an admin token.
"""
from flask import Blueprint, request

from ..decorators import require_auth, require_admin
from ..models import USER_ROLES
from ..responses import paginated, success
from ..services import auth_service, user_service
from ..services.user_service import UserPatch
from ..validation import FieldSpec, parse_id, parse_pagination, validate_payload

REGISTER_FIELDS = (
    FieldSpec("name", required=True, max_length=120),
    FieldSpec("email", kind="email", required=True, max_length=255),
    FieldSpec("password", required=True, min_length=8, max_length=72),
)

LOGIN_FIELDS = (
    FieldSpec("email", kind="email", required=True, max_length=255),
    FieldSpec("password", required=True, min_length=8, max_length=72),
)

UPDATE_FIELDS = (
    FieldSpec("name", max_length=120),
    FieldSpec("email", kind="email", max_length=255),
    FieldSpec("password", min_length=8, max_length=72),
    FieldSpec("role", choices=USER_ROLES),
)

users_bp = Blueprint("users", __name__, url_prefix="/v1/users")


@users_bp.post("")
def register_route():
    """Register a new cashier account."""
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=REGISTER_FIELDS, partial=False)
    user = user_service.register(**data)
    return success(user)


@users_bp.post("/login")
def login_route():
    """Exchange email + password for an access token."""
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=LOGIN_FIELDS, partial=False)
    token = auth_service.login(data["email"], data["password"])
    return success({"token": token})


@users_bp.get("")
@require_auth
def list_users_route():
    skip, limit = parse_pagination(request.args)
    users = user_service.list_users(skip=skip, limit=limit)
    return paginated("users", users, skip=skip, limit=limit)


@users_bp.get("/<int:user_id>")
@require_auth
def get_user_route(user_id: int):
    return success(user_service.get_user(parse_id(user_id)))


@users_bp.put("/<int:user_id>")
@require_auth
@require_admin
def update_user_route(user_id: int):
    """Update name, email, password and/or role. Omitted fields are kept."""
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=UPDATE_FIELDS, partial=True)
    user = user_service.update_user(parse_id(user_id), UserPatch(**data))
    return success(user)


@users_bp.delete("/<int:user_id>")
@require_auth
@require_admin
def delete_user_route(user_id: int):
    user_service.delete_user(parse_id(user_id))
    return success()
