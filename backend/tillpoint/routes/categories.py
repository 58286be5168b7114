# Overview: Flask API routes for categories; parses input and returns JSON responses.

from flask import Blueprint, request

from ..decorators import require_auth, require_admin
from ..responses import paginated, success
from ..services import category_service
from ..services.category_service import CategoryPatch
from ..validation import FieldSpec, parse_id, parse_pagination, validate_payload

CATEGORY_FIELDS = (
    FieldSpec("name", required=True, max_length=120),
)

categories_bp = Blueprint("categories", __name__, url_prefix="/v1/categories")


@categories_bp.post("")
@require_auth
@require_admin
def create_category_route():
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=CATEGORY_FIELDS, partial=False)
    return success(category_service.create_category(**data))


@categories_bp.get("")
@require_auth
def list_categories_route():
    skip, limit = parse_pagination(request.args)
    categories = category_service.list_categories(skip=skip, limit=limit)
    return paginated("categories", categories, skip=skip, limit=limit)


@categories_bp.get("/<int:category_id>")
@require_auth
def get_category_route(category_id: int):
    return success(category_service.get_category(parse_id(category_id)))


@categories_bp.put("/<int:category_id>")
@require_auth
@require_admin
def update_category_route(category_id: int):
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=CATEGORY_FIELDS, partial=True)
    category = category_service.update_category(parse_id(category_id), CategoryPatch(**data))
    return success(category)


@categories_bp.delete("/<int:category_id>")
@require_auth
@require_admin
def delete_category_route(category_id: int):
    category_service.delete_category(parse_id(category_id))
    return success()
