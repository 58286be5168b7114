# Overview: Flask API routes for products; parses input and returns JSON responses.

"""
Product routes.

Reads require a token; writes require an admin token. The listing accepts
optional `category_id` and `q` (name search) filters on top of skip/limit.
"""
from flask import Blueprint, request

from ..decorators import require_auth, require_admin
from ..responses import paginated, success
from ..services import product_service
from ..services.product_service import ProductPatch
from ..validation import (
    FieldSpec,
    parse_filter_id,
    parse_id,
    parse_pagination,
    validate_payload,
)

PRODUCT_FIELDS = (
    FieldSpec("category_id", kind="int", required=True, minimum=1),
    FieldSpec("name", required=True, max_length=255),
    FieldSpec("image", required=True, max_length=512),
    FieldSpec("price", kind="decimal", required=True, minimum=0),
    FieldSpec("stock", kind="int", required=True, minimum=0),
)

products_bp = Blueprint("products", __name__, url_prefix="/v1/products")


@products_bp.post("")
@require_auth
@require_admin
def create_product_route():
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=PRODUCT_FIELDS, partial=False)
    return success(product_service.create_product(**data))


@products_bp.get("")
@require_auth
def list_products_route():
    """
    Query params:
    - skip: int (required) - 1-based page number
    - limit: int (required) - page size, 5..100
    - category_id: int (optional) - only products in this category
    - q: str (optional) - case-insensitive name search
    """
    skip, limit = parse_pagination(request.args)

    category_id = parse_filter_id(request.args, "category_id")
    search = (request.args.get("q") or "").strip()

    products = product_service.list_products(
        skip=skip, limit=limit, category_id=category_id, search=search
    )
    return paginated("products", products, skip=skip, limit=limit)


@products_bp.get("/<int:product_id>")
@require_auth
def get_product_route(product_id: int):
    return success(product_service.get_product(parse_id(product_id)))


@products_bp.put("/<int:product_id>")
@require_auth
@require_admin
def update_product_route(product_id: int):
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=PRODUCT_FIELDS, partial=True)
    product = product_service.update_product(parse_id(product_id), ProductPatch(**data))
    return success(product)


@products_bp.delete("/<int:product_id>")
@require_auth
@require_admin
def delete_product_route(product_id: int):
    product_service.delete_product(parse_id(product_id))
    return success()
