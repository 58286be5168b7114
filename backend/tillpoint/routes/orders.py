# Overview: Flask API routes for orders; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..decorators import require_auth
from ..responses import paginated, success
from ..services import order_service
from ..services.order_service import LineRequest, OrderDraft
from ..validation import (
    FieldSpec,
    ValidationError,
    parse_id,
    parse_pagination,
    validate_payload,
)

ORDER_FIELDS = (
    FieldSpec("payment_id", kind="int", required=True, minimum=1),
    FieldSpec("customer_name", required=True, max_length=255),
    FieldSpec("total_paid", kind="decimal", required=True, minimum=0),
)

ORDER_LINE_FIELDS = (
    FieldSpec("product_id", kind="int", required=True, minimum=1),
    FieldSpec("qty", kind="int", required=True, minimum=1),
)

orders_bp = Blueprint("orders", __name__, url_prefix="/v1/orders")


def _parse_lines(raw) -> list[LineRequest]:
    if not isinstance(raw, list) or not raw:
        raise ValidationError("products must be a non-empty list")

    lines: list[LineRequest] = []
    messages: list[str] = []
    for i, item in enumerate(raw):
        try:
            data = validate_payload(payload=item, fields=ORDER_LINE_FIELDS, partial=False)
        except ValidationError as e:
            messages.extend(f"products[{i}].{m}" for m in e.messages)
            continue
        lines.append(LineRequest(product_id=data["product_id"], quantity=data["qty"]))

    if messages:
        raise ValidationError(messages)
    return lines


@orders_bp.post("")
@require_auth
def create_order_route():
    """
    Ring up an order for the authenticated cashier.

    Body: {"payment_id", "customer_name", "total_paid",
           "products": [{"product_id", "qty"}, ...]}
    """
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=ORDER_FIELDS, partial=False)
    lines = _parse_lines(payload.get("products"))

    order = order_service.create_order(OrderDraft(
        user_id=g.auth_payload.user_id,
        payment_id=data["payment_id"],
        customer_name=data["customer_name"],
        total_paid=data["total_paid"],
        lines=lines,
    ))
    return success(order)


@orders_bp.get("")
@require_auth
def list_orders_route():
    skip, limit = parse_pagination(request.args)
    orders = order_service.list_orders(skip=skip, limit=limit)
    return paginated("orders", orders, skip=skip, limit=limit)


@orders_bp.get("/<int:order_id>")
@require_auth
def get_order_route(order_id: int):
    return success(order_service.get_order(parse_id(order_id)))
