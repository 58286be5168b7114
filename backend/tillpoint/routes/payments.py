# Overview: Flask API routes for payment methods; parses input and returns JSON responses.

from flask import Blueprint, request

from ..decorators import require_auth, require_admin
from ..models import PAYMENT_TYPES
from ..responses import paginated, success
from ..services import payment_service
from ..services.payment_service import PaymentPatch
from ..validation import FieldSpec, parse_id, parse_pagination, validate_payload

PAYMENT_FIELDS = (
    FieldSpec("name", required=True, max_length=120),
    FieldSpec("type", required=True, choices=PAYMENT_TYPES),
    FieldSpec("logo", max_length=512),
)

payments_bp = Blueprint("payments", __name__, url_prefix="/v1/payments")


@payments_bp.post("")
@require_auth
@require_admin
def create_payment_route():
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=PAYMENT_FIELDS, partial=False)
    return success(payment_service.create_payment(**data))


@payments_bp.get("")
@require_auth
def list_payments_route():
    skip, limit = parse_pagination(request.args)
    payments = payment_service.list_payments(skip=skip, limit=limit)
    return paginated("payments", payments, skip=skip, limit=limit)


@payments_bp.get("/<int:payment_id>")
@require_auth
def get_payment_route(payment_id: int):
    return success(payment_service.get_payment(parse_id(payment_id)))


@payments_bp.put("/<int:payment_id>")
@require_auth
@require_admin
def update_payment_route(payment_id: int):
    payload = request.get_json(silent=True)
    data = validate_payload(payload=payload, fields=PAYMENT_FIELDS, partial=True)
    payment = payment_service.update_payment(parse_id(payment_id), PaymentPatch(**data))
    return success(payment)


@payments_bp.delete("/<int:payment_id>")
@require_auth
@require_admin
def delete_payment_route(payment_id: int):
    payment_service.delete_payment(parse_id(payment_id))
    return success()
