# Overview: Cache-aside CRUD for payment methods.

from __future__ import annotations

from dataclasses import dataclass

from ..models import Payment
from ..repository import store
from .cache_aside import cache_key, invalidate, invalidate_embedding, read_through, write_cached
from .patches import changed_fields

ENTITY = "payment"
FAMILY = "payments"


@dataclass
class PaymentPatch:
    name: str | None = None
    type: str | None = None
    logo: str | None = None


def _load_payment(payment_id: int) -> dict:
    return store.get_by_id(Payment, payment_id).to_dict()


def create_payment(*, name: str, type: str, logo: str | None = None) -> dict:
    payment = store.create(Payment(name=name, type=type, logo=logo))
    data = payment.to_dict()
    write_cached(cache_key(ENTITY, payment.id), data)
    invalidate(plural=FAMILY)
    return data


def get_payment(payment_id: int) -> dict:
    return read_through(cache_key(ENTITY, payment_id), lambda: _load_payment(payment_id))


def list_payments(*, skip: int, limit: int) -> list[dict]:
    def _load() -> list[dict]:
        return [p.to_dict() for p in store.list_page(Payment, skip, limit)]

    return read_through(cache_key(FAMILY, skip, limit), _load)


def update_payment(payment_id: int, patch: PaymentPatch) -> dict:
    payment = store.get_by_id(Payment, payment_id)
    changes = changed_fields(payment, patch)

    store.update(payment, changes)

    key = cache_key(ENTITY, payment_id)
    data = payment.to_dict()
    invalidate(key=key)
    write_cached(key, data)
    invalidate(plural=FAMILY)
    invalidate_embedding(ENTITY)
    return data


def delete_payment(payment_id: int) -> None:
    store.get_by_id(Payment, payment_id)
    invalidate(key=cache_key(ENTITY, payment_id), plural=FAMILY)
    invalidate_embedding(ENTITY)
    store.delete(Payment, payment_id)
