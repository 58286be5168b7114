from __future__ import annotations

from ..extensions import db
from ..models import Order, OrderLine
from .store import page_offset, store_errors


def create_order(order: Order, lines: list[OrderLine]) -> Order:
    """Insert the order and all of its lines in one transaction."""
    with store_errors("create Order"):
        order.lines = lines
        db.session.add(order)
        db.session.commit()
    return order


def list_orders(*, skip: int, limit: int) -> list[Order]:
    with store_errors("list Order"):
        return (
            db.session.query(Order)
            .order_by(Order.id.asc())
            .offset(page_offset(skip, limit))
            .limit(limit)
            .all()
        )
