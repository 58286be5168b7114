# Overview: Order workflow; validates stock and payment, persists, hydrates, caches.

"""
Order Service

An order is written once and never edited. Creating one:

1. loads every requested product (NOT_FOUND if missing),
2. rejects the first line whose quantity exceeds the product's stock
   (INSUFFICIENT_STOCK),
3. prices each line at the current product price and sums the total,
4. rejects orders paid below the total (INSUFFICIENT_PAYMENT),
5. inserts the order and its lines in a single commit,
6. hydrates user, payment and each line's product + category with fresh
   reads, then caches the aggregate under "order:<id>" and drops the
   "orders:*" list family.

Stock is validated but not decremented. Two concurrent orders can both pass
the stock check for the same product.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from flask import current_app

from ..errors import DomainError, ErrorKind
from ..models import Category, Order, OrderLine, Payment, Product, User
from ..repository import store
from ..repository.orders import create_order as insert_order
from ..repository.orders import list_orders as list_orders_page
from .cache_aside import cache_key, invalidate, read_through, write_cached

ENTITY = "order"
FAMILY = "orders"


@dataclass(frozen=True)
class LineRequest:
    product_id: int
    quantity: int


@dataclass
class OrderDraft:
    user_id: int
    payment_id: int
    customer_name: str
    total_paid: Decimal
    lines: list[LineRequest]


def _price_lines(requested: list[LineRequest]) -> tuple[list[OrderLine], Decimal]:
    lines: list[OrderLine] = []
    total_price = Decimal("0")

    for item in requested:
        product = store.get_by_id(Product, item.product_id)

        if item.quantity > product.stock:
            current_app.logger.info(
                "Rejecting order line product_id=%s quantity=%s stock=%s",
                product.id, item.quantity, product.stock,
            )
            raise DomainError(ErrorKind.INSUFFICIENT_STOCK)

        line_total = Decimal(product.price) * item.quantity
        lines.append(OrderLine(product_id=product.id, quantity=item.quantity, line_total=line_total))
        total_price += line_total

    return lines, total_price


def _hydrate_line(line: OrderLine) -> dict:
    product = store.get_by_id(Product, line.product_id)
    category = store.get_by_id(Category, product.category_id)
    return line.to_dict(product=product.to_dict(category=category.to_dict()))


def hydrate_order(order: Order) -> dict:
    """Aggregate snapshot: order + user + payment + lines with product and category."""
    user = store.get_by_id(User, order.user_id)
    payment = store.get_by_id(Payment, order.payment_id)
    return order.to_dict(
        user=user.to_dict(),
        payment=payment.to_dict(),
        lines=[_hydrate_line(line) for line in order.lines],
    )


def create_order(draft: OrderDraft) -> dict:
    """
    Validate, price and persist an order, returning the hydrated aggregate.

    Raises:
        DomainError(NOT_FOUND): a product, the payment method or the user is missing
        DomainError(INSUFFICIENT_STOCK): a line asks for more than the product's stock
        DomainError(INSUFFICIENT_PAYMENT): total_paid is below the computed total
        DomainError(INTERNAL): store or cache failure
    """
    lines, total_price = _price_lines(draft.lines)

    total_paid = Decimal(draft.total_paid)
    if total_paid < total_price:
        raise DomainError(ErrorKind.INSUFFICIENT_PAYMENT)

    # Referenced rows must exist before the insert so no orphan order is written
    store.get_by_id(Payment, draft.payment_id)
    store.get_by_id(User, draft.user_id)

    order = insert_order(
        Order(
            user_id=draft.user_id,
            payment_id=draft.payment_id,
            customer_name=draft.customer_name,
            total_price=total_price,
            total_paid=total_paid,
            total_return=total_paid - total_price,
        ),
        lines,
    )
    current_app.logger.info(
        "Created order id=%s receipt=%s total_price=%s", order.id, order.receipt_code, total_price
    )

    data = hydrate_order(order)

    invalidate(plural=FAMILY)
    write_cached(cache_key(ENTITY, order.id), data)
    return data


def get_order(order_id: int) -> dict:
    def _load() -> dict:
        return hydrate_order(store.get_by_id(Order, order_id))

    return read_through(cache_key(ENTITY, order_id), _load)


def list_orders(*, skip: int, limit: int) -> list[dict]:
    """Paginated orders (skip is a 1-based page number), each fully hydrated."""
    def _load() -> list[dict]:
        return [hydrate_order(order) for order in list_orders_page(skip=skip, limit=limit)]

    return read_through(cache_key(FAMILY, skip, limit), _load)
