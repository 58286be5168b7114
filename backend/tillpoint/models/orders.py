from __future__ import annotations

import uuid

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


def _new_receipt_code() -> str:
    return str(uuid.uuid4())


class Order(db.Model):
    """
    Completed sale at the till.

    Totals are computed by the order workflow before insert:
    total_price = sum(line_total), total_return = total_paid - total_price.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.CheckConstraint("total_return >= 0", name="ck_orders_total_return_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    payment_id = db.Column(db.Integer, db.ForeignKey("payments.id"), nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=False)

    total_price = db.Column(db.Numeric(14, 2), nullable=False)
    total_paid = db.Column(db.Numeric(14, 2), nullable=False)
    total_return = db.Column(db.Numeric(14, 2), nullable=False)

    receipt_code = db.Column(db.String(36), nullable=False, unique=True, default=_new_receipt_code)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    lines = db.relationship(
        "OrderLine",
        back_populates="order",
        order_by="OrderLine.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} receipt={self.receipt_code}>"

    def to_dict(
        self,
        *,
        user: dict | None = None,
        payment: dict | None = None,
        lines: list[dict] | None = None,
    ) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "payment_type_id": self.payment_id,
            "customer_name": self.customer_name,
            "total_price": float(self.total_price),
            "total_paid": float(self.total_paid),
            "total_return": float(self.total_return),
            "receipt_id": self.receipt_code,
            "products": lines if lines is not None else [],
            "payment_type": payment,
            "user": user,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class OrderLine(db.Model):
    """One product on an order; line_total snapshots price x quantity at sale time."""
    __tablename__ = "order_lines"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_order_lines_quantity_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    line_total = db.Column(db.Numeric(14, 2), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    order = db.relationship("Order", back_populates="lines")

    def __repr__(self) -> str:
        return f"<OrderLine id={self.id} order_id={self.order_id} product_id={self.product_id}>"

    def to_dict(self, product: dict | None = None) -> dict:
        line_total = float(self.line_total)
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "qty": self.quantity,
            # Current product price; the line totals keep the price at sale time
            "price": product["price"] if product else None,
            "total_normal_price": line_total,
            "total_final_price": line_total,
            "product": product,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
