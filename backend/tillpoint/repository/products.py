from __future__ import annotations

from ..extensions import db
from ..models import Product
from .store import page_offset, store_errors


def list_products(*, search: str, category_id: int, skip: int, limit: int) -> list[Product]:
    """
    Page through products ordered by id.

    category_id=0 means no category filter; search matches the name
    case-insensitively anywhere in the string.
    """
    with store_errors("list Product"):
        query = db.session.query(Product)
        if category_id:
            query = query.filter(Product.category_id == category_id)
        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))
        return (
            query.order_by(Product.id.asc())
            .offset(page_offset(skip, limit))
            .limit(limit)
            .all()
        )
