# Overview: Cache-aside CRUD for products, hydrated with their category.

"""
Product Service

Every product returned by this module carries its category as a nested
dict. The category is read through the category cache, so a product read can
be served entirely from Redis once both entries are warm.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..models import Category, Product
from ..repository import store
from ..repository.products import list_products as list_products_page
from .cache_aside import cache_key, invalidate, invalidate_embedding, read_through, write_cached
from .category_service import get_category
from .patches import changed_fields

ENTITY = "product"
FAMILY = "products"


@dataclass
class ProductPatch:
    category_id: int | None = None
    name: str | None = None
    image: str | None = None
    price: Decimal | None = None
    stock: int | None = None


def hydrate_product(product: Product) -> dict:
    """Product dict with its category attached."""
    return product.to_dict(category=get_category(product.category_id))


def _load_product(product_id: int) -> dict:
    return hydrate_product(store.get_by_id(Product, product_id))


def create_product(
    *,
    category_id: int,
    name: str,
    image: str,
    price: Decimal,
    stock: int,
) -> dict:
    """
    Create a product in an existing category.

    Raises:
        DomainError(NOT_FOUND): category does not exist
        DomainError(CONFLICT): generated SKU collided
    """
    category = store.get_by_id(Category, category_id)

    product = store.create(Product(
        category_id=category.id,
        name=name,
        image=image,
        price=price,
        stock=stock,
    ))

    data = product.to_dict(category=category.to_dict())
    write_cached(cache_key(ENTITY, product.id), data)
    invalidate(plural=FAMILY)
    return data


def get_product(product_id: int) -> dict:
    return read_through(cache_key(ENTITY, product_id), lambda: _load_product(product_id))


def list_products(*, skip: int, limit: int, category_id: int = 0, search: str = "") -> list[dict]:
    """
    Paginated product listing.

    Args:
        skip: 1-based page number
        limit: page size
        category_id: only products of this category (0 = all)
        search: case-insensitive substring of the product name
    """
    def _load() -> list[dict]:
        products = list_products_page(search=search, category_id=category_id, skip=skip, limit=limit)
        return [hydrate_product(p) for p in products]

    key = cache_key(FAMILY, skip, limit, category_id, search)
    return read_through(key, _load)


def update_product(product_id: int, patch: ProductPatch) -> dict:
    product = store.get_by_id(Product, product_id)
    changes = changed_fields(product, patch)

    category = store.get_by_id(Category, changes.get("category_id", product.category_id))

    store.update(product, changes)

    key = cache_key(ENTITY, product_id)
    data = product.to_dict(category=category.to_dict())
    invalidate(key=key)
    write_cached(key, data)
    invalidate(plural=FAMILY)
    invalidate_embedding(ENTITY)
    return data


def delete_product(product_id: int) -> None:
    store.get_by_id(Product, product_id)
    invalidate(key=cache_key(ENTITY, product_id), plural=FAMILY)
    invalidate_embedding(ENTITY)
    store.delete(Product, product_id)
