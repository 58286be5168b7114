# Overview: Cache-aside CRUD for categories.

from __future__ import annotations

from dataclasses import dataclass

from ..models import Category
from ..repository import store
from .cache_aside import cache_key, invalidate, invalidate_embedding, read_through, write_cached
from .patches import changed_fields

ENTITY = "category"
FAMILY = "categories"


@dataclass
class CategoryPatch:
    name: str | None = None


def _load_category(category_id: int) -> dict:
    return store.get_by_id(Category, category_id).to_dict()


def create_category(*, name: str) -> dict:
    category = store.create(Category(name=name))
    data = category.to_dict()
    write_cached(cache_key(ENTITY, category.id), data)
    invalidate(plural=FAMILY)
    return data


def get_category(category_id: int) -> dict:
    return read_through(cache_key(ENTITY, category_id), lambda: _load_category(category_id))


def list_categories(*, skip: int, limit: int) -> list[dict]:
    def _load() -> list[dict]:
        return [c.to_dict() for c in store.list_page(Category, skip, limit)]

    return read_through(cache_key(FAMILY, skip, limit), _load)


def update_category(category_id: int, patch: CategoryPatch) -> dict:
    category = store.get_by_id(Category, category_id)
    changes = changed_fields(category, patch)

    store.update(category, changes)

    key = cache_key(ENTITY, category_id)
    data = category.to_dict()
    invalidate(key=key)
    write_cached(key, data)
    invalidate(plural=FAMILY)
    invalidate_embedding(ENTITY)
    return data


def delete_category(category_id: int) -> None:
    store.get_by_id(Category, category_id)

    # Evict first: a failed delete leaves only a cold cache, never a stale one
    invalidate(key=cache_key(ENTITY, category_id), plural=FAMILY)
    invalidate_embedding(ENTITY)
    store.delete(Category, category_id)
