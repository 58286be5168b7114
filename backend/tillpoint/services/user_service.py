# Overview: Cache-aside CRUD for users (registration, listing, admin edits).

from __future__ import annotations

from dataclasses import dataclass

from ..models import User
from ..repository import store
from .cache_aside import cache_key, invalidate, invalidate_embedding, read_through, write_cached
from .passwords import hash_password
from .patches import changed_fields

ENTITY = "user"
FAMILY = "users"


@dataclass
class UserPatch:
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


def _load_user(user_id: int) -> dict:
    return store.get_by_id(User, user_id).to_dict()


def register(*, name: str, email: str, password: str, role: str = "cashier") -> dict:
    """
    Create a user with a bcrypt-hashed password.

    Raises:
        DomainError(CONFLICT): email already registered
    """
    user = store.create(User(
        name=name,
        email=email,
        password=hash_password(password),
        role=role,
    ))
    data = user.to_dict()
    write_cached(cache_key(ENTITY, user.id), data)
    invalidate(plural=FAMILY)
    return data


def get_user(user_id: int) -> dict:
    return read_through(cache_key(ENTITY, user_id), lambda: _load_user(user_id))


def list_users(*, skip: int, limit: int) -> list[dict]:
    def _load() -> list[dict]:
        return [u.to_dict() for u in store.list_page(User, skip, limit)]

    return read_through(cache_key(FAMILY, skip, limit), _load)


def update_user(user_id: int, patch: UserPatch) -> dict:
    """
    Update name, email, role and/or password.

    A provided password is always treated as a change (it cannot be compared
    with the stored hash) and is re-hashed before it is written.
    """
    user = store.get_by_id(User, user_id)
    changes = changed_fields(user, patch, always_changed={"password"})
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    store.update(user, changes)

    key = cache_key(ENTITY, user_id)
    data = user.to_dict()
    invalidate(key=key)
    write_cached(key, data)
    invalidate(plural=FAMILY)
    invalidate_embedding(ENTITY)
    return data


def delete_user(user_id: int) -> None:
    store.get_by_id(User, user_id)
    invalidate(key=cache_key(ENTITY, user_id), plural=FAMILY)
    invalidate_embedding(ENTITY)
    store.delete(User, user_id)
