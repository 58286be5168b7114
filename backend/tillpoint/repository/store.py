# Overview: Generic CRUD primitives over the SQLAlchemy session.

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, TypeVar

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import DomainError, ErrorKind
from ..extensions import db

ModelT = TypeVar("ModelT")


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """
    Translate SQLAlchemy failures raised inside the block.

    IntegrityError -> CONFLICT (unique/foreign key violations),
    any other SQLAlchemyError -> INTERNAL. The session is rolled back in both
    cases so the request can keep using it.
    """
    try:
        yield
    except IntegrityError as exc:
        db.session.rollback()
        current_app.logger.info("Store conflict during %s: %s", action, exc.orig)
        raise DomainError(ErrorKind.CONFLICT) from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Store failure during %s", action)
        raise DomainError(ErrorKind.INTERNAL) from exc


def page_offset(skip: int, limit: int) -> int:
    """`skip` is a 1-based page number; page 1 starts at row 0."""
    return max(skip - 1, 0) * limit


def create(instance: ModelT) -> ModelT:
    with store_errors(f"create {type(instance).__name__}"):
        db.session.add(instance)
        db.session.commit()
    return instance


def get_by_id(model: type[ModelT], entity_id: int) -> ModelT:
    with store_errors(f"get {model.__name__}"):
        instance = db.session.get(model, entity_id)
    if instance is None:
        raise DomainError(ErrorKind.NOT_FOUND)
    return instance


def list_page(model: type[ModelT], skip: int, limit: int) -> list[ModelT]:
    with store_errors(f"list {model.__name__}"):
        return (
            db.session.query(model)
            .order_by(model.id.asc())
            .offset(page_offset(skip, limit))
            .limit(limit)
            .all()
        )


def update(instance: ModelT, patch: dict) -> ModelT:
    """Apply `patch` (only the provided fields) and commit."""
    with store_errors(f"update {type(instance).__name__}"):
        for field, value in patch.items():
            setattr(instance, field, value)
        db.session.commit()
    return instance


def delete(model: type[ModelT], entity_id: int) -> None:
    with store_errors(f"delete {model.__name__}"):
        db.session.query(model).filter(model.id == entity_id).delete()
        db.session.commit()
