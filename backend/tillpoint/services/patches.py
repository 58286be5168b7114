# Overview: Partial-update helpers shared by the entity services.

from __future__ import annotations

from dataclasses import fields
from typing import Any

from ..errors import DomainError, ErrorKind


def provided_fields(patch: Any) -> dict:
    """Fields of a patch dataclass that were provided (not None)."""
    return {
        f.name: getattr(patch, f.name)
        for f in fields(patch)
        if getattr(patch, f.name) is not None
    }


def changed_fields(existing: Any, patch: Any, *, always_changed: set[str] | None = None) -> dict:
    """
    Return the provided fields of `patch`.

    Raises NO_UPDATED_DATA when nothing was provided, or when every provided
    field already equals the stored value. Fields in `always_changed` (e.g.
    a password, which cannot be compared against its hash) count as changes.
    """
    provided = provided_fields(patch)
    if not provided:
        raise DomainError(ErrorKind.NO_UPDATED_DATA)

    always_changed = always_changed or set()
    if not any(
        name in always_changed or getattr(existing, name) != value
        for name, value in provided.items()
    ):
        raise DomainError(ErrorKind.NO_UPDATED_DATA)

    return provided
