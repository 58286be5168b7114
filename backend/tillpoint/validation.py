from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

# Maximum money amount: 999,999,999,999.99 fits Numeric(14, 2)
MAX_AMOUNT = Decimal("999999999999.99")

MIN_PAGE_LIMIT = 5
MAX_PAGE_LIMIT = 100

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(ValueError):
    """400-level input problem; carries one message per offending field."""

    def __init__(self, messages: str | list[str]):
        if isinstance(messages, str):
            messages = [messages]
        super().__init__("; ".join(messages))
        self.messages = list(messages)


@dataclass(frozen=True)
class FieldSpec:
    """
    Binding rule for one JSON field:
    - kind: "str", "int", "decimal", "email"
    - required: must be present on create (partial payloads skip this)
    - minimum / max_length / choices: value constraints
    """
    name: str
    kind: str = "str"
    required: bool = False
    minimum: int | Decimal | None = None
    min_length: int | None = None
    max_length: int | None = None
    choices: tuple[str, ...] | None = None


def _coerce_int(name: str, value: Any) -> int:
    # Integers - strict validation to reject floats and scientific notation
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{name} must be an integer")
        if 'e' in stripped.lower():
            raise ValidationError(f"{name} must be a plain integer (scientific notation not allowed)")
        if '.' in stripped:
            raise ValidationError(f"{name} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{name} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{name} must be an integer, not a decimal")
    raise ValidationError(f"{name} must be an integer")


def _coerce_decimal(name: str, value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f"{name} must be a number")
    try:
        # str() first so floats keep their printed value (0.1 -> "0.1")
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{name} must be a number")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{name} cannot exceed {MAX_AMOUNT}")
    if amount != amount.quantize(Decimal("0.01")):
        raise ValidationError(f"{name} cannot have more than 2 decimal places")
    return amount


def _coerce_value(spec: FieldSpec, value: Any) -> Any:
    if spec.kind == "int":
        val = _coerce_int(spec.name, value)
    elif spec.kind == "decimal":
        val = _coerce_decimal(spec.name, value)
    else:
        if not isinstance(value, str):
            raise ValidationError(f"{spec.name} must be a string")
        val = value.strip()
        if val == "":
            raise ValidationError(f"{spec.name} cannot be blank")
        if spec.kind == "email" and not EMAIL_RE.match(val):
            raise ValidationError(f"{spec.name} must be a valid email address")
        if spec.min_length is not None and len(val) < spec.min_length:
            raise ValidationError(f"{spec.name} must be at least {spec.min_length} characters")
        if spec.max_length is not None and len(val) > spec.max_length:
            raise ValidationError(f"{spec.name} exceeds max length {spec.max_length}")
        if spec.choices is not None and val not in spec.choices:
            raise ValidationError(f"{spec.name} must be one of: {', '.join(spec.choices)}")

    if spec.minimum is not None and val < spec.minimum:
        raise ValidationError(f"{spec.name} must be >= {spec.minimum}")
    return val


def validate_payload(*, payload: Any, fields: Iterable[FieldSpec], partial: bool) -> dict:
    """
    Validates + normalizes incoming JSON against field specs.
    Returns a cleaned dict holding only the provided, known fields.

    partial=False: create semantics (enforce required fields)
    partial=True: patch semantics (validate only provided keys; null = not provided)

    All field problems are collected and raised together.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    cleaned: dict = {}
    messages: list[str] = []

    for spec in fields:
        raw = payload.get(spec.name)
        if raw is None:
            if spec.required and not partial:
                messages.append(f"{spec.name} is required")
            continue
        try:
            cleaned[spec.name] = _coerce_value(spec, raw)
        except ValidationError as e:
            messages.extend(e.messages)

    if messages:
        raise ValidationError(messages)
    return cleaned


def parse_pagination(args) -> tuple[int, int]:
    """
    Read the required `skip` (1-based page) and `limit` query parameters.

    skip < 1 is rejected: page 0 would produce a negative offset.
    """
    messages: list[str] = []
    values: dict[str, int] = {}
    for name, minimum in (("skip", 1), ("limit", MIN_PAGE_LIMIT)):
        raw = args.get(name)
        if raw is None or raw == "":
            messages.append(f"{name} is required")
            continue
        try:
            value = _coerce_int(name, raw)
        except ValidationError as e:
            messages.extend(e.messages)
            continue
        if value < minimum:
            messages.append(f"{name} must be >= {minimum}")
            continue
        values[name] = value

    if "limit" in values and values["limit"] > MAX_PAGE_LIMIT:
        messages.append(f"limit must be <= {MAX_PAGE_LIMIT}")

    if messages:
        raise ValidationError(messages)
    return values["skip"], values["limit"]


def parse_filter_id(args, name: str) -> int:
    """Optional id query parameter; absent or empty means no filter (0)."""
    raw = args.get(name)
    if raw is None or raw == "":
        return 0
    value = _coerce_int(name, raw)
    if value < 1:
        raise ValidationError(f"{name} must be >= 1")
    return value


def parse_id(value: int, name: str = "id") -> int:
    if value < 1:
        raise ValidationError(f"{name} must be >= 1")
    return value
