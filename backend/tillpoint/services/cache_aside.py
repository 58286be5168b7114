# Overview: Cache-aside helpers shared by every entity service.

"""
Cache-aside read/write helpers.

Keys:
    single entity   "<entity>:<id>"                e.g. "product:7"
    list family     "<plural>:<p1>:<p2>:..."       e.g. "products:1:5:0:"

Values are versioned snapshots: {"version": 1, "data": <plain JSON>}. A value
written under another version (or that fails to decode) reads as a miss and is
overwritten when the caller repopulates it.
"""
from __future__ import annotations

import json
from typing import Any, Callable

from flask import current_app

from ..errors import DomainError, ErrorKind
from ..extensions import cache

SNAPSHOT_VERSION = 1


def cache_key(entity: str, *params: Any) -> str:
    """Join the entity name and parameters with ':' in the given order."""
    return ":".join([entity, *("" if p is None else str(p) for p in params)])


def family_prefix(plural: str) -> str:
    return f"{plural}:"


def encode_snapshot(data: Any) -> bytes:
    try:
        return json.dumps(
            {"version": SNAPSHOT_VERSION, "data": data},
            separators=(",", ":"),
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        current_app.logger.exception("Failed to serialize cache snapshot")
        raise DomainError(ErrorKind.INTERNAL) from exc


def decode_snapshot(raw: bytes | str) -> Any | None:
    """Return the snapshot data, or None when the payload is unusable."""
    try:
        envelope = json.loads(raw)
    except (TypeError, ValueError):
        current_app.logger.warning("Discarding undecodable cache payload")
        return None
    if not isinstance(envelope, dict) or envelope.get("version") != SNAPSHOT_VERSION:
        return None
    return envelope.get("data")


def cache_ttl() -> int:
    return int(current_app.config.get("CACHE_TTL", 0))


def read_cached(key: str) -> Any | None:
    raw = cache.get(key)
    if raw is None:
        current_app.logger.debug("Cache miss key=%s", key)
        return None
    return decode_snapshot(raw)


def write_cached(key: str, data: Any) -> None:
    cache.set(key, encode_snapshot(data), cache_ttl())


def read_through(key: str, loader: Callable[[], Any]) -> Any:
    """
    Serve `key` from the cache, or call `loader` and cache what it returns.

    `loader` must return plain JSON data and raise DomainError for
    NotFound/Internal outcomes; nothing is cached when it raises.
    """
    data = read_cached(key)
    if data is not None:
        return data
    data = loader()
    write_cached(key, data)
    return data


def invalidate(*, key: str | None = None, plural: str | None = None) -> None:
    """Drop one entity key and/or a whole list family."""
    if key is not None:
        cache.delete(key)
    if plural is not None:
        cache.delete_by_prefix(family_prefix(plural))


# Snapshots that embed another entity: a write to the key entity makes the
# listed (single, plural) families stale too.
EMBEDDED_IN = {
    "category": (("product", "products"), ("order", "orders")),
    "product": (("order", "orders"),),
    "payment": (("order", "orders"),),
    "user": (("order", "orders"),),
}


def invalidate_embedding(entity: str) -> None:
    """Drop every cached snapshot that embeds a copy of `entity`."""
    for single, plural in EMBEDDED_IN.get(entity, ()):
        cache.delete_by_prefix(f"{single}:")
        cache.delete_by_prefix(family_prefix(plural))
