# backend/tillpoint/cache.py
"""
Redis-backed cache used by every service for cache-aside reads.

The extension owns one process-wide client (redis-py pools connections and is
safe to share between request threads). Values are opaque bytes here; the
snapshot format lives in `tillpoint.services.cache_aside`.

Redis failures are logged and re-raised as DomainError(INTERNAL) so callers
never see driver details.
"""
from __future__ import annotations

import redis
from flask import Flask, current_app

from .errors import DomainError, ErrorKind

SCAN_BATCH_SIZE = 100


class RedisCache:
    def __init__(self, app: Flask | None = None):
        self._client = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        client = app.config.get("CACHE_CLIENT")
        if client is None:
            client = redis.Redis.from_url(app.config["REDIS_URL"])
        self._client = client
        app.extensions["tillpoint-cache"] = self

    @property
    def client(self):
        if self._client is None:
            raise RuntimeError("RedisCache is not initialized; call init_app() first")
        return self._client

    def get(self, key: str) -> bytes | None:
        """Return the cached bytes for `key`, or None on a miss."""
        try:
            return self.client.get(key)
        except redis.RedisError as exc:
            current_app.logger.exception("Cache get failed for key=%s", key)
            raise DomainError(ErrorKind.INTERNAL) from exc

    def set(self, key: str, value: bytes, ttl: int = 0) -> None:
        """Store `value`; ttl=0 means the entry never expires."""
        try:
            self.client.set(key, value, ex=ttl if ttl > 0 else None)
        except redis.RedisError as exc:
            current_app.logger.exception("Cache set failed for key=%s", key)
            raise DomainError(ErrorKind.INTERNAL) from exc

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.RedisError as exc:
            current_app.logger.exception("Cache delete failed for key=%s", key)
            raise DomainError(ErrorKind.INTERNAL) from exc

    def delete_by_prefix(self, prefix: str) -> int:
        """
        Delete every key starting with `prefix`.

        Uses SCAN (never KEYS) so large keyspaces do not block the server.
        Returns the number of keys removed.
        """
        removed = 0
        try:
            for key in self.client.scan_iter(match=f"{prefix}*", count=SCAN_BATCH_SIZE):
                removed += self.client.delete(key)
        except redis.RedisError as exc:
            current_app.logger.exception("Cache prefix delete failed for prefix=%s", prefix)
            raise DomainError(ErrorKind.INTERNAL) from exc
        current_app.logger.debug("Invalidated %d cache keys with prefix=%s", removed, prefix)
        return removed

    def ping(self) -> bool:
        return bool(self.client.ping())

    def flush(self) -> None:
        self.client.flushdb()
