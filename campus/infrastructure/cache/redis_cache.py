"""Redis-backed cache for per-user permission sets.

Implements ICacheService. Values are JSON; every failure is logged and
reported as a miss (or False / 0) so a Redis outage never fails an
authorization check. One reconnect is attempted on connection errors.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from campus.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNLINK_CHUNK_SIZE = 500


class CacheService:
    """Async Redis cache with TTL support.

    Call connect() at startup and disconnect() at shutdown. When
    REDIS_ENABLED is false, connect() does nothing and the cache stays
    unavailable.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize cache service.

        Args:
            redis_client: Optional pre-built client (tests, DI); treated as connected.
            settings: Optional settings; defaults to get_settings().
        """
        self.settings = settings or get_settings()
        self.redis = redis_client
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish the Redis connection pool and ping it."""
        if self.redis is not None or not self.settings.redis_enabled:
            return
        password = self.settings.redis_password
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            max_connections=self.settings.redis_max_connections,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        try:
            await client.ping()
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.warning("Redis connection failed: %s. Permission cache disabled.", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info(
            "Redis cache connected: %s:%s/%s",
            self.settings.redis_host,
            self.settings.redis_port,
            self.settings.redis_db,
        )

    async def disconnect(self) -> None:
        """Close the Redis connection pool."""
        if self.redis is not None:
            await self.redis.aclose()
            logger.info("Redis cache disconnected")
        self.redis = None
        self._connected = False

    async def _reconnect(self) -> bool:
        """Drop the current client and connect again. Returns True if reconnected."""
        if self.redis is not None:
            try:
                await self.redis.aclose()
            except RedisError as e:
                logger.debug("Ignoring error while closing stale Redis client: %s", e)
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _run(
        self,
        op: str,
        target: str,
        call: Callable[[redis.Redis], Awaitable[T]],
        fallback: T,
    ) -> T:
        """Run call against the client with one reconnect; fallback on any Redis error."""
        if not self.is_available() or self.redis is None:
            return fallback
        try:
            return await call(self.redis)
        except (RedisConnectionError, RedisTimeoutError):
            if await self._reconnect() and self.redis is not None:
                try:
                    return await call(self.redis)
                except RedisError:
                    logger.exception("Cache %s error for %s after reconnect", op, target)
                    return fallback
            logger.warning("Cache %s unavailable for %s (Redis disconnected)", op, target)
            return fallback
        except RedisError:
            logger.exception("Cache %s error for %s", op, target)
            return fallback

    async def get(self, key: str) -> Any | None:
        """Return the cached value (JSON-decoded) or None if missing/unavailable."""

        async def _get(client: redis.Redis) -> Any | None:
            raw = await client.get(key)
            if raw is None:
                logger.debug("Cache MISS: %s", key)
                return None
            logger.debug("Cache HIT: %s", key)
            return json.loads(raw)

        return await self._run("get", key, _get, None)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store a JSON-serializable value with TTL in seconds. Returns True on success."""
        serialized = json.dumps(value)

        async def _set(client: redis.Redis) -> bool:
            await client.setex(key, ttl, serialized)
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
            return True

        return await self._run("set", key, _set, False)

    async def delete(self, key: str) -> bool:
        """Remove key. Returns True if the command ran."""

        async def _delete(client: redis.Redis) -> bool:
            await client.delete(key)
            logger.debug("Cache DELETE: %s", key)
            return True

        return await self._run("delete", key, _delete, False)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching pattern with SCAN + chunked UNLINK; returns the count."""

        async def _delete_pattern(client: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= _UNLINK_CHUNK_SIZE:
                    deleted += int(await client.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await client.unlink(*chunk) or 0)
            if deleted:
                logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
            return deleted

        return await self._run("delete_pattern", pattern, _delete_pattern, 0)
