"""Cache infrastructure: Redis implementation of ICacheService."""

from campus.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService"]
