"""Per-user permission code cache on top of ICacheService.

Keys: permission:{tenant_id}:{user_id}. Key components must not contain the
separator so that tenant-wide invalidation (permission:{tenant_id}:*) cannot
match another tenant's keys.
"""

from __future__ import annotations

from campus.application.interfaces.services import ICacheService
from campus.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_PERMISSION
from campus.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _validate_key_component(value: str, name: str) -> None:
    if not value or CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must be non-empty and not contain {CACHE_KEY_SEP!r}"
        )


def permission_key(tenant_id: str, user_id: str) -> str:
    """Cache key for one user's permission codes."""
    _validate_key_component(tenant_id, "tenant_id")
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}{tenant_id}{CACHE_KEY_SEP}{user_id}"


def tenant_permission_pattern(tenant_id: str) -> str:
    """SCAN pattern matching every cached user of a tenant."""
    _validate_key_component(tenant_id, "tenant_id")
    return f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}{tenant_id}{CACHE_KEY_SEP}*"


class PermissionCache:
    """Read-through helper; every method is a no-op when no cache is available."""

    def __init__(self, cache: ICacheService | None, ttl: int = 300) -> None:
        self._cache = cache
        self._ttl = ttl

    @property
    def enabled(self) -> bool:
        return self._cache is not None and self._cache.is_available()

    async def get_codes(self, tenant_id: str, user_id: str) -> set[str] | None:
        if not self.enabled:
            return None
        cached = await self._cache.get(permission_key(tenant_id, user_id))
        return set(cached) if cached is not None else None

    async def store_codes(self, tenant_id: str, user_id: str, codes: set[str]) -> None:
        if self.enabled:
            await self._cache.set(
                permission_key(tenant_id, user_id), sorted(codes), ttl=self._ttl
            )

    async def invalidate_user(self, tenant_id: str, user_id: str) -> None:
        if self.enabled:
            await self._cache.delete(permission_key(tenant_id, user_id))

    async def invalidate_tenant(self, tenant_id: str) -> None:
        if self.enabled:
            deleted = await self._cache.delete_pattern(tenant_permission_pattern(tenant_id))
            logger.debug("Invalidated %d cached permission sets for tenant %s", deleted, tenant_id)

    async def invalidate_all(self) -> None:
        """Drop every cached permission set (global custom roles span all tenants)."""
        if self.enabled:
            await self._cache.delete_pattern(f"{CACHE_PREFIX_PERMISSION}{CACHE_KEY_SEP}*")
