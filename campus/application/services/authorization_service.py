"""Authorization service: permission checks with optional caching, and role delegation checks."""

from __future__ import annotations

from collections.abc import Collection

from campus.application.dtos.role import RoleResult
from campus.application.interfaces.repositories import IRoleRepository
from campus.application.services.permission_cache import PermissionCache
from campus.application.services.role_hierarchy import RoleHierarchy
from campus.application.services.user_role_service import UserRoleService
from campus.domain.enums import RoleKind
from campus.domain.exceptions import AuthorizationException, RoleNotFoundException
from campus.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class AuthorizationService:
    """Centralized permission checking; uses cache when available (5 min TTL typical)."""

    def __init__(
        self,
        user_role_service: UserRoleService,
        role_repo: IRoleRepository,
        permission_cache: PermissionCache | None = None,
    ) -> None:
        self._user_roles = user_role_service
        self._role_repo = role_repo
        self._cache = permission_cache or PermissionCache(None)

    async def get_user_permission_codes(self, tenant_id: str, user_id: str) -> set[str]:
        """Return the user's permission codes (e.g. students:read). Uses cache if available.

        Raises:
            UserNotFoundException: If the user does not exist in tenant_id.
        """
        cached = await self._cache.get_codes(tenant_id, user_id)
        if cached is not None:
            logger.debug("Permission cache hit for %s/%s", tenant_id, user_id)
            return cached
        await self._user_roles.get_user(user_id, tenant_id=tenant_id)
        codes = set(await self._user_roles.get_user_permission_codes(user_id))
        await self._cache.store_codes(tenant_id, user_id, codes)
        return codes

    async def check_permission(self, tenant_id: str, user_id: str, code: str) -> bool:
        return code in await self.get_user_permission_codes(tenant_id, user_id)

    async def require_permission(self, tenant_id: str, user_id: str, code: str) -> None:
        """Raise AuthorizationException if user lacks permission."""
        if not await self.check_permission(tenant_id, user_id, code):
            raise AuthorizationException(permission=code, user_id=user_id)

    @staticmethod
    def can_assign(
        source_role: RoleResult | RoleKind, target_role: RoleResult | RoleKind
    ) -> bool:
        return RoleHierarchy.can_assign(source_role, target_role)

    async def can_user_assign_role(self, user_id: str, target_role_id: str) -> bool:
        """True iff at least one of the user's roles may grant the target role."""
        target = await self._role_repo.get_by_id(target_role_id)
        if target is None:
            raise RoleNotFoundException(target_role_id)
        held = await self._user_roles.get_user_roles(user_id)
        return any(RoleHierarchy.can_assign(role, target) for role in held)

    async def require_can_assign_roles(self, user_id: str, role_ids: Collection[str]) -> None:
        """Raise AuthorizationException naming the first role the user may not grant.

        Raises:
            RoleNotFoundException: If any role id does not resolve.
        """
        ordered = list(dict.fromkeys(role_ids))
        if not ordered:
            return
        targets = {r.id: r for r in await self._role_repo.get_by_ids(ordered)}
        missing = [rid for rid in ordered if rid not in targets]
        if missing:
            raise RoleNotFoundException(missing_ids=missing)
        held = await self._user_roles.get_user_roles(user_id)
        for role_id in ordered:
            target = targets[role_id]
            if not any(RoleHierarchy.can_assign(role, target) for role in held):
                raise AuthorizationException(
                    message=f"Not allowed to assign role '{target.name}'",
                    role_id=target.id,
                    role_name=target.name,
                )

    async def invalidate_user_cache(self, tenant_id: str, user_id: str) -> None:
        """Invalidate cached permissions for one user."""
        await self._cache.invalidate_user(tenant_id, user_id)

    async def invalidate_tenant_cache(self, tenant_id: str) -> None:
        """Invalidate all cached permissions for a tenant."""
        await self._cache.invalidate_tenant(tenant_id)
