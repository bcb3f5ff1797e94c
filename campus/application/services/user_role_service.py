"""User-role binding: assign roles to users and derive their effective permissions."""

from __future__ import annotations

from collections.abc import Collection

from campus.application.dtos.permission import PermissionResult
from campus.application.dtos.role import RoleResult
from campus.application.dtos.user import UserResult
from campus.application.interfaces.repositories import (
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from campus.application.services.permission_cache import PermissionCache
from campus.domain.exceptions import (
    RoleNotFoundException,
    TenantMismatchException,
    UserNotFoundException,
)
from campus.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class UserRoleService:
    """Assign, replace and remove a user's roles; read their permissions.

    Assignment validates every requested role before writing anything: all
    ids must resolve and every tenant role must belong to the user's tenant.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        user_role_repo: IUserRoleRepository,
        permission_cache: PermissionCache | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._role_repo = role_repo
        self._user_role_repo = user_role_repo
        self._cache = permission_cache or PermissionCache(None)

    async def get_user(self, user_id: str, tenant_id: str | None = None) -> UserResult:
        """Return the user; a user of another tenant counts as not found."""
        user = await self._user_repo.get_by_id(user_id)
        if user is None or (tenant_id is not None and user.tenant_id != tenant_id):
            raise UserNotFoundException(user_id)
        return user

    async def get_user_roles(self, user_id: str) -> list[RoleResult]:
        """Roles with permissions, system roles first, then by name."""
        await self.get_user(user_id)
        return await self._user_role_repo.get_roles_for_user(user_id)

    async def _validate_roles(self, user: UserResult, role_ids: set[str]) -> None:
        roles = await self._role_repo.get_by_ids(role_ids, for_share=True)
        missing = role_ids - {r.id for r in roles}
        if missing:
            raise RoleNotFoundException(missing_ids=missing)
        foreign = [r.id for r in roles if not r.scope.admits(user.tenant_id)]
        if foreign:
            raise TenantMismatchException(user.id, user.tenant_id, foreign)

    async def assign_roles(self, user_id: str, role_ids: Collection[str]) -> list[RoleResult]:
        """Add roles to the user; roles already held are skipped."""
        user = await self.get_user(user_id)
        requested = set(role_ids)
        if requested:
            await self._validate_roles(user, requested)
            await self._user_role_repo.append_association(user.id, user.tenant_id, requested)
            await self._cache.invalidate_user(user.tenant_id, user.id)
            logger.info("Assigned %d role(s) to user %s", len(requested), user.id)
        return await self._user_role_repo.get_roles_for_user(user.id)

    async def set_roles(self, user_id: str, role_ids: Collection[str]) -> list[RoleResult]:
        """Make role_ids the user's exact role set; an empty collection removes all roles."""
        user = await self.get_user(user_id)
        requested = set(role_ids)
        if requested:
            await self._validate_roles(user, requested)
        await self._user_role_repo.replace_association(user.id, user.tenant_id, requested)
        await self._cache.invalidate_user(user.tenant_id, user.id)
        logger.info("Set %d role(s) for user %s", len(requested), user.id)
        return await self._user_role_repo.get_roles_for_user(user.id)

    async def remove_roles(self, user_id: str, role_ids: Collection[str]) -> list[RoleResult]:
        """Remove roles from the user; unheld or unknown ids are ignored."""
        user = await self.get_user(user_id)
        requested = set(role_ids)
        if requested:
            await self._user_role_repo.remove_association(user.id, requested)
            await self._cache.invalidate_user(user.tenant_id, user.id)
        return await self._user_role_repo.get_roles_for_user(user.id)

    async def has_role(self, user_id: str, role_name: str) -> bool:
        return any(r.name == role_name for r in await self.get_user_roles(user_id))

    async def has_permission(self, user_id: str, code: str) -> bool:
        return code in await self.get_user_permission_codes(user_id)

    async def get_user_permissions(self, user_id: str) -> list[PermissionResult]:
        """Union of the permissions of all the user's roles, deduplicated by id."""
        by_id: dict[str, PermissionResult] = {}
        for role in await self.get_user_roles(user_id):
            for permission in role.permissions:
                by_id.setdefault(permission.id, permission)
        return sorted(by_id.values(), key=lambda p: (p.module, p.code))

    async def get_user_permission_codes(self, user_id: str) -> list[str]:
        return sorted({p.code for p in await self.get_user_permissions(user_id)})

    async def get_users_with_role(self, role_id: str) -> list[UserResult]:
        if await self._role_repo.get_by_id(role_id) is None:
            raise RoleNotFoundException(role_id)
        return await self._user_role_repo.get_users_with_role(role_id)
