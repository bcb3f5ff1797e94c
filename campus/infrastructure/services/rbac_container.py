"""Composition root: wire repositories and RBAC services onto one AsyncSession."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from campus.application.interfaces.services import ICacheService
from campus.application.services import (
    AuthorizationService,
    PermissionCache,
    PermissionService,
    RoleService,
    UserRoleService,
)
from campus.core.config import get_settings
from campus.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)


@dataclass(frozen=True)
class RbacServices:
    """The four RBAC services sharing one session (and one unit of work)."""

    permissions: PermissionService
    roles: RoleService
    user_roles: UserRoleService
    authorization: AuthorizationService


def build_rbac_services(
    session: AsyncSession,
    cache: ICacheService | None = None,
    *,
    cache_ttl: int | None = None,
) -> RbacServices:
    """Build the RBAC services for one session.

    cache is optional (CacheService connected at startup when Redis is
    enabled); without it permission checks hit the database only. cache_ttl
    defaults to CACHE_TTL_PERMISSIONS.
    """
    ttl = cache_ttl if cache_ttl is not None else get_settings().cache_ttl_permissions
    permission_cache = PermissionCache(cache, ttl=ttl)

    role_repo = RoleRepository(session)
    user_role_repo = UserRoleRepository(session)
    permissions = PermissionService(PermissionRepository(session))
    roles = RoleService(
        role_repo=role_repo,
        role_permission_repo=RolePermissionRepository(session),
        user_role_repo=user_role_repo,
        permission_service=permissions,
        permission_cache=permission_cache,
    )
    user_roles = UserRoleService(
        user_repo=UserRepository(session),
        role_repo=role_repo,
        user_role_repo=user_role_repo,
        permission_cache=permission_cache,
    )
    authorization = AuthorizationService(
        user_role_service=user_roles,
        role_repo=role_repo,
        permission_cache=permission_cache,
    )
    return RbacServices(
        permissions=permissions,
        roles=roles,
        user_roles=user_roles,
        authorization=authorization,
    )
