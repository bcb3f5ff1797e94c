"""Role application service: role lifecycle, role-permission association, system role seeding."""

from __future__ import annotations

from collections.abc import Collection

from campus.application.dtos.role import RoleCreate, RoleListFilter, RoleResult
from campus.application.interfaces.repositories import (
    IRolePermissionRepository,
    IRoleRepository,
    IUserRoleRepository,
)
from campus.application.services.permission_cache import PermissionCache
from campus.application.services.permission_service import PermissionService
from campus.application.services.system_roles import (
    SEED_VERSION,
    SYSTEM_ROLE_DESCRIPTIONS,
    SYSTEM_ROLE_PERMISSIONS,
)
from campus.domain.enums import RoleKind
from campus.domain.exceptions import (
    CannotDeleteSystemRoleException,
    CannotModifySystemRoleException,
    RoleInUseException,
    RoleNameExistsException,
    RoleNameRequiredException,
    RoleNotFoundException,
    ValidationException,
)
from campus.domain.value_objects import GLOBAL_SCOPE, scope_for
from campus.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise RoleNameRequiredException()
    return cleaned


def _reserve_canonical_name(name: str, tenant_id: str | None) -> None:
    """The seven system role names belong to the system roles alone."""
    if RoleKind.from_name(name).is_system:
        raise RoleNameExistsException(name, tenant_id)


class RoleService:
    """Create, update, delete roles and manage their permission sets.

    System roles are global and immutable: their permission set cannot change
    and they cannot be deleted. Only their description stays editable, and
    their canonical names are reserved: no other role may take one.
    """

    def __init__(
        self,
        role_repo: IRoleRepository,
        role_permission_repo: IRolePermissionRepository,
        user_role_repo: IUserRoleRepository,
        permission_service: PermissionService,
        permission_cache: PermissionCache | None = None,
    ) -> None:
        self._role_repo = role_repo
        self._role_permission_repo = role_permission_repo
        self._user_role_repo = user_role_repo
        self._permissions = permission_service
        self._cache = permission_cache or PermissionCache(None)

    async def create(self, data: RoleCreate) -> RoleResult:
        """Create a role with its initial permission set.

        Raises:
            RoleNameRequiredException: If the name is empty or blank.
            ValidationException: If a system role is given a tenant.
            PermissionNotFoundException: If any permission id does not resolve.
            RoleNameExistsException: If the name is taken in the role's scope.
        """
        name = _clean_name(data.name)
        if data.is_system and data.tenant_id is not None:
            raise ValidationException("System roles cannot belong to a tenant", field="tenant_id")
        if not data.is_system:
            _reserve_canonical_name(name, data.tenant_id)
        scope = scope_for(data.tenant_id)
        permission_ids = set(data.permission_ids)
        if permission_ids:
            await self._permissions.resolve_all(permission_ids)
        if await self._role_repo.find_by_name(name, scope) is not None:
            raise RoleNameExistsException(name, data.tenant_id)
        role = await self._role_repo.create_role(
            scope,
            name,
            data.description,
            is_system=data.is_system,
            permission_ids=permission_ids,
        )
        logger.info(
            "Created role %s (%s) tenant=%s permissions=%d",
            role.name,
            role.id,
            role.tenant_id,
            len(role.permissions),
        )
        return role

    async def get_by_id(self, role_id: str) -> RoleResult:
        role = await self._role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundException(role_id)
        return role

    async def get_by_name(self, name: str, tenant_id: str | None = None) -> RoleResult:
        """Look up a role by name; a tenant lookup also sees global roles."""
        role = await self._role_repo.find_by_name(name, scope_for(tenant_id))
        if role is None:
            raise RoleNotFoundException(name)
        return role

    async def list_roles(self, flt: RoleListFilter | None = None) -> list[RoleResult]:
        """System roles first, then by name."""
        return await self._role_repo.list_roles(flt or RoleListFilter())

    async def list_by_tenant(self, tenant_id: str) -> list[RoleResult]:
        return await self.list_roles(RoleListFilter(tenant_id=tenant_id, include_system=True))

    async def update(
        self,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> RoleResult:
        """Rename and/or redescribe a role. System roles keep their name; the description may change."""
        role = await self.get_by_id(role_id)
        new_name = None
        if name is not None:
            new_name = _clean_name(name)
            if new_name != role.name:
                if role.is_system:
                    raise CannotModifySystemRoleException(role.id, role.name, "name")
                _reserve_canonical_name(new_name, role.tenant_id)
                clash = await self._role_repo.find_by_name(
                    new_name, role.scope, exclude_id=role.id
                )
                if clash is not None:
                    raise RoleNameExistsException(new_name, role.tenant_id)
        updated = await self._role_repo.update_role(
            role.id, name=new_name, description=description
        )
        if updated is None:
            raise RoleNotFoundException(role_id)
        return updated

    async def delete(self, role_id: str) -> None:
        """Delete an unassigned, non-system role together with its permission links."""
        role = await self.get_by_id(role_id)
        if role.is_system:
            raise CannotDeleteSystemRoleException(role.id, role.name)
        count = await self._user_role_repo.count_by_role(role.id)
        if count > 0:
            raise RoleInUseException(role.id, count)
        await self._role_repo.delete_role(role.id)
        logger.info("Deleted role %s (%s) tenant=%s", role.name, role.id, role.tenant_id)

    async def _get_mutable(self, role_id: str) -> RoleResult:
        role = await self.get_by_id(role_id)
        if role.is_system:
            raise CannotModifySystemRoleException(role.id, role.name)
        return role

    async def _invalidate_holders(self, role: RoleResult) -> None:
        if role.tenant_id is not None:
            await self._cache.invalidate_tenant(role.tenant_id)
        else:
            await self._cache.invalidate_all()

    async def assign_permissions(
        self, role_id: str, permission_ids: Collection[str]
    ) -> RoleResult:
        """Add permissions to a role; ones it already has are skipped."""
        role = await self._get_mutable(role_id)
        requested = set(permission_ids)
        if requested:
            await self._permissions.resolve_all(requested)
            await self._role_permission_repo.append_association(role.id, requested)
            await self._invalidate_holders(role)
        return await self.get_by_id(role.id)

    async def remove_permissions(
        self, role_id: str, permission_ids: Collection[str]
    ) -> RoleResult:
        """Remove permissions from a role; ids it does not have are ignored."""
        role = await self._get_mutable(role_id)
        requested = set(permission_ids)
        if requested:
            await self._role_permission_repo.remove_association(role.id, requested)
            await self._invalidate_holders(role)
        return await self.get_by_id(role.id)

    async def set_permissions(
        self, role_id: str, permission_ids: Collection[str]
    ) -> RoleResult:
        """Replace the role's permission set; an empty collection clears it."""
        role = await self._get_mutable(role_id)
        requested = set(permission_ids)
        if requested:
            await self._permissions.resolve_all(requested)
        await self._role_permission_repo.replace_association(role.id, requested)
        await self._invalidate_holders(role)
        return await self.get_by_id(role.id)

    async def seed_system_roles(self) -> int:
        """Create the seven global system roles that do not exist yet.

        Existing roles are left as they are. Returns the number created.
        """
        created = 0
        for kind in RoleKind.system_kinds():
            if await self._role_repo.get_system_role_by_name(kind.value) is not None:
                continue
            squatter = await self._role_repo.find_by_name(kind.value, GLOBAL_SCOPE)
            if squatter is not None:
                logger.warning(
                    "Not seeding %s: custom role %s already holds the name",
                    kind.value,
                    squatter.id,
                )
                continue
            codes = SYSTEM_ROLE_PERMISSIONS[kind]
            permissions = await self._permissions.get_by_codes(codes)
            missing = set(codes) - {p.code for p in permissions}
            if missing:
                logger.warning(
                    "Seeding %s without unknown permission codes: %s",
                    kind.value,
                    ", ".join(sorted(missing)),
                )
            await self._role_repo.create_role(
                GLOBAL_SCOPE,
                kind.value,
                SYSTEM_ROLE_DESCRIPTIONS[kind],
                is_system=True,
                permission_ids={p.id for p in permissions},
            )
            created += 1
        logger.info("Seeded %d system roles (seed version %d)", created, SEED_VERSION)
        return created
