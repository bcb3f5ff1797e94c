"""Role repository. Read methods return RoleResult with the permission set loaded."""

from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import Select, delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campus.application.dtos.role import RoleListFilter, RoleResult
from campus.domain.exceptions import RoleInUseException, RoleNameExistsException
from campus.domain.value_objects import GlobalScope, RoleScope
from campus.infrastructure.persistence.models.permission import RolePermission
from campus.infrastructure.persistence.models.role import Role
from campus.infrastructure.persistence.repositories.base import (
    BaseRepository,
    violates_constraint,
)
from campus.infrastructure.persistence.repositories.permission_repo import (
    permission_to_result,
)
from campus.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

ROLE_NAME_CONSTRAINTS = ("uq_role_tenant_name", "uq_role_global_name")
USER_ROLE_ROLE_FK = "fk_user_role_role"


def role_to_result(r: Role) -> RoleResult:
    """Map ORM Role (permissions loaded) to application RoleResult."""
    return RoleResult(
        id=r.id,
        tenant_id=r.tenant_id,
        name=r.name,
        description=r.description,
        is_system=r.is_system,
        permissions=tuple(permission_to_result(p) for p in r.permissions),
        created_at=r.created_at,
        updated_at=r.updated_at,
    )


def select_roles() -> Select[tuple[Role]]:
    """SELECT role with permissions eagerly loaded, refreshing any identity-map copy."""
    return (
        select(Role)
        .options(selectinload(Role.permissions))
        .execution_options(populate_existing=True)
    )


def _visible_in(scope: RoleScope):
    """Roles a lookup in scope can see: global roles, plus the tenant's own."""
    if isinstance(scope, GlobalScope):
        return Role.tenant_id.is_(None)
    return or_(Role.tenant_id == scope.tenant_id, Role.tenant_id.is_(None))


class RoleRepository(BaseRepository[Role]):
    """Role persistence. Writes run in a SAVEPOINT; name races surface as RoleNameExistsException."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        result = await self.db.execute(select_roles().where(Role.id == role_id))
        row = result.scalar_one_or_none()
        return role_to_result(row) if row else None

    async def get_by_ids(
        self, role_ids: Collection[str], *, for_share: bool = False
    ) -> list[RoleResult]:
        """Return the roles found; for_share takes FOR SHARE locks until the transaction ends."""
        if not role_ids:
            return []
        q = select_roles().where(Role.id.in_(list(role_ids))).order_by(Role.name)
        if for_share:
            q = q.with_for_update(read=True, of=Role)
        result = await self.db.execute(q)
        return [role_to_result(r) for r in result.scalars().all()]

    async def find_by_name(
        self,
        name: str,
        scope: RoleScope,
        *,
        exclude_id: str | None = None,
    ) -> RoleResult | None:
        q = select_roles().where(Role.name == name, _visible_in(scope))
        if exclude_id is not None:
            q = q.where(Role.id != exclude_id)
        # Prefer the tenant's own role over a global one with the same name.
        q = q.order_by(Role.tenant_id.is_(None)).limit(1)
        result = await self.db.execute(q)
        row = result.scalar_one_or_none()
        return role_to_result(row) if row else None

    async def get_system_role_by_name(self, name: str) -> RoleResult | None:
        result = await self.db.execute(
            select_roles().where(
                Role.name == name,
                Role.tenant_id.is_(None),
                Role.is_system.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        return role_to_result(row) if row else None

    async def list_roles(self, flt: RoleListFilter) -> list[RoleResult]:
        q = select_roles()
        if flt.tenant_id is not None:
            if flt.include_system:
                q = q.where(or_(Role.tenant_id == flt.tenant_id, Role.tenant_id.is_(None)))
            else:
                q = q.where(Role.tenant_id == flt.tenant_id)
        elif not flt.include_system:
            q = q.where(Role.tenant_id.is_not(None))
        if flt.search:
            q = q.where(
                or_(
                    Role.name.icontains(flt.search, autoescape=True),
                    Role.description.icontains(flt.search, autoescape=True),
                )
            )
        q = q.order_by(Role.is_system.desc(), Role.name)
        result = await self.db.execute(q)
        return [role_to_result(r) for r in result.scalars().all()]

    async def _reload(self, role_id: str) -> RoleResult:
        result = await self.db.execute(select_roles().where(Role.id == role_id))
        return role_to_result(result.scalar_one())

    async def create_role(
        self,
        scope: RoleScope,
        name: str,
        description: str | None,
        *,
        is_system: bool,
        permission_ids: Collection[str],
    ) -> RoleResult:
        """Insert role and its permission links in one SAVEPOINT; return the reloaded role."""
        role = Role(
            tenant_id=scope.tenant_id,
            name=name,
            description=description,
            is_system=is_system,
        )
        try:
            async with self.db.begin_nested():
                await self.create(role)
                if permission_ids:
                    self.db.add_all(
                        RolePermission(role_id=role.id, permission_id=pid)
                        for pid in sorted(permission_ids)
                    )
                    await self.db.flush()
        except IntegrityError as exc:
            if violates_constraint(exc, *ROLE_NAME_CONSTRAINTS):
                logger.warning(
                    "Concurrent role create lost the name race: %s (tenant=%s)",
                    name,
                    scope.tenant_id,
                )
                raise RoleNameExistsException(name, scope.tenant_id) from None
            raise
        return await self._reload(role.id)

    async def update_role(
        self,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> RoleResult | None:
        role = await self.get_entity(role_id)
        if role is None:
            return None
        try:
            async with self.db.begin_nested():
                if name is not None:
                    role.name = name
                if description is not None:
                    role.description = description
                await self.db.flush()
        except IntegrityError as exc:
            if violates_constraint(exc, *ROLE_NAME_CONSTRAINTS):
                logger.warning("Concurrent role rename lost the name race: %s", name)
                raise RoleNameExistsException(name or role.name, role.tenant_id) from None
            raise
        return await self._reload(role_id)

    async def delete_role(self, role_id: str) -> None:
        """Clear permission links and delete the role in one SAVEPOINT.

        A user_role row referencing the role (fk_user_role_role, RESTRICT)
        aborts the delete with RoleInUseException.
        """
        try:
            async with self.db.begin_nested():
                await self.db.execute(
                    delete(RolePermission).where(RolePermission.role_id == role_id)
                )
                await self.db.execute(delete(Role).where(Role.id == role_id))
        except IntegrityError as exc:
            if violates_constraint(exc, USER_ROLE_ROLE_FK):
                logger.warning("Role %s was assigned while being deleted", role_id)
                raise RoleInUseException(role_id) from None
            raise
