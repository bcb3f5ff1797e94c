"""Permission repository: the global permission catalog. Read methods return PermissionResult."""

from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus.application.dtos.permission import PermissionListFilter, PermissionResult
from campus.domain.exceptions import ValidationException
from campus.infrastructure.persistence.models.permission import Permission
from campus.infrastructure.persistence.repositories.base import (
    BaseRepository,
    violates_constraint,
)

_PERMISSION_CODE_CONSTRAINT = "uq_permission_code"


def permission_to_result(p: Permission) -> PermissionResult:
    """Map ORM Permission to application PermissionResult."""
    return PermissionResult(
        id=p.id,
        code=p.code,
        name=p.name,
        module=p.module,
        description=p.description,
    )


class PermissionRepository(BaseRepository[Permission]):
    """Permission catalog. Ordered by module, code everywhere."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def _fetch(self, *criteria) -> list[PermissionResult]:
        result = await self.db.execute(
            select(Permission).where(*criteria).order_by(Permission.module, Permission.code)
        )
        return [permission_to_result(p) for p in result.scalars().all()]

    async def get_by_ids(self, permission_ids: Collection[str]) -> list[PermissionResult]:
        if not permission_ids:
            return []
        return await self._fetch(Permission.id.in_(list(permission_ids)))

    async def get_by_code(self, code: str) -> PermissionResult | None:
        result = await self.db.execute(select(Permission).where(Permission.code == code))
        row = result.scalar_one_or_none()
        return permission_to_result(row) if row else None

    async def get_by_codes(self, codes: Collection[str]) -> list[PermissionResult]:
        if not codes:
            return []
        return await self._fetch(Permission.code.in_(list(codes)))

    async def list_permissions(self, flt: PermissionListFilter) -> list[PermissionResult]:
        criteria = []
        if flt.module:
            criteria.append(Permission.module == flt.module)
        if flt.search:
            criteria.append(
                or_(
                    Permission.code.icontains(flt.search, autoescape=True),
                    Permission.name.icontains(flt.search, autoescape=True),
                )
            )
        return await self._fetch(*criteria)

    async def list_modules(self) -> list[str]:
        result = await self.db.execute(
            select(Permission.module).distinct().order_by(Permission.module)
        )
        return list(result.scalars().all())

    async def create_permission(
        self,
        code: str,
        name: str,
        module: str,
        description: str | None = None,
    ) -> PermissionResult:
        """Insert a permission; raises ValidationException if the code already exists."""
        permission = Permission(code=code, name=name, module=module, description=description)
        try:
            async with self.db.begin_nested():
                created = await self.create(permission)
        except IntegrityError as exc:
            if violates_constraint(exc, _PERMISSION_CODE_CONSTRAINT):
                raise ValidationException(
                    f"Permission with code '{code}' already exists", field="code"
                ) from None
            raise
        return permission_to_result(created)
