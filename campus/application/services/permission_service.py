"""Permission registry: resolve ids, browse the catalog, seed the defaults."""

from __future__ import annotations

from collections.abc import Collection

from campus.application.dtos.permission import PermissionListFilter, PermissionResult
from campus.application.interfaces.repositories import IPermissionRepository
from campus.application.services.system_roles import DEFAULT_PERMISSIONS
from campus.domain.exceptions import PermissionNotFoundException, ValidationException
from campus.domain.value_objects import PermissionCode
from campus.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class PermissionService:
    """Read side of the permission catalog. Permissions are created only by seeding."""

    def __init__(self, permission_repo: IPermissionRepository) -> None:
        self._repo = permission_repo

    async def resolve(self, permission_ids: Collection[str]) -> list[PermissionResult]:
        """Return exactly the permissions found; never fails on a partial match."""
        if not permission_ids:
            return []
        return await self._repo.get_by_ids(set(permission_ids))

    async def resolve_all(self, permission_ids: Collection[str]) -> list[PermissionResult]:
        """Resolve every id or raise PermissionNotFoundException listing the missing ones."""
        requested = set(permission_ids)
        found = await self.resolve(requested)
        if len(found) != len(requested):
            missing = requested - {p.id for p in found}
            raise PermissionNotFoundException(missing)
        return found

    async def list_all(
        self, flt: PermissionListFilter | None = None
    ) -> list[PermissionResult]:
        return await self._repo.list_permissions(flt or PermissionListFilter())

    async def get_by_code(self, code: str) -> PermissionResult:
        """Raises PermissionNotFoundException if no permission has this code."""
        permission = await self._repo.get_by_code(code)
        if permission is None:
            raise PermissionNotFoundException([code])
        return permission

    async def get_by_codes(self, codes: Collection[str]) -> list[PermissionResult]:
        if not codes:
            return []
        return await self._repo.get_by_codes(set(codes))

    async def list_modules(self) -> list[str]:
        return await self._repo.list_modules()

    async def seed_default_permissions(self) -> int:
        """Insert the default catalog entries that are missing; return how many were created.

        Raises:
            ValidationException: If a catalog code is not module:action.
        """
        created = 0
        for seed in DEFAULT_PERMISSIONS:
            try:
                code = PermissionCode(seed.code)
            except ValueError as exc:
                raise ValidationException(str(exc), field="code") from exc
            if await self._repo.get_by_code(code.value) is not None:
                continue
            await self._repo.create_permission(
                code=code.value,
                name=seed.name,
                module=code.module,
                description=seed.description,
            )
            created += 1
        logger.info(
            "Seeded %d of %d default permissions", created, len(DEFAULT_PERMISSIONS)
        )
        return created
