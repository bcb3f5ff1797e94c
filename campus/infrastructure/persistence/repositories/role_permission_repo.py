"""RolePermission repository: the role-permission junction (append, replace, remove)."""

from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from campus.infrastructure.persistence.models.permission import RolePermission
from campus.shared.utils import generate_cuid


class RolePermissionRepository:
    """Role-permission link table only. Each verb is one SAVEPOINT."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _insert_missing(self, role_id: str, permission_ids: Collection[str]) -> None:
        if not permission_ids:
            return
        stmt = (
            insert(RolePermission)
            .values(
                [
                    {"id": generate_cuid(), "role_id": role_id, "permission_id": pid}
                    for pid in sorted(permission_ids)
                ]
            )
            .on_conflict_do_nothing(constraint="uq_role_permission")
        )
        await self.db.execute(stmt)

    async def append_association(
        self, role_id: str, permission_ids: Collection[str]
    ) -> None:
        async with self.db.begin_nested():
            await self._insert_missing(role_id, permission_ids)

    async def replace_association(
        self, role_id: str, permission_ids: Collection[str]
    ) -> None:
        keep = list(permission_ids)
        async with self.db.begin_nested():
            stale = delete(RolePermission).where(RolePermission.role_id == role_id)
            if keep:
                stale = stale.where(RolePermission.permission_id.not_in(keep))
            await self.db.execute(stale)
            await self._insert_missing(role_id, keep)

    async def remove_association(
        self, role_id: str, permission_ids: Collection[str]
    ) -> None:
        if not permission_ids:
            return
        async with self.db.begin_nested():
            await self.db.execute(
                delete(RolePermission).where(
                    RolePermission.role_id == role_id,
                    RolePermission.permission_id.in_(list(permission_ids)),
                )
            )
