"""UserRole repository: user-role assignments and reverse lookups."""

from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from campus.application.dtos.role import RoleResult
from campus.application.dtos.user import UserResult
from campus.infrastructure.persistence.models.permission import UserRole
from campus.infrastructure.persistence.models.role import Role
from campus.infrastructure.persistence.models.user import User
from campus.infrastructure.persistence.repositories.role_repo import (
    role_to_result,
    select_roles,
)
from campus.infrastructure.persistence.repositories.user_repo import user_to_result
from campus.shared.utils import generate_cuid


class UserRoleRepository:
    """User-role link table only. Each write verb is one SAVEPOINT."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_roles_for_user(self, user_id: str) -> list[RoleResult]:
        result = await self.db.execute(
            select_roles()
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.is_system.desc(), Role.name)
        )
        return [role_to_result(r) for r in result.scalars().all()]

    async def _insert_missing(
        self, user_id: str, tenant_id: str, role_ids: Collection[str]
    ) -> None:
        if not role_ids:
            return
        stmt = (
            insert(UserRole)
            .values(
                [
                    {
                        "id": generate_cuid(),
                        "user_id": user_id,
                        "role_id": rid,
                        "tenant_id": tenant_id,
                    }
                    for rid in sorted(role_ids)
                ]
            )
            .on_conflict_do_nothing(constraint="uq_user_role")
        )
        await self.db.execute(stmt)

    async def append_association(
        self, user_id: str, tenant_id: str, role_ids: Collection[str]
    ) -> None:
        async with self.db.begin_nested():
            await self._insert_missing(user_id, tenant_id, role_ids)

    async def replace_association(
        self, user_id: str, tenant_id: str, role_ids: Collection[str]
    ) -> None:
        keep = list(role_ids)
        async with self.db.begin_nested():
            stale = delete(UserRole).where(UserRole.user_id == user_id)
            if keep:
                stale = stale.where(UserRole.role_id.not_in(keep))
            await self.db.execute(stale)
            await self._insert_missing(user_id, tenant_id, keep)

    async def remove_association(self, user_id: str, role_ids: Collection[str]) -> None:
        if not role_ids:
            return
        async with self.db.begin_nested():
            await self.db.execute(
                delete(UserRole).where(
                    UserRole.user_id == user_id,
                    UserRole.role_id.in_(list(role_ids)),
                )
            )

    async def count_by_role(self, role_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role_id)
        )
        return int(result.scalar_one())

    async def get_users_with_role(self, role_id: str) -> list[UserResult]:
        result = await self.db.execute(
            select(User)
            .join(UserRole, UserRole.user_id == User.id)
            .where(UserRole.role_id == role_id)
            .order_by(User.username)
        )
        return [user_to_result(u) for u in result.scalars().all()]
