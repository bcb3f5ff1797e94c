"""User repository: read-only lookups for the RBAC core."""

from sqlalchemy.ext.asyncio import AsyncSession

from campus.application.dtos.user import UserResult
from campus.infrastructure.persistence.models.user import User
from campus.infrastructure.persistence.repositories.base import BaseRepository


def user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult."""
    return UserResult(
        id=u.id,
        tenant_id=u.tenant_id,
        username=u.username,
        email=u.email,
        is_active=u.is_active,
    )


class UserRepository(BaseRepository[User]):
    """User lookups. Under RLS only users of the current tenant are visible."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: str) -> UserResult | None:
        row = await self.get_entity(user_id)
        return user_to_result(row) if row else None
