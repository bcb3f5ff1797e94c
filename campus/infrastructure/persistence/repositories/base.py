"""Base repository: generic get/create and constraint-violation helpers."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus.infrastructure.persistence.database import Base


def violates_constraint(exc: IntegrityError, *names: str) -> bool:
    """Return True if the IntegrityError was raised by one of the named constraints.

    Postgres reports the constraint name in the driver error message, e.g.
    'duplicate key value violates unique constraint "uq_role_tenant_name"'.
    """
    message = str(exc.orig)
    return any(f'"{name}"' in message for name in names)


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_entity and create.

    Subclasses expose application DTOs; ORM instances stay inside the
    repository layer.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_entity(self, entity_id: str) -> ModelType | None:
        """Return a single ORM record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record (flush, then refresh server defaults)."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
