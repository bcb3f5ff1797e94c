"""Permission, RolePermission, and UserRole ORM models (RBAC)."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from campus.infrastructure.persistence.database import Base
from campus.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TenantMixin,
    TimestampMixin,
)


class Permission(CuidMixin, TimestampMixin, Base):
    """Permission. Table: permission. Global catalog; code (module:action) is unique."""

    __tablename__ = "permission"

    code: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    module: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("code", name="uq_permission_code"),)


class RolePermission(CuidMixin, Base):
    """Many-to-many role-permission. Table: role_permission. Rows follow their role (CASCADE)."""

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    permission_id: Mapped[str] = mapped_column(
        String, ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
        Index("ix_role_permission_permission", "permission_id"),
    )


class UserRole(CuidMixin, TenantMixin, Base):
    """Many-to-many user-role. Table: user_role. tenant_id is the user's tenant (RLS key).

    role_id is RESTRICT: a role cannot be deleted while an assignment references it.
    """

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("role.id", ondelete="RESTRICT", name="fk_user_role_role"),
        nullable=False,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_role"),
        Index("ix_user_role_lookup", "tenant_id", "user_id"),
        Index("ix_user_role_role", "role_id"),
    )
