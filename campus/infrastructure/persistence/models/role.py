"""Role ORM model. Global system roles (tenant_id NULL) and tenant-defined roles."""

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus.infrastructure.persistence.database import Base
from campus.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from campus.infrastructure.persistence.models.permission import Permission


class Role(CuidMixin, TimestampMixin, Base):
    """Role. Table: role.

    Name is unique per tenant (uq_role_tenant_name) and, for global roles,
    across the global namespace (partial index uq_role_global_name, since
    NULL tenant_ids never collide in a plain unique constraint).
    """

    __tablename__ = "role"

    tenant_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    # Writes go through RolePermission rows (association verbs); this side only reads.
    permissions: Mapped[list[Permission]] = relationship(
        secondary="role_permission",
        order_by=Permission.code,
        viewonly=True,
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_role_tenant_name"),
        Index(
            "uq_role_global_name",
            "name",
            unique=True,
            postgresql_where=text("tenant_id IS NULL"),
        ),
        Index("ix_role_is_system", "is_system"),
    )
