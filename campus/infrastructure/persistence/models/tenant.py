"""Tenant ORM model. Root entity for multi-tenant hierarchy (no tenant_id)."""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from campus.domain.enums import TenantStatus
from campus.infrastructure.persistence.database import Base
from campus.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin

_STATUS_VALUES = ", ".join(f"'{v}'" for v in TenantStatus.values())


class Tenant(CuidMixin, TimestampMixin, Base):
    """School or organization. Table: tenant. Referenced by the RBAC core, not owned."""

    __tablename__ = "tenant"

    code: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=TenantStatus.ACTIVE.value, index=True
    )

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="tenant_status_check"),
    )
