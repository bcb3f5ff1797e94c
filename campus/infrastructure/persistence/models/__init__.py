"""Persistence models: ORM entities and mixins."""

from campus.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    TenantMixin,
    TimestampMixin,
)
from campus.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from campus.infrastructure.persistence.models.role import Role
from campus.infrastructure.persistence.models.tenant import Tenant
from campus.infrastructure.persistence.models.user import User

__all__ = [
    "CuidMixin",
    "MultiTenantModel",
    "Permission",
    "Role",
    "RolePermission",
    "Tenant",
    "TenantMixin",
    "TimestampMixin",
    "User",
    "UserRole",
]
