"""Domain value objects and shared value types."""

from campus.domain.value_objects.core import (
    GLOBAL_SCOPE,
    GlobalScope,
    PermissionCode,
    RoleScope,
    TenantScope,
    scope_for,
)

__all__ = [
    "GLOBAL_SCOPE",
    "GlobalScope",
    "PermissionCode",
    "RoleScope",
    "TenantScope",
    "scope_for",
]
