"""Domain value objects for the campus RBAC core.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import TypeAlias

# module:action, lowercase letters and underscores (e.g. students:read, users:assign_roles).
_PERMISSION_CODE_RE = re.compile(r"^[a-z_]+:[a-z_]+$")


@dataclass(frozen=True)
class GlobalScope:
    """Scope of system roles: one namespace shared by every tenant."""

    @property
    def tenant_id(self) -> None:
        return None

    def admits(self, tenant_id: str) -> bool:
        """Global roles may be held by users of any tenant."""
        return True


@dataclass(frozen=True)
class TenantScope:
    """Scope of a tenant-defined role."""

    tenant_id: str

    def __post_init__(self) -> None:
        if not self.tenant_id:
            raise ValueError("TenantScope requires a non-empty tenant_id")

    def admits(self, tenant_id: str) -> bool:
        """Tenant roles may only be held by users of the same tenant."""
        return self.tenant_id == tenant_id


RoleScope: TypeAlias = GlobalScope | TenantScope

GLOBAL_SCOPE = GlobalScope()


def scope_for(tenant_id: str | None) -> RoleScope:
    """Return the scope for a nullable tenant_id column value."""
    if tenant_id is None:
        return GLOBAL_SCOPE
    return TenantScope(tenant_id)


@dataclass(frozen=True)
class PermissionCode:
    """Value object for a permission code (module:action).

    Codes are globally unique and immutable once created.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate format.

        Raises:
            ValueError: If the code is empty or not module:action.
        """
        if not self.value:
            raise ValueError("Permission code must be a non-empty string")
        if not _PERMISSION_CODE_RE.match(self.value):
            raise ValueError(
                f"Permission code must be 'module:action' in lowercase letters and underscores, got {self.value!r}"
            )

    @property
    def module(self) -> str:
        """Part before the colon (e.g. 'students')."""
        return self.value.split(":", 1)[0]

    @property
    def action(self) -> str:
        """Part after the colon (e.g. 'read')."""
        return self.value.split(":", 1)[1]
