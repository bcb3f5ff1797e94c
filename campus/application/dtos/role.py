"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from campus.application.dtos.permission import PermissionResult
from campus.domain.enums import RoleKind
from campus.domain.value_objects import RoleScope, scope_for


@dataclass(frozen=True)
class RoleResult:
    """Role read-model with its permission set populated."""

    id: str
    tenant_id: str | None
    name: str
    description: str | None
    is_system: bool
    permissions: tuple[PermissionResult, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def scope(self) -> RoleScope:
        """GlobalScope for system/global roles, TenantScope otherwise."""
        return scope_for(self.tenant_id)

    @property
    def kind(self) -> RoleKind:
        """Canonical kind for global system roles; CUSTOM for every other role."""
        if not self.is_system or self.tenant_id is not None:
            return RoleKind.CUSTOM
        return RoleKind.from_name(self.name)

    @property
    def permission_ids(self) -> frozenset[str]:
        return frozenset(p.id for p in self.permissions)

    @property
    def permission_codes(self) -> frozenset[str]:
        return frozenset(p.code for p in self.permissions)


@dataclass(frozen=True)
class RoleCreate:
    """Input for RoleService.create. tenant_id None means the global scope."""

    name: str
    tenant_id: str | None = None
    description: str | None = None
    is_system: bool = False
    permission_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RoleListFilter:
    """Filter for listing roles.

    With tenant_id: the tenant's roles, plus global roles when include_system.
    Without tenant_id: every role when include_system, else only tenant roles.
    """

    tenant_id: str | None = None
    include_system: bool = True
    search: str | None = None
