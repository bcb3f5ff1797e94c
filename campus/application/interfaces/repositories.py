"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.

Many-to-many relations (role-permission, user-role) are written only through
three verbs: append_association, replace_association, remove_association.
Each verb is one atomic junction-table write.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from campus.application.dtos.permission import (
        PermissionListFilter,
        PermissionResult,
    )
    from campus.application.dtos.role import RoleListFilter, RoleResult
    from campus.application.dtos.user import UserResult
    from campus.domain.value_objects import RoleScope


# Permission repository interface
class IPermissionRepository(Protocol):
    """Protocol for the permission catalog (DIP)."""

    async def get_by_ids(self, permission_ids: Collection[str]) -> list[PermissionResult]:
        """Return the permissions found among permission_ids (partial match allowed)."""

    async def get_by_code(self, code: str) -> PermissionResult | None:
        """Return permission by its unique code."""

    async def get_by_codes(self, codes: Collection[str]) -> list[PermissionResult]:
        """Return the permissions found among codes (partial match allowed)."""

    async def list_permissions(self, flt: PermissionListFilter) -> list[PermissionResult]:
        """Return permissions ordered by module, code."""

    async def list_modules(self) -> list[str]:
        """Return distinct modules, sorted."""

    async def create_permission(
        self,
        code: str,
        name: str,
        module: str,
        description: str | None = None,
    ) -> PermissionResult:
        """Insert a permission (seed only)."""


# Role repository interface
class IRoleRepository(Protocol):
    """Protocol for role persistence (DIP). Results carry their permission set."""

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        """Return role by ID."""

    async def get_by_ids(
        self, role_ids: Collection[str], *, for_share: bool = False
    ) -> list[RoleResult]:
        """Return the roles found among role_ids; for_share locks the rows until commit."""

    async def find_by_name(
        self,
        name: str,
        scope: RoleScope,
        *,
        exclude_id: str | None = None,
    ) -> RoleResult | None:
        """Return a role named name visible in scope.

        TenantScope matches the tenant's roles and global roles;
        GlobalScope matches global roles only.
        """

    async def get_system_role_by_name(self, name: str) -> RoleResult | None:
        """Return the system role with this name, if seeded."""

    async def list_roles(self, flt: RoleListFilter) -> list[RoleResult]:
        """Return roles, system roles first, then by name."""

    async def create_role(
        self,
        scope: RoleScope,
        name: str,
        description: str | None,
        *,
        is_system: bool,
        permission_ids: Collection[str],
    ) -> RoleResult:
        """Insert role and its permission links in one unit.

        Raises RoleNameExistsException on a uniqueness violation.
        """

    async def update_role(
        self,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> RoleResult | None:
        """Update name/description; None if not found.

        Raises RoleNameExistsException on a uniqueness violation.
        """

    async def delete_role(self, role_id: str) -> None:
        """Clear permission links and delete the role in one unit.

        Raises RoleInUseException when user_role rows still reference it.
        """


# Role-permission association interface
class IRolePermissionRepository(Protocol):
    """Protocol for the role_permission junction (three verbs)."""

    async def append_association(
        self, role_id: str, permission_ids: Collection[str]
    ) -> None:
        """Link permissions to role; already-linked ones are skipped."""

    async def replace_association(
        self, role_id: str, permission_ids: Collection[str]
    ) -> None:
        """Make permission_ids the role's exact permission set."""

    async def remove_association(
        self, role_id: str, permission_ids: Collection[str]
    ) -> None:
        """Unlink permissions from role; unlinked ones are ignored."""


# User repository interface
class IUserRepository(Protocol):
    """Protocol for user lookups (read-only for the RBAC core)."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by ID."""


# User-role association interface
class IUserRoleRepository(Protocol):
    """Protocol for the user_role junction (three verbs plus reads)."""

    async def get_roles_for_user(self, user_id: str) -> list[RoleResult]:
        """Return the user's roles with permissions, system roles first, then by name."""

    async def append_association(
        self, user_id: str, tenant_id: str, role_ids: Collection[str]
    ) -> None:
        """Assign roles to the user (tenant_id is the user's tenant); held ones are skipped."""

    async def replace_association(
        self, user_id: str, tenant_id: str, role_ids: Collection[str]
    ) -> None:
        """Make role_ids the user's exact role set."""

    async def remove_association(
        self, user_id: str, role_ids: Collection[str]
    ) -> None:
        """Unassign roles from the user; unheld ones are ignored."""

    async def count_by_role(self, role_id: str) -> int:
        """Return the number of users holding role_id."""

    async def get_users_with_role(self, role_id: str) -> list[UserResult]:
        """Return users holding role_id."""
