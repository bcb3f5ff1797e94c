"""Domain enumerations for the campus RBAC core.

Enums represent fixed sets of domain values: tenant status and the closed
set of role kinds with their hierarchy levels.
"""

from enum import Enum

# Shared level of every tenant-defined role; less privileged than any system role.
CUSTOM_ROLE_LEVEL = 100


class TenantStatus(str, Enum):
    """Tenant lifecycle status."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]


class RoleKind(str, Enum):
    """Closed set of role kinds. Values are the canonical system role names.

    Every role maps to exactly one kind: the seven canonical names map to
    their own kind, any other name (tenant-created roles) maps to CUSTOM.
    Each kind carries its hierarchy level; lower is more privileged.
    """

    SUPER_ADMIN = "SuperAdmin"
    TENANT_ADMIN = "TenantAdmin"
    PRINCIPAL = "Principal"
    TEACHER = "Teacher"
    STAFF = "Staff"
    PARENT = "Parent"
    STUDENT = "Student"
    CUSTOM = "Custom"

    @property
    def level(self) -> int:
        """Hierarchy level (1 = SuperAdmin ... 7 = Student, CUSTOM_ROLE_LEVEL for custom)."""
        return _LEVELS[self]

    @property
    def is_system(self) -> bool:
        """True for the seven canonical system role kinds."""
        return self is not RoleKind.CUSTOM

    @classmethod
    def system_kinds(cls) -> list["RoleKind"]:
        """Return the seven system kinds, most privileged first."""
        return sorted((k for k in cls if k.is_system), key=lambda k: k.level)

    @classmethod
    def from_name(cls, name: str) -> "RoleKind":
        """Return the kind for a role name; CUSTOM for any non-canonical name."""
        return _BY_NAME.get(name, cls.CUSTOM)


_LEVELS: dict[RoleKind, int] = {
    RoleKind.SUPER_ADMIN: 1,
    RoleKind.TENANT_ADMIN: 2,
    RoleKind.PRINCIPAL: 3,
    RoleKind.TEACHER: 4,
    RoleKind.STAFF: 5,
    RoleKind.PARENT: 6,
    RoleKind.STUDENT: 7,
    RoleKind.CUSTOM: CUSTOM_ROLE_LEVEL,
}

_BY_NAME: dict[str, RoleKind] = {k.value: k for k in RoleKind if k.is_system}
