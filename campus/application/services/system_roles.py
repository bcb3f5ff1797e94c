"""Versioned seed data: default permission catalog and the seven system roles.

Bump SEED_VERSION whenever a code is added to a role or the catalog. Seeding
never edits roles that already exist, so changes only reach fresh databases
unless a migration backfills them.
"""

from __future__ import annotations

from campus.application.dtos.permission import PermissionSeed
from campus.domain.enums import RoleKind

SEED_VERSION = 1


def _crud(module: str, label: str, *, delete: bool = True) -> list[PermissionSeed]:
    seeds = [
        PermissionSeed(f"{module}:read", f"View {label}", f"View {label.lower()} records"),
        PermissionSeed(
            f"{module}:write", f"Manage {label}", f"Create and update {label.lower()} records"
        ),
    ]
    if delete:
        seeds.append(
            PermissionSeed(f"{module}:delete", f"Delete {label}", f"Delete {label.lower()} records")
        )
    return seeds


DEFAULT_PERMISSIONS: list[PermissionSeed] = [
    *_crud("users", "Users"),
    PermissionSeed("users:assign_roles", "Assign Roles", "Assign roles to users"),
    *_crud("students", "Students"),
    PermissionSeed("students:enroll", "Enroll Students", "Enroll students in classes and programs"),
    *_crud("staff", "Staff"),
    *_crud("finance", "Finance"),
    PermissionSeed("finance:collect", "Collect Payments", "Collect fees and process payments"),
    *_crud("academics", "Academics"),
    PermissionSeed("academics:grades", "Manage Grades", "Enter and modify student grades"),
    PermissionSeed("attendance:read", "View Attendance", "View attendance records"),
    PermissionSeed("attendance:write", "Mark Attendance", "Mark and update attendance"),
    PermissionSeed("attendance:reports", "Attendance Reports", "Generate attendance reports"),
    *_crud("roles", "Roles"),
    PermissionSeed("settings:read", "View Settings", "View system settings"),
    PermissionSeed("settings:write", "Manage Settings", "Update system settings"),
    PermissionSeed("reports:read", "View Reports", "View reports"),
    PermissionSeed("reports:write", "Generate Reports", "Generate reports"),
    PermissionSeed("reports:export", "Export Reports", "Export reports to various formats"),
    PermissionSeed("audit:read", "View Audit Logs", "View system audit logs"),
    PermissionSeed("branches:read", "View Branches", "View branch information"),
    PermissionSeed("branches:create", "Create Branches", "Create new branches"),
    PermissionSeed("branches:update", "Update Branches", "Update branch information"),
    PermissionSeed("branches:delete", "Delete Branches", "Delete branches"),
]

_ALL_CODES: tuple[str, ...] = tuple(p.code for p in DEFAULT_PERMISSIONS)

SYSTEM_ROLE_PERMISSIONS: dict[RoleKind, tuple[str, ...]] = {
    RoleKind.SUPER_ADMIN: _ALL_CODES,
    RoleKind.TENANT_ADMIN: tuple(
        c for c in _ALL_CODES if c not in {"audit:read", "roles:delete"}
    ),
    RoleKind.PRINCIPAL: (
        "users:read", "users:write", "users:assign_roles",
        "students:read", "students:write", "students:enroll",
        "staff:read", "staff:write",
        "finance:read", "finance:write",
        "academics:read", "academics:write", "academics:grades",
        "attendance:read", "attendance:write", "attendance:reports",
        "roles:read",
        "reports:read", "reports:write", "reports:export",
        "settings:read",
        "branches:read", "branches:update",
    ),
    RoleKind.TEACHER: (
        "students:read",
        "academics:read", "academics:write", "academics:grades",
        "attendance:read", "attendance:write",
        "reports:read",
        "branches:read",
    ),
    RoleKind.STAFF: (
        "students:read",
        "staff:read",
        "academics:read",
        "attendance:read",
        "branches:read",
    ),
    RoleKind.PARENT: (
        "students:read",
        "academics:read",
        "finance:read",
        "attendance:read",
        "branches:read",
    ),
    RoleKind.STUDENT: (
        "academics:read",
        "attendance:read",
        "branches:read",
    ),
}

SYSTEM_ROLE_DESCRIPTIONS: dict[RoleKind, str] = {
    RoleKind.SUPER_ADMIN: "Platform administrator with access to every tenant and feature",
    RoleKind.TENANT_ADMIN: "School administrator with full access to tenant features",
    RoleKind.PRINCIPAL: "Principal with access to most academic and administrative features",
    RoleKind.TEACHER: "Teacher with access to academics, grades and attendance",
    RoleKind.STAFF: "Non-teaching staff with read access to school records",
    RoleKind.PARENT: "Parent with read-only access to their children's information",
    RoleKind.STUDENT: "Student with access to their own academic information",
}
