"""Application DTOs (no ORM dependency)."""

from campus.application.dtos.permission import (
    PermissionListFilter,
    PermissionResult,
    PermissionSeed,
)
from campus.application.dtos.role import RoleCreate, RoleListFilter, RoleResult
from campus.application.dtos.user import UserResult

__all__ = [
    "PermissionListFilter",
    "PermissionResult",
    "PermissionSeed",
    "RoleCreate",
    "RoleListFilter",
    "RoleResult",
    "UserResult",
]
