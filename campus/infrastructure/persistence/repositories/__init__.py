"""Persistence repositories. Re-exports for dependency injection."""

from campus.infrastructure.persistence.repositories.base import BaseRepository
from campus.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from campus.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from campus.infrastructure.persistence.repositories.role_repo import RoleRepository
from campus.infrastructure.persistence.repositories.user_repo import UserRepository
from campus.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)

__all__ = [
    "BaseRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
]
