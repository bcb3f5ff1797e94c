"""Application services: permission registry, roles, user-role binding, authorization."""

from campus.application.services.authorization_service import AuthorizationService
from campus.application.services.permission_cache import (
    PermissionCache,
    permission_key,
    tenant_permission_pattern,
)
from campus.application.services.permission_service import PermissionService
from campus.application.services.role_hierarchy import RoleHierarchy
from campus.application.services.role_service import RoleService
from campus.application.services.user_role_service import UserRoleService

__all__ = [
    "AuthorizationService",
    "PermissionCache",
    "PermissionService",
    "RoleHierarchy",
    "RoleService",
    "UserRoleService",
    "permission_key",
    "tenant_permission_pattern",
]
