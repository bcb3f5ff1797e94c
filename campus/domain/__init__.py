"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure. Used by application and infrastructure
layers.
"""

from campus.domain.enums import CUSTOM_ROLE_LEVEL, RoleKind, TenantStatus
from campus.domain.exceptions import (
    AuthorizationException,
    CampusException,
    CannotDeleteSystemRoleException,
    CannotModifySystemRoleException,
    PermissionNotFoundException,
    RoleInUseException,
    RoleNameExistsException,
    RoleNameRequiredException,
    RoleNotFoundException,
    TenantMismatchException,
    UserNotFoundException,
    ValidationException,
)
from campus.domain.value_objects import (
    GLOBAL_SCOPE,
    GlobalScope,
    PermissionCode,
    RoleScope,
    TenantScope,
    scope_for,
)

__all__ = [
    # Enums
    "CUSTOM_ROLE_LEVEL",
    "RoleKind",
    "TenantStatus",
    # Exceptions
    "AuthorizationException",
    "CampusException",
    "CannotDeleteSystemRoleException",
    "CannotModifySystemRoleException",
    "PermissionNotFoundException",
    "RoleInUseException",
    "RoleNameExistsException",
    "RoleNameRequiredException",
    "RoleNotFoundException",
    "TenantMismatchException",
    "UserNotFoundException",
    "ValidationException",
    # Value objects
    "GLOBAL_SCOPE",
    "GlobalScope",
    "PermissionCode",
    "RoleScope",
    "TenantScope",
    "scope_for",
]
