"""Domain exceptions for the campus RBAC core.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Callers (an
HTTP layer, a CLI) map them to responses using error_code and details.
Unexpected storage failures are not wrapped: SQLAlchemy errors propagate
unchanged so they stay distinct from the named business errors.
"""

from collections.abc import Iterable
from typing import Any


class CampusException(Exception):
    """Base exception for all campus application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. role_id, missing ids).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(CampusException):
    """Raised when input validation fails (e.g. malformed permission code)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthorizationException(CampusException):
    """Raised when the user lacks the permission or delegation right for an operation."""

    def __init__(
        self,
        permission: str | None = None,
        message: str = "Permission denied",
        **details_extra: Any,
    ) -> None:
        """Initialize with optional permission code and message.

        Args:
            permission: Permission code that was required (e.g. 'roles:write').
            message: Human-readable message; default used when permission omitted.
            **details_extra: Optional keys merged into details (e.g. role_id).
        """
        if permission:
            message = f"Permission denied: {permission}"
        details: dict[str, Any] = dict(details_extra)
        if permission:
            details["permission"] = permission
        super().__init__(message, "PERMISSION_DENIED", details)


def _sorted_ids(ids: Iterable[str]) -> list[str]:
    return sorted(set(ids))


class RoleNotFoundException(CampusException):
    """Raised when one or more requested roles do not exist (or are not visible)."""

    def __init__(self, role_id: str | None = None, *, missing_ids: Iterable[str] = ()) -> None:
        """Initialize with a single role id, or the ids that failed to resolve.

        Args:
            role_id: The role ID (or name) that was not found.
            missing_ids: IDs from a batch request that did not resolve.
        """
        missing = _sorted_ids(missing_ids)
        details: dict[str, Any] = {}
        if role_id is not None:
            details["role_id"] = role_id
            message = f"Role not found: {role_id}"
        else:
            message = "One or more roles not found"
        if missing:
            details["missing_ids"] = missing
        super().__init__(message, "ROLE_NOT_FOUND", details)


class RoleNameRequiredException(CampusException):
    """Raised when a role is created or renamed with an empty name."""

    def __init__(self) -> None:
        super().__init__("Role name is required", "ROLE_NAME_REQUIRED", {"field": "name"})


class RoleNameExistsException(CampusException):
    """Raised when a role name is already taken in the same scope."""

    def __init__(self, name: str, tenant_id: str | None = None) -> None:
        """Initialize with the duplicate name and the scope it collided in.

        Args:
            name: The role name that already exists.
            tenant_id: Tenant scope of the attempted role; None for the global scope.
        """
        super().__init__(
            f"Role with name '{name}' already exists",
            "ROLE_NAME_EXISTS",
            {"name": name, "tenant_id": tenant_id},
        )


class PermissionNotFoundException(CampusException):
    """Raised when permission ids or a permission code do not resolve."""

    def __init__(self, missing: Iterable[str] = ()) -> None:
        """Initialize with the ids (or codes) that did not resolve.

        Args:
            missing: Permission IDs or codes that were not found.
        """
        missing_list = _sorted_ids(missing)
        message = "One or more permissions not found"
        if len(missing_list) == 1:
            message = f"Permission not found: {missing_list[0]}"
        super().__init__(message, "PERMISSION_NOT_FOUND", {"missing": missing_list})


class CannotDeleteSystemRoleException(CampusException):
    """Raised when deleting a system role."""

    def __init__(self, role_id: str, name: str) -> None:
        super().__init__(
            f"System role '{name}' cannot be deleted",
            "CANNOT_DELETE_SYSTEM_ROLE",
            {"role_id": role_id, "name": name},
        )


class CannotModifySystemRoleException(CampusException):
    """Raised when changing the permission set or the name of a system role."""

    def __init__(self, role_id: str, name: str, attribute: str = "permissions") -> None:
        super().__init__(
            f"The {attribute} of system role '{name}' cannot be modified",
            "CANNOT_MODIFY_SYSTEM_ROLE",
            {"role_id": role_id, "name": name, "attribute": attribute},
        )


class RoleInUseException(CampusException):
    """Raised when deleting a role that is still assigned to users."""

    def __init__(self, role_id: str, assignment_count: int | None = None) -> None:
        """Initialize with the role and, when known, how many users hold it.

        Args:
            role_id: Role that is still referenced by user_role rows.
            assignment_count: Number of assignments found, if counted.
        """
        details: dict[str, Any] = {"role_id": role_id}
        if assignment_count is not None:
            details["assignment_count"] = assignment_count
        super().__init__(
            "Role is assigned to users and cannot be deleted",
            "ROLE_IN_USE",
            details,
        )


class UserNotFoundException(CampusException):
    """Raised when the target user does not exist (or is not visible to the tenant)."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            f"User not found: {user_id}",
            "USER_NOT_FOUND",
            {"user_id": user_id},
        )


class TenantMismatchException(CampusException):
    """Raised when assigning tenant roles that belong to a different tenant than the user."""

    def __init__(self, user_id: str, user_tenant_id: str, role_ids: Iterable[str]) -> None:
        """Initialize with the user, their tenant, and the offending roles.

        Args:
            user_id: User the roles were being assigned to.
            user_tenant_id: Tenant the user belongs to.
            role_ids: Tenant roles whose tenant differs from the user's.
        """
        super().__init__(
            "Role does not belong to the user's tenant",
            "TENANT_MISMATCH",
            {
                "user_id": user_id,
                "tenant_id": user_tenant_id,
                "role_ids": _sorted_ids(role_ids),
            },
        )


class SqlNotConfiguredException(CampusException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
