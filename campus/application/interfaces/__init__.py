"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from campus.infrastructure.
"""

from campus.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from campus.application.interfaces.services import ICacheService

__all__ = [
    "ICacheService",
    "IPermissionRepository",
    "IRolePermissionRepository",
    "IRoleRepository",
    "IUserRepository",
    "IUserRoleRepository",
]
