"""DTOs for permission use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model (result of resolve, list_all, get_by_code, etc.)."""

    id: str
    code: str
    name: str
    module: str
    description: str | None = None


@dataclass(frozen=True)
class PermissionListFilter:
    """Filter for listing the catalog. search matches code or name, case-insensitive."""

    module: str | None = None
    search: str | None = None


@dataclass(frozen=True)
class PermissionSeed:
    """One entry of the default permission catalog."""

    code: str
    name: str
    description: str
