"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, get_users_with_role). No credentials."""

    id: str
    tenant_id: str
    username: str
    email: str
    is_active: bool
