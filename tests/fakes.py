"""In-memory implementations of the repository and cache protocols for unit tests.

They mirror the database constraints the services rely on: role name
uniqueness per scope, RESTRICT on deleting an assigned role, ordering of
role and permission listings.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Collection
from dataclasses import dataclass, field, replace
from typing import Any

from campus.application.dtos.permission import PermissionListFilter, PermissionResult
from campus.application.dtos.role import RoleListFilter, RoleResult
from campus.application.dtos.user import UserResult
from campus.application.services import (
    AuthorizationService,
    PermissionCache,
    PermissionService,
    RoleService,
    UserRoleService,
)
from campus.domain.exceptions import RoleInUseException, RoleNameExistsException
from campus.domain.value_objects import GlobalScope, RoleScope
from campus.infrastructure.services import RbacServices


@dataclass
class InMemoryStore:
    users: dict[str, UserResult] = field(default_factory=dict)
    permissions: dict[str, PermissionResult] = field(default_factory=dict)
    roles: dict[str, RoleResult] = field(default_factory=dict)
    role_permissions: dict[str, set[str]] = field(default_factory=dict)
    # user_id -> {role_id: tenant_id}
    user_roles: dict[str, dict[str, str]] = field(default_factory=dict)
    share_locked: list[frozenset[str]] = field(default_factory=list)
    _seq: int = 0

    def next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}-{self._seq}"

    def add_user(self, user_id: str, tenant_id: str) -> UserResult:
        user = UserResult(
            id=user_id,
            tenant_id=tenant_id,
            username=user_id.lower(),
            email=f"{user_id.lower()}@example.com",
            is_active=True,
        )
        self.users[user_id] = user
        return user

    def add_permission(self, code: str, name: str | None = None) -> PermissionResult:
        permission = PermissionResult(
            id=f"perm-{code.replace(':', '-')}",
            code=code,
            name=name or code,
            module=code.split(":", 1)[0],
        )
        self.permissions[permission.id] = permission
        return permission

    def role(self, role_id: str) -> RoleResult:
        row = self.roles[role_id]
        permissions = sorted(
            (self.permissions[pid] for pid in self.role_permissions.get(role_id, set())),
            key=lambda p: p.code,
        )
        return replace(row, permissions=tuple(permissions))


def _role_sort_key(role: RoleResult) -> tuple[bool, str]:
    return (not role.is_system, role.name)


def _perm_sort_key(p: PermissionResult) -> tuple[str, str]:
    return (p.module, p.code)


class FakePermissionRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_by_ids(self, permission_ids: Collection[str]) -> list[PermissionResult]:
        found = [self.store.permissions[i] for i in permission_ids if i in self.store.permissions]
        return sorted(found, key=_perm_sort_key)

    async def get_by_code(self, code: str) -> PermissionResult | None:
        return next((p for p in self.store.permissions.values() if p.code == code), None)

    async def get_by_codes(self, codes: Collection[str]) -> list[PermissionResult]:
        wanted = set(codes)
        found = [p for p in self.store.permissions.values() if p.code in wanted]
        return sorted(found, key=_perm_sort_key)

    async def list_permissions(self, flt: PermissionListFilter) -> list[PermissionResult]:
        items = list(self.store.permissions.values())
        if flt.module:
            items = [p for p in items if p.module == flt.module]
        if flt.search:
            needle = flt.search.lower()
            items = [p for p in items if needle in p.code.lower() or needle in p.name.lower()]
        return sorted(items, key=_perm_sort_key)

    async def list_modules(self) -> list[str]:
        return sorted({p.module for p in self.store.permissions.values()})

    async def create_permission(
        self, code: str, name: str, module: str, description: str | None = None
    ) -> PermissionResult:
        permission = PermissionResult(
            id=self.store.next_id("perm"),
            code=code,
            name=name,
            module=module,
            description=description,
        )
        self.store.permissions[permission.id] = permission
        return permission


class FakeRoleRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def _name_taken(self, name: str, tenant_id: str | None, exclude_id: str | None) -> bool:
        return any(
            r.name == name and r.tenant_id == tenant_id and r.id != exclude_id
            for r in self.store.roles.values()
        )

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        return self.store.role(role_id) if role_id in self.store.roles else None

    async def get_by_ids(
        self, role_ids: Collection[str], *, for_share: bool = False
    ) -> list[RoleResult]:
        if for_share:
            self.store.share_locked.append(frozenset(role_ids))
        found = [self.store.role(i) for i in role_ids if i in self.store.roles]
        return sorted(found, key=lambda r: r.name)

    async def find_by_name(
        self, name: str, scope: RoleScope, *, exclude_id: str | None = None
    ) -> RoleResult | None:
        candidates = [
            r
            for r in self.store.roles.values()
            if r.name == name
            and r.id != exclude_id
            and (r.tenant_id is None or r.tenant_id == scope.tenant_id)
        ]
        candidates.sort(key=lambda r: r.tenant_id is None)
        return self.store.role(candidates[0].id) if candidates else None

    async def get_system_role_by_name(self, name: str) -> RoleResult | None:
        for r in self.store.roles.values():
            if r.name == name and r.tenant_id is None and r.is_system:
                return self.store.role(r.id)
        return None

    async def list_roles(self, flt: RoleListFilter) -> list[RoleResult]:
        items = list(self.store.roles.values())
        if flt.tenant_id is not None:
            items = [
                r
                for r in items
                if r.tenant_id == flt.tenant_id or (flt.include_system and r.tenant_id is None)
            ]
        elif not flt.include_system:
            items = [r for r in items if r.tenant_id is not None]
        if flt.search:
            needle = flt.search.lower()
            items = [
                r
                for r in items
                if needle in r.name.lower() or needle in (r.description or "").lower()
            ]
        return [self.store.role(r.id) for r in sorted(items, key=_role_sort_key)]

    async def create_role(
        self,
        scope: RoleScope,
        name: str,
        description: str | None,
        *,
        is_system: bool,
        permission_ids: Collection[str],
    ) -> RoleResult:
        if self._name_taken(name, scope.tenant_id, None):
            raise RoleNameExistsException(name, scope.tenant_id)
        role = RoleResult(
            id=self.store.next_id("role"),
            tenant_id=None if isinstance(scope, GlobalScope) else scope.tenant_id,
            name=name,
            description=description,
            is_system=is_system,
        )
        self.store.roles[role.id] = role
        self.store.role_permissions[role.id] = set(permission_ids)
        return self.store.role(role.id)

    async def update_role(
        self, role_id: str, *, name: str | None = None, description: str | None = None
    ) -> RoleResult | None:
        row = self.store.roles.get(role_id)
        if row is None:
            return None
        if name is not None and self._name_taken(name, row.tenant_id, role_id):
            raise RoleNameExistsException(name, row.tenant_id)
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if description is not None:
            changes["description"] = description
        self.store.roles[role_id] = replace(row, **changes)
        return self.store.role(role_id)

    async def delete_role(self, role_id: str) -> None:
        if any(role_id in held for held in self.store.user_roles.values()):
            raise RoleInUseException(role_id)
        self.store.role_permissions.pop(role_id, None)
        self.store.roles.pop(role_id, None)


class FakeRolePermissionRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def append_association(self, role_id: str, permission_ids: Collection[str]) -> None:
        self.store.role_permissions.setdefault(role_id, set()).update(permission_ids)

    async def replace_association(self, role_id: str, permission_ids: Collection[str]) -> None:
        self.store.role_permissions[role_id] = set(permission_ids)

    async def remove_association(self, role_id: str, permission_ids: Collection[str]) -> None:
        self.store.role_permissions.get(role_id, set()).difference_update(permission_ids)


class FakeUserRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_by_id(self, user_id: str) -> UserResult | None:
        return self.store.users.get(user_id)


class FakeUserRoleRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_roles_for_user(self, user_id: str) -> list[RoleResult]:
        held = self.store.user_roles.get(user_id, {})
        roles = [self.store.role(rid) for rid in held if rid in self.store.roles]
        return sorted(roles, key=_role_sort_key)

    async def append_association(
        self, user_id: str, tenant_id: str, role_ids: Collection[str]
    ) -> None:
        held = self.store.user_roles.setdefault(user_id, {})
        for rid in role_ids:
            held.setdefault(rid, tenant_id)

    async def replace_association(
        self, user_id: str, tenant_id: str, role_ids: Collection[str]
    ) -> None:
        self.store.user_roles[user_id] = {rid: tenant_id for rid in role_ids}

    async def remove_association(self, user_id: str, role_ids: Collection[str]) -> None:
        held = self.store.user_roles.get(user_id, {})
        for rid in role_ids:
            held.pop(rid, None)

    async def count_by_role(self, role_id: str) -> int:
        return sum(1 for held in self.store.user_roles.values() if role_id in held)

    async def get_users_with_role(self, role_id: str) -> list[UserResult]:
        users = [
            self.store.users[uid]
            for uid, held in self.store.user_roles.items()
            if role_id in held and uid in self.store.users
        ]
        return sorted(users, key=lambda u: u.username)


class FakeCache:
    """Dict-backed ICacheService. available=False simulates a Redis outage."""

    def __init__(self, *, available: bool = True) -> None:
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}
        self.available = available
        self.gets = 0

    def is_available(self) -> bool:
        return self.available

    async def get(self, key: str) -> Any | None:
        self.gets += 1
        return self.data.get(key)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        matched = [k for k in self.data if fnmatch.fnmatchcase(k, pattern)]
        for key in matched:
            del self.data[key]
        return len(matched)


def build_fake_services(store: InMemoryStore, cache: FakeCache | None = None) -> RbacServices:
    """Wire the RBAC services onto in-memory repositories (same graph as build_rbac_services)."""
    permission_cache = PermissionCache(cache, ttl=300)
    role_repo = FakeRoleRepository(store)
    user_role_repo = FakeUserRoleRepository(store)
    permissions = PermissionService(FakePermissionRepository(store))
    roles = RoleService(
        role_repo=role_repo,
        role_permission_repo=FakeRolePermissionRepository(store),
        user_role_repo=user_role_repo,
        permission_service=permissions,
        permission_cache=permission_cache,
    )
    user_roles = UserRoleService(
        user_repo=FakeUserRepository(store),
        role_repo=role_repo,
        user_role_repo=user_role_repo,
        permission_cache=permission_cache,
    )
    authorization = AuthorizationService(
        user_role_service=user_roles,
        role_repo=role_repo,
        permission_cache=permission_cache,
    )
    return RbacServices(
        permissions=permissions,
        roles=roles,
        user_roles=user_roles,
        authorization=authorization,
    )
