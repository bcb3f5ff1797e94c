"""Unit tests for PermissionService (resolve, catalog browsing, seeding)."""

import pytest

from campus.application.dtos.permission import PermissionListFilter
from campus.application.services.system_roles import DEFAULT_PERMISSIONS
from campus.domain.exceptions import PermissionNotFoundException
from campus.infrastructure.services import RbacServices
from tests.fakes import InMemoryStore


@pytest.fixture
def catalog(store: InMemoryStore) -> InMemoryStore:
    store.add_permission("students:read", "View Students")
    store.add_permission("students:write", "Manage Students")
    store.add_permission("finance:read", "View Finance")
    return store


async def test_resolve_returns_found_subset(catalog: InMemoryStore, rbac: RbacServices) -> None:
    found = await rbac.permissions.resolve(["perm-students-read", "nope"])
    assert [p.code for p in found] == ["students:read"]
    assert await rbac.permissions.resolve([]) == []


async def test_resolve_all_with_duplicates(catalog: InMemoryStore, rbac: RbacServices) -> None:
    found = await rbac.permissions.resolve_all(["perm-students-read", "perm-students-read"])
    assert len(found) == 1


async def test_resolve_all_reports_missing(catalog: InMemoryStore, rbac: RbacServices) -> None:
    with pytest.raises(PermissionNotFoundException) as exc_info:
        await rbac.permissions.resolve_all(["perm-students-read", "x1", "x2"])
    assert exc_info.value.details == {"missing": ["x1", "x2"]}


async def test_list_all_orders_by_module_then_code(
    catalog: InMemoryStore, rbac: RbacServices
) -> None:
    codes = [p.code for p in await rbac.permissions.list_all()]
    assert codes == ["finance:read", "students:read", "students:write"]


async def test_list_all_filters(catalog: InMemoryStore, rbac: RbacServices) -> None:
    by_module = await rbac.permissions.list_all(PermissionListFilter(module="students"))
    assert {p.code for p in by_module} == {"students:read", "students:write"}
    by_name = await rbac.permissions.list_all(PermissionListFilter(search="MANAGE"))
    assert [p.code for p in by_name] == ["students:write"]
    by_code = await rbac.permissions.list_all(PermissionListFilter(search="finance:"))
    assert [p.code for p in by_code] == ["finance:read"]


async def test_get_by_code(catalog: InMemoryStore, rbac: RbacServices) -> None:
    assert (await rbac.permissions.get_by_code("finance:read")).id == "perm-finance-read"
    with pytest.raises(PermissionNotFoundException) as exc_info:
        await rbac.permissions.get_by_code("finance:delete")
    assert exc_info.value.details == {"missing": ["finance:delete"]}


async def test_get_by_codes_partial(catalog: InMemoryStore, rbac: RbacServices) -> None:
    found = await rbac.permissions.get_by_codes(["finance:read", "finance:delete"])
    assert [p.code for p in found] == ["finance:read"]


async def test_list_modules(catalog: InMemoryStore, rbac: RbacServices) -> None:
    assert await rbac.permissions.list_modules() == ["finance", "students"]


async def test_seed_default_permissions_is_idempotent(
    store: InMemoryStore, rbac: RbacServices
) -> None:
    first = await rbac.permissions.seed_default_permissions()
    assert first == len(DEFAULT_PERMISSIONS)
    assert await rbac.permissions.seed_default_permissions() == 0
    assert len(store.permissions) == len(DEFAULT_PERMISSIONS)
    perm = await rbac.permissions.get_by_code("users:assign_roles")
    assert perm.module == "users"


async def test_seed_skips_existing_codes(catalog: InMemoryStore, rbac: RbacServices) -> None:
    created = await rbac.permissions.seed_default_permissions()
    assert created == len(DEFAULT_PERMISSIONS) - 3
