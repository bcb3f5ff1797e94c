"""Unit tests for RoleService (lifecycle, permission sets, system role rules, seeding)."""

import logging

import pytest

from campus.application.dtos.role import RoleCreate, RoleListFilter
from campus.application.services.system_roles import SEED_VERSION, SYSTEM_ROLE_PERMISSIONS
from campus.domain.enums import RoleKind
from campus.domain.exceptions import (
    CannotDeleteSystemRoleException,
    CannotModifySystemRoleException,
    PermissionNotFoundException,
    RoleInUseException,
    RoleNameExistsException,
    RoleNameRequiredException,
    RoleNotFoundException,
    ValidationException,
)
from campus.domain.value_objects import GLOBAL_SCOPE
from campus.infrastructure.services import RbacServices
from tests.fakes import FakeCache, FakeRoleRepository, InMemoryStore, build_fake_services


async def _perm_id(rbac: RbacServices, code: str) -> str:
    return (await rbac.permissions.get_by_code(code)).id


async def test_create_tenant_role_with_permissions(seeded: RbacServices) -> None:
    read = await _perm_id(seeded, "students:read")
    role = await seeded.roles.create(
        RoleCreate(name="  Coach ", tenant_id="T1", description="Sports", permission_ids=[read])
    )
    assert role.name == "Coach"
    assert role.tenant_id == "T1"
    assert not role.is_system
    assert role.kind is RoleKind.CUSTOM
    assert role.permission_codes == {"students:read"}


@pytest.mark.parametrize("name", ["", "   "])
async def test_create_requires_name(seeded: RbacServices, name: str) -> None:
    with pytest.raises(RoleNameRequiredException):
        await seeded.roles.create(RoleCreate(name=name, tenant_id="T1"))


async def test_create_rejects_unknown_permissions(seeded: RbacServices) -> None:
    with pytest.raises(PermissionNotFoundException) as exc_info:
        await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1", permission_ids=["zz"]))
    assert exc_info.value.details["missing"] == ["zz"]
    assert await seeded.roles.list_roles(RoleListFilter(tenant_id="T1", include_system=False)) == []


async def test_create_duplicate_in_same_tenant(seeded: RbacServices) -> None:
    await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1"))
    with pytest.raises(RoleNameExistsException):
        await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1"))


async def test_same_name_in_other_tenant_is_allowed(seeded: RbacServices) -> None:
    a = await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1"))
    b = await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T2"))
    assert a.id != b.id


async def test_tenant_role_cannot_reuse_global_name(seeded: RbacServices) -> None:
    with pytest.raises(RoleNameExistsException):
        await seeded.roles.create(RoleCreate(name="Teacher", tenant_id="T1"))


async def test_system_role_cannot_have_tenant(seeded: RbacServices) -> None:
    with pytest.raises(ValidationException):
        await seeded.roles.create(RoleCreate(name="Auditor", tenant_id="T1", is_system=True))


async def test_get_by_id_and_name(seeded: RbacServices) -> None:
    coach = await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1"))
    assert (await seeded.roles.get_by_id(coach.id)).name == "Coach"
    assert (await seeded.roles.get_by_name("Coach", "T1")).id == coach.id
    # Tenant lookups also see global roles.
    assert (await seeded.roles.get_by_name("Teacher", "T1")).is_system
    with pytest.raises(RoleNotFoundException):
        await seeded.roles.get_by_name("Coach", "T2")
    with pytest.raises(RoleNotFoundException):
        await seeded.roles.get_by_name("Coach")
    with pytest.raises(RoleNotFoundException):
        await seeded.roles.get_by_id("missing")


async def test_list_orders_system_first_then_name(seeded: RbacServices) -> None:
    await seeded.roles.create(RoleCreate(name="Zeta", tenant_id="T1"))
    await seeded.roles.create(RoleCreate(name="Alpha", tenant_id="T1"))
    await seeded.roles.create(RoleCreate(name="Other", tenant_id="T2"))
    names = [r.name for r in await seeded.roles.list_by_tenant("T1")]
    assert names == [
        "Parent",
        "Principal",
        "Staff",
        "Student",
        "SuperAdmin",
        "Teacher",
        "TenantAdmin",
        "Alpha",
        "Zeta",
    ]


async def test_list_filters(seeded: RbacServices) -> None:
    await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1", description="Runs sports"))
    await seeded.roles.create(RoleCreate(name="Other", tenant_id="T2"))

    tenant_only = await seeded.roles.list_roles(RoleListFilter(tenant_id="T1", include_system=False))
    assert [r.name for r in tenant_only] == ["Coach"]

    every_tenant_role = await seeded.roles.list_roles(RoleListFilter(include_system=False))
    assert {r.name for r in every_tenant_role} == {"Coach", "Other"}

    everything = await seeded.roles.list_roles(RoleListFilter())
    assert len(everything) == 9

    by_description = await seeded.roles.list_roles(RoleListFilter(search="SPORTS"))
    assert [r.name for r in by_description] == ["Coach"]


async def test_update_name_and_description(seeded: RbacServices) -> None:
    coach = await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1"))
    updated = await seeded.roles.update(coach.id, name="Head Coach", description="Lead")
    assert (updated.name, updated.description) == ("Head Coach", "Lead")
    # Re-saving its own name is not a collision.
    assert (await seeded.roles.update(coach.id, name="Head Coach")).name == "Head Coach"


async def test_update_rejects_taken_and_empty_names(seeded: RbacServices) -> None:
    await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1"))
    librarian = await seeded.roles.create(RoleCreate(name="Librarian", tenant_id="T1"))
    with pytest.raises(RoleNameExistsException):
        await seeded.roles.update(librarian.id, name="Coach")
    with pytest.raises(RoleNameExistsException):
        await seeded.roles.update(librarian.id, name="Teacher")
    with pytest.raises(RoleNameRequiredException):
        await seeded.roles.update(librarian.id, name=" ")
    with pytest.raises(RoleNotFoundException):
        await seeded.roles.update("missing", description="x")


async def test_system_role_description_may_change(seeded: RbacServices) -> None:
    teacher = await seeded.roles.get_by_name("Teacher")
    updated = await seeded.roles.update(teacher.id, description="Classroom teacher")
    assert updated.description == "Classroom teacher"
    assert updated.permission_ids == teacher.permission_ids


async def test_delete_role(seeded: RbacServices) -> None:
    coach = await seeded.roles.create(
        RoleCreate(
            name="Coach",
            tenant_id="T1",
            permission_ids=[await _perm_id(seeded, "students:read")],
        )
    )
    await seeded.roles.delete(coach.id)
    with pytest.raises(RoleNotFoundException):
        await seeded.roles.get_by_id(coach.id)
    with pytest.raises(RoleNotFoundException):
        await seeded.roles.delete(coach.id)


async def test_delete_system_role_forbidden(seeded: RbacServices) -> None:
    teacher = await seeded.roles.get_by_name("Teacher")
    with pytest.raises(CannotDeleteSystemRoleException):
        await seeded.roles.delete(teacher.id)


async def test_delete_assigned_role_is_in_use(store: InMemoryStore, seeded: RbacServices) -> None:
    store.add_user("U1", "T1")
    coach = await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1"))
    await seeded.user_roles.assign_roles("U1", [coach.id])
    with pytest.raises(RoleInUseException) as exc_info:
        await seeded.roles.delete(coach.id)
    assert exc_info.value.details == {"role_id": coach.id, "assignment_count": 1}
    assert (await seeded.roles.get_by_id(coach.id)).name == "Coach"


async def test_permission_set_mutations(seeded: RbacServices) -> None:
    read = await _perm_id(seeded, "students:read")
    write = await _perm_id(seeded, "students:write")
    fin = await _perm_id(seeded, "finance:read")
    coach = await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1", permission_ids=[read]))

    role = await seeded.roles.assign_permissions(coach.id, [read, write])
    assert role.permission_codes == {"students:read", "students:write"}

    role = await seeded.roles.remove_permissions(coach.id, [write, "not-held"])
    assert role.permission_codes == {"students:read"}

    role = await seeded.roles.set_permissions(coach.id, [fin])
    assert role.permission_codes == {"finance:read"}

    role = await seeded.roles.set_permissions(coach.id, [])
    assert role.permissions == ()


async def test_assign_and_set_reject_unknown_permissions(seeded: RbacServices) -> None:
    read = await _perm_id(seeded, "students:read")
    coach = await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1", permission_ids=[read]))
    with pytest.raises(PermissionNotFoundException):
        await seeded.roles.assign_permissions(coach.id, [read, "nope"])
    with pytest.raises(PermissionNotFoundException):
        await seeded.roles.set_permissions(coach.id, ["nope"])
    assert (await seeded.roles.get_by_id(coach.id)).permission_codes == {"students:read"}


async def test_system_role_permissions_are_immutable(seeded: RbacServices) -> None:
    teacher = await seeded.roles.get_by_name("Teacher")
    fin = await _perm_id(seeded, "finance:write")
    for call in (
        seeded.roles.assign_permissions(teacher.id, [fin]),
        seeded.roles.remove_permissions(teacher.id, list(teacher.permission_ids)),
        seeded.roles.set_permissions(teacher.id, []),
    ):
        with pytest.raises(CannotModifySystemRoleException):
            await call
    assert (await seeded.roles.get_by_id(teacher.id)).permission_ids == teacher.permission_ids


async def test_system_role_check_runs_before_permission_resolution(seeded: RbacServices) -> None:
    teacher = await seeded.roles.get_by_name("Teacher")
    with pytest.raises(CannotModifySystemRoleException):
        await seeded.roles.assign_permissions(teacher.id, ["does-not-exist"])


async def test_seed_system_roles(store: InMemoryStore, rbac: RbacServices) -> None:
    await rbac.permissions.seed_default_permissions()
    assert await rbac.roles.seed_system_roles() == 7
    assert await rbac.roles.seed_system_roles() == 0
    system = [r for r in await rbac.roles.list_roles() if r.is_system]
    assert {r.name for r in system} == {k.value for k in RoleKind.system_kinds()}
    for role in system:
        assert role.tenant_id is None
        assert role.permission_codes == set(SYSTEM_ROLE_PERMISSIONS[role.kind])


async def test_seed_system_roles_skips_unknown_codes(store: InMemoryStore, rbac: RbacServices) -> None:
    store.add_permission("academics:read")
    assert await rbac.roles.seed_system_roles() == 7
    student = await rbac.roles.get_by_name("Student")
    assert student.permission_codes == {"academics:read"}


async def test_seed_leaves_existing_roles_untouched(seeded: RbacServices) -> None:
    teacher = await seeded.roles.get_by_name("Teacher")
    await seeded.roles.update(teacher.id, description="Edited")
    assert await seeded.roles.seed_system_roles() == 0
    assert (await seeded.roles.get_by_name("Teacher")).description == "Edited"


async def test_tenant_role_permission_change_invalidates_tenant_cache(
    store: InMemoryStore,
) -> None:
    cache = FakeCache()
    rbac = build_fake_services(store, cache)
    await rbac.permissions.seed_default_permissions()
    coach = await rbac.roles.create(RoleCreate(name="Coach", tenant_id="T1"))
    cache.data["permission:T1:U1"] = ["students:read"]
    cache.data["permission:T2:U9"] = ["students:read"]

    await rbac.roles.assign_permissions(coach.id, [await _perm_id(rbac, "finance:read")])

    assert "permission:T1:U1" not in cache.data
    assert "permission:T2:U9" in cache.data


@pytest.mark.parametrize("tenant_id", [None, "T1"])
async def test_custom_role_cannot_take_system_role_name(
    rbac: RbacServices, tenant_id: str | None
) -> None:
    # Nothing seeded yet: the name is reserved even though no role holds it.
    with pytest.raises(RoleNameExistsException):
        await rbac.roles.create(RoleCreate(name="Principal", tenant_id=tenant_id))


async def test_custom_role_cannot_be_renamed_to_system_role_name(seeded: RbacServices) -> None:
    coach = await seeded.roles.create(RoleCreate(name="Coach", tenant_id="T1"))
    with pytest.raises(RoleNameExistsException):
        await seeded.roles.update(coach.id, name="SuperAdmin")
    assert (await seeded.roles.get_by_id(coach.id)).name == "Coach"


async def test_system_role_keeps_its_name(seeded: RbacServices) -> None:
    super_admin = await seeded.roles.get_by_name("SuperAdmin")
    with pytest.raises(CannotModifySystemRoleException) as exc_info:
        await seeded.roles.update(super_admin.id, name="Root")
    assert exc_info.value.details["attribute"] == "name"
    # Re-saving the same name is allowed.
    assert (await seeded.roles.update(super_admin.id, name="SuperAdmin")).name == "SuperAdmin"
    # The freed-name escalation path stays closed.
    with pytest.raises(RoleNameExistsException):
        await seeded.roles.create(RoleCreate(name="SuperAdmin", tenant_id="T1"))


async def test_seed_skips_name_held_by_custom_global_role(
    store: InMemoryStore, rbac: RbacServices, caplog: pytest.LogCaptureFixture
) -> None:
    # A legacy row predating the name reservation.
    await FakeRoleRepository(store).create_role(
        GLOBAL_SCOPE, "Teacher", None, is_system=False, permission_ids=()
    )
    await rbac.permissions.seed_default_permissions()
    with caplog.at_level(logging.WARNING):
        assert await rbac.roles.seed_system_roles() == 6
    assert "Not seeding Teacher" in caplog.text
    teacher = await rbac.roles.get_by_name("Teacher")
    assert not teacher.is_system
    assert teacher.kind is RoleKind.CUSTOM
    assert teacher.permissions == ()


async def test_reseeding_after_rename_attempt_keeps_seven_system_roles(seeded: RbacServices) -> None:
    teacher = await seeded.roles.get_by_name("Teacher")
    with pytest.raises(CannotModifySystemRoleException):
        await seeded.roles.update(teacher.id, name="Educator")
    assert await seeded.roles.seed_system_roles() == 0
    system = [r for r in await seeded.roles.list_roles() if r.is_system]
    assert len(system) == 7


async def test_seed_logs_seed_version(rbac: RbacServices, caplog: pytest.LogCaptureFixture) -> None:
    await rbac.permissions.seed_default_permissions()
    with caplog.at_level(logging.INFO):
        await rbac.roles.seed_system_roles()
    assert f"Seeded 7 system roles (seed version {SEED_VERSION})" in caplog.text
