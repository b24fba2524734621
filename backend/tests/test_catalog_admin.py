import pytest

from classroom_access.auth.permissions import ALLOWED_PERMISSIONS, Permission
from classroom_access.crud.permission import PermissionRepository
from classroom_access.crud.role import RoleRepository
from classroom_access.crud.user import UserRepository
from classroom_access.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidInputError,
    NotFoundError,
)
from classroom_access.services.access.authorization_gate import AuthorizationGate
from classroom_access.services.access.catalog_admin import CatalogService
from classroom_access.services.access.catalog_seeder import (
    DEFAULT_ROLES,
    RoleSeed,
    seed_catalog,
    validate_catalog,
)
from classroom_access.services.access.user_admin import (
    ProvisioningDefaults,
    UserAdminService,
    load_provisioning_defaults,
)
from classroom_access.services.access.user_context import UserContextLoader
from tests.access_helpers import create_database


def test_default_catalog_is_consistent() -> None:
    validate_catalog()


def test_catalog_with_unregistered_permission_is_rejected() -> None:
    broken = (RoleSeed(name="Intern", privilege_level=1, description="", permissions=("MAKE_COFFEE",)),)

    with pytest.raises(ValueError, match="non-existent permission 'MAKE_COFFEE'"):
        validate_catalog(broken)


def test_catalog_with_two_default_roles_is_rejected() -> None:
    roles = (
        RoleSeed(name="A", privilege_level=1, description="", is_default=True),
        RoleSeed(name="B", privilege_level=1, description="", is_default=True),
    )

    with pytest.raises(ValueError, match="At most one role"):
        validate_catalog(roles)


def test_professor_can_administer_access() -> None:
    professor = next(role for role in DEFAULT_ROLES if role.name == "Professor")

    assert {"ASSIGN_ROLES", "ASSIGN_GROUPS", "PROVISION_USERS"} <= set(professor.permissions)


@pytest.mark.anyio
async def test_seeding_is_idempotent(sqlite_url: str) -> None:
    engine, factory = await create_database(sqlite_url)
    try:
        async with factory() as session:
            first = await seed_catalog(session)
        async with factory() as session:
            second = await seed_catalog(session)

        assert first.permissions_created == len(ALLOWED_PERMISSIONS)
        assert first.roles_created == len(DEFAULT_ROLES)
        assert first.groups_created == 1
        assert second.permissions_created == 0
        assert second.roles_created == 0
        assert second.links_created == 0

        async with factory() as session:
            roles = await RoleRepository(session).list_all()
            assert [role.name for role in roles][:3] == ["Guest", "Group Leader", "Student"]
            tutor = await RoleRepository(session).get_by_name("Tutor")
            assert "MANAGE_LAB_QUEUE" in {permission.name for permission in tutor.permissions}
    finally:
        await engine.dispose()


@pytest.mark.anyio
async def test_provisioning_uses_injected_defaults(sqlite_url: str) -> None:
    engine, factory = await create_database(sqlite_url)
    try:
        async with factory() as session:
            await seed_catalog(session)
        async with factory() as session:
            defaults = await load_provisioning_defaults(session)

        assert defaults is not None

        async with factory() as session:
            record = await UserAdminService(session).provision_user(
                "bob@example.edu", "Bob", defaults
            )
            assert record.group_name == "Unassigned"
            roles = await RoleRepository(session).get_roles_for_user(record.id)
            assert [role.name for role in roles] == ["Student"]

        async with factory() as session:
            with pytest.raises(ConflictError):
                await UserAdminService(session).provision_user("bob@example.edu", "Bob", defaults)
    finally:
        await engine.dispose()


@pytest.mark.anyio
async def test_provisioning_without_defaults_fails(sqlite_url: str) -> None:
    engine, factory = await create_database(sqlite_url)
    try:
        async with factory() as session:
            assert await load_provisioning_defaults(session) is None
            with pytest.raises(InternalError):
                await UserAdminService(session).provision_user("c@example.edu", "C", None)
            assert await UserRepository(session).get_by_email("c@example.edu") is None
    finally:
        await engine.dispose()


@pytest.mark.anyio
async def test_group_assignment(sqlite_url: str) -> None:
    engine, factory = await create_database(sqlite_url)
    try:
        async with factory() as session:
            await seed_catalog(session)
            defaults = await load_provisioning_defaults(session)
            user = await UserAdminService(session).provision_user("d@example.edu", "D", defaults)
            group = await CatalogService(session).create_group("Team Rocket")

        async with factory() as session:
            service = UserAdminService(session)
            moved = await service.assign_group(user.id, group.id)
            assert moved.group_id == group.id
            assert moved.group_name == "Team Rocket"

            cleared = await service.assign_group(user.id, None)
            assert cleared.group_id is None
            assert cleared.group_name is None

            with pytest.raises(InvalidInputError, match="group_id does not exist"):
                await service.assign_group(user.id, 9999)
            with pytest.raises(NotFoundError):
                await service.assign_group(9999, group.id)
    finally:
        await engine.dispose()


@pytest.mark.anyio
async def test_duplicate_names_conflict(sqlite_url: str) -> None:
    engine, factory = await create_database(sqlite_url)
    try:
        async with factory() as session:
            service = CatalogService(session)
            await service.create_group("Alpha")
            role = await service.create_role("Mentor", 3, description="Peer mentor")

            assert role.permissions == []
            with pytest.raises(ConflictError):
                await service.create_group("Alpha")
            with pytest.raises(ConflictError):
                await service.create_role("Mentor", 4)
    finally:
        await engine.dispose()


@pytest.mark.anyio
async def test_role_permissions_are_replaced(sqlite_url: str) -> None:
    engine, factory = await create_database(sqlite_url)
    try:
        async with factory() as session:
            permissions = PermissionRepository(session)
            await permissions.create(Permission.VIEW_LOGS.value)
            await permissions.create(Permission.MANAGE_LAB_QUEUE.value)
            await session.commit()
            role = await CatalogService(session).create_role("Mentor", 3)

        async with factory() as session:
            service = CatalogService(session)

            updated = await service.set_role_permissions(role.id, ["VIEW_LOGS", "MANAGE_LAB_QUEUE"])
            assert [p.name for p in updated.permissions] == ["MANAGE_LAB_QUEUE", "VIEW_LOGS"]

            updated = await service.set_role_permissions(role.id, ["VIEW_LOGS"])
            assert [p.name for p in updated.permissions] == ["VIEW_LOGS"]

            with pytest.raises(InvalidInputError) as exc:
                await service.set_role_permissions(role.id, ["VIEW_LOGS", "MAKE_COFFEE"])
            assert exc.value.details == {"unknown_permissions": ["MAKE_COFFEE"]}

            with pytest.raises(NotFoundError) as exc:
                await service.set_role_permissions(role.id, ["PROVISION_USERS"])
            assert exc.value.details == {"missing_permissions": ["PROVISION_USERS"]}

            with pytest.raises(NotFoundError):
                await service.set_role_permissions(9999, ["VIEW_LOGS"])

        async with factory() as session:
            stored = await RoleRepository(session).get_by_id(role.id)
            assert [p.name for p in stored.permissions] == ["VIEW_LOGS"]
    finally:
        await engine.dispose()


def test_provisioning_defaults_are_immutable() -> None:
    defaults = ProvisioningDefaults(group_id=1, role_id=2)

    with pytest.raises(AttributeError):
        defaults.group_id = 5  # type: ignore[misc]


@pytest.mark.anyio
async def test_deactivated_user_loses_access(sqlite_url: str) -> None:
    engine, factory = await create_database(sqlite_url)
    try:
        async with factory() as session:
            await seed_catalog(session)
            defaults = await load_provisioning_defaults(session)
            record = await UserAdminService(session).provision_user("prof@example.edu", "Prof", defaults)
            professor = await RoleRepository(session).get_by_name("Professor")
            await RoleRepository(session).replace_roles_for_user(record.id, [professor.id])

        gate = AuthorizationGate("VIEW_LOGS")
        async with factory() as session:
            profile = await gate.check(record.id, RoleRepository(session))
            assert profile.effective_role_name == "Professor"

            user = await UserRepository(session).get_by_id(record.id)
            user.is_active = False
            await session.commit()

        async with factory() as session:
            assert await RoleRepository(session).get_roles_for_user(record.id) == []
            with pytest.raises(ForbiddenError):
                await gate.check(record.id, RoleRepository(session))
            with pytest.raises(NotFoundError):
                await UserContextLoader(UserRepository(session), RoleRepository(session)).load(record.id)
            with pytest.raises(NotFoundError):
                await UserAdminService(session).assign_group(record.id, defaults.group_id)
    finally:
        await engine.dispose()
