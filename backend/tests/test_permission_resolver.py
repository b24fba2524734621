import logging

import pytest

from classroom_access.auth.permission_resolver import resolve_permissions
from classroom_access.domain.roles import RoleGrant
from tests.access_helpers import GROUP_LEADER, GUEST, PROFESSOR, STUDENT, TA, TUTOR


def test_empty_roles_resolve_to_guest_without_permissions() -> None:
    result = resolve_permissions([])

    assert result.effective_role_name == "Guest"
    assert result.permissions == frozenset()


@pytest.mark.parametrize(
    ("role", "expected_name"),
    [(GUEST, "Guest"), (STUDENT, "Student"), (PROFESSOR, "Professor")],
)
def test_single_role_keeps_its_own_permissions(role: RoleGrant, expected_name: str) -> None:
    result = resolve_permissions([role])

    assert result.effective_role_name == expected_name
    assert result.permissions == role.permissions


def test_roles_at_the_same_lowest_level_stack() -> None:
    result = resolve_permissions([STUDENT, GROUP_LEADER])

    assert result.effective_role_name == "Student, Group Leader"
    assert result.permissions == STUDENT.permissions | GROUP_LEADER.permissions
    assert result.has("GROUP_MANAGE_ATTENDANCE")
    assert result.has("USER_SUBMIT_JOURNAL")


def test_effective_name_follows_input_order() -> None:
    result = resolve_permissions([GROUP_LEADER, STUDENT])

    assert result.effective_role_name == "Group Leader, Student"


def test_level_zero_discards_level_one() -> None:
    result = resolve_permissions([GUEST, STUDENT])

    assert result.effective_role_name == "Guest"
    assert result.permissions == GUEST.permissions


def test_least_privileged_of_two_privileged_roles_wins() -> None:
    result = resolve_permissions([PROFESSOR, TUTOR])

    assert result.effective_role_name == "Tutor"
    assert result.permissions == TUTOR.permissions
    assert result.has("MANAGE_LAB_QUEUE")
    assert not result.has("PROVISION_USERS")


def test_unprivileged_role_overrides_privileged_role() -> None:
    result = resolve_permissions([STUDENT, PROFESSOR])

    assert result.effective_role_name == "Student"
    assert result.permissions == STUDENT.permissions
    assert not result.has("PROVISION_USERS")
    assert result.has("USER_SUBMIT_JOURNAL")


def test_three_levels_resolve_to_the_lowest() -> None:
    result = resolve_permissions([STUDENT, PROFESSOR, TUTOR])

    assert result.effective_role_name == "Student"
    assert not result.has("MANAGE_LAB_QUEUE")
    assert not result.has("PROVISION_USERS")


def test_student_and_professor_cannot_manage_roles() -> None:
    student_b = RoleGrant(name="Student", privilege_level=1, permissions=frozenset({"A", "B"}))
    professor_b = RoleGrant(
        name="Professor", privilege_level=100, permissions=frozenset({"A", "MANAGE_ROLES"})
    )

    result = resolve_permissions([student_b, professor_b])

    assert result.effective_role_name == "Student"
    assert result.permissions == frozenset({"A", "B"})
    assert not result.has("MANAGE_ROLES")


def test_stacking_unions_abstract_permissions() -> None:
    first = RoleGrant(name="Student", privilege_level=1, permissions=frozenset({"A"}))
    second = RoleGrant(name="Group Leader", privilege_level=1, permissions=frozenset({"B"}))

    result = resolve_permissions([first, second])

    assert result.effective_role_name == "Student, Group Leader"
    assert result.permissions == frozenset({"A", "B"})


def test_resolution_is_deterministic() -> None:
    roles = [TA, STUDENT, GROUP_LEADER, TUTOR]

    assert resolve_permissions(roles) == resolve_permissions(list(roles))


def test_permissions_are_subset_of_union_of_minimum_level_roles() -> None:
    roles = [TA, TUTOR, PROFESSOR]

    result = resolve_permissions(roles)

    lowest = min(role.privilege_level for role in roles)
    allowed = frozenset().union(*(r.permissions for r in roles if r.privilege_level == lowest))
    assert result.permissions <= allowed
    assert result.permissions == TUTOR.permissions


def test_roles_without_names_fall_back_to_guest_label() -> None:
    result = resolve_permissions([RoleGrant(name="", privilege_level=3)])

    assert result.effective_role_name == "Guest"
    assert result.permissions == frozenset()


def test_input_is_not_mutated() -> None:
    roles = [PROFESSOR, STUDENT]

    resolve_permissions(roles)

    assert roles == [PROFESSOR, STUDENT]


def test_resolution_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="classroom_access.auth.permission_resolver"):
        resolve_permissions([STUDENT])

    assert any("permissions_resolved" in record.getMessage() for record in caplog.records)


def test_single_student_with_journal_permission() -> None:
    student = RoleGrant(name="Student", privilege_level=1, permissions=frozenset({"SUBMIT_JOURNAL"}))

    result = resolve_permissions([student])

    assert result.effective_role_name == "Student"
    assert result.permissions == frozenset({"SUBMIT_JOURNAL"})


@pytest.mark.parametrize("reverse", [False, True])
def test_professor_grant_is_ignored_next_to_student(reverse: bool) -> None:
    roles = [
        RoleGrant(name="Student", privilege_level=1, permissions=frozenset({"SUBMIT_JOURNAL"})),
        RoleGrant(name="Professor", privilege_level=100, permissions=frozenset({"PROVISION_USERS"})),
    ]
    if reverse:
        roles.reverse()

    result = resolve_permissions(roles)

    assert result.permissions == frozenset({"SUBMIT_JOURNAL"})
    assert "PROVISION_USERS" not in result.permissions


def test_permutations_yield_the_same_permission_set() -> None:
    from itertools import permutations

    roles = [STUDENT, GROUP_LEADER, TUTOR, PROFESSOR]
    expected = resolve_permissions(roles).permissions

    for ordering in permutations(roles):
        result = resolve_permissions(ordering)
        assert result.permissions == expected
        assert sorted(result.effective_role_name.split(", ")) == ["Group Leader", "Student"]
