"""
Permission registry - the closed set of permission names the system knows.

Permission names are opaque strings everywhere else (the resolver never looks
inside them), but every name used by a route guard, a role definition or an
admin request must be listed here. A typo therefore fails when the guard is
built or the catalog is validated, not in the middle of an authorization check.
"""
from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Final


class Permission(str, Enum):
    # Shared
    VIEW_FAQ_SYSTEM = "VIEW_FAQ_SYSTEM"
    VIEW_DOCS_MANAGER = "VIEW_DOCS_MANAGER"

    # Student
    EDIT_OWN_PROFILE_DATA = "EDIT_OWN_PROFILE_DATA"
    USER_SUBMIT_JOURNAL = "USER_SUBMIT_JOURNAL"
    VIEW_OWN_JOURNAL_SENTIMENT = "VIEW_OWN_JOURNAL_SENTIMENT"
    VIEW_OWN_ATTENDANCE_REPORTS = "VIEW_OWN_ATTENDANCE_REPORTS"
    VIEW_DEFINITION_OF_DONE = "VIEW_DEFINITION_OF_DONE"

    # Group leader
    GROUP_MANAGE_ATTENDANCE = "GROUP_MANAGE_ATTENDANCE"
    MANAGE_GROUP_FILES = "MANAGE_GROUP_FILES"
    VIEW_OWN_GROUP_JOURNALS = "VIEW_OWN_GROUP_JOURNALS"
    VIEW_CLASS_DIRECTORY = "VIEW_CLASS_DIRECTORY"

    # Tutor
    MANAGE_LAB_QUEUE = "MANAGE_LAB_QUEUE"
    PROMOTE_TO_FAQ = "PROMOTE_TO_FAQ"
    SUBMIT_NEGATIVE_INTERACTION = "SUBMIT_NEGATIVE_INTERACTION"
    SUBMIT_LAB_OBSERVATIONS = "SUBMIT_LAB_OBSERVATIONS"

    # TA
    ASSIGN_GROUPS = "ASSIGN_GROUPS"
    MANAGE_ALL_ATTENDANCE = "MANAGE_ALL_ATTENDANCE"
    VIEW_ALL_ATTENDANCE_REPORTS = "VIEW_ALL_ATTENDANCE_REPORTS"
    VIEW_ALL_JOURNALS = "VIEW_ALL_JOURNALS"
    EDIT_ALL_JOURNALS = "EDIT_ALL_JOURNALS"
    MANAGE_DOCS_MANAGER = "MANAGE_DOCS_MANAGER"
    MANAGE_DEFINITION_OF_DONE = "MANAGE_DEFINITION_OF_DONE"

    # Professor
    MANAGE_SYSTEM_CONFIG = "MANAGE_SYSTEM_CONFIG"
    PROVISION_USERS = "PROVISION_USERS"
    VIEW_LOGS = "VIEW_LOGS"
    MANAGE_ROLES = "MANAGE_ROLES"
    ASSIGN_ROLES = "ASSIGN_ROLES"
    EDIT_ALL_PROFILE_DATA = "EDIT_ALL_PROFILE_DATA"
    VIEW_REPORTING_ENGINE = "VIEW_REPORTING_ENGINE"


PERMISSION_DESCRIPTIONS: Final[dict[Permission, str]] = {
    Permission.VIEW_FAQ_SYSTEM: "Read the FAQ system",
    Permission.VIEW_DOCS_MANAGER: "Read course documents",
    Permission.EDIT_OWN_PROFILE_DATA: "Edit own profile",
    Permission.USER_SUBMIT_JOURNAL: "Submit journal entries",
    Permission.VIEW_OWN_JOURNAL_SENTIMENT: "View sentiment of own journal entries",
    Permission.VIEW_OWN_ATTENDANCE_REPORTS: "View own attendance",
    Permission.VIEW_DEFINITION_OF_DONE: "Read the definition of done",
    Permission.GROUP_MANAGE_ATTENDANCE: "Record attendance for own group",
    Permission.MANAGE_GROUP_FILES: "Manage own group's files",
    Permission.VIEW_OWN_GROUP_JOURNALS: "Read journals of own group",
    Permission.VIEW_CLASS_DIRECTORY: "Browse the class directory",
    Permission.MANAGE_LAB_QUEUE: "Run the lab help queue",
    Permission.PROMOTE_TO_FAQ: "Promote answers to the FAQ",
    Permission.SUBMIT_NEGATIVE_INTERACTION: "Report a negative interaction",
    Permission.SUBMIT_LAB_OBSERVATIONS: "Record lab observations",
    Permission.ASSIGN_GROUPS: "Move users between groups",
    Permission.MANAGE_ALL_ATTENDANCE: "Record attendance for everyone",
    Permission.VIEW_ALL_ATTENDANCE_REPORTS: "View attendance for everyone",
    Permission.VIEW_ALL_JOURNALS: "Read every journal",
    Permission.EDIT_ALL_JOURNALS: "Edit every journal",
    Permission.MANAGE_DOCS_MANAGER: "Manage course documents",
    Permission.MANAGE_DEFINITION_OF_DONE: "Edit the definition of done",
    Permission.MANAGE_SYSTEM_CONFIG: "Change system configuration",
    Permission.PROVISION_USERS: "Create users, groups and roles",
    Permission.VIEW_LOGS: "Read system logs",
    Permission.MANAGE_ROLES: "Edit role definitions",
    Permission.ASSIGN_ROLES: "Change the roles of a user",
    Permission.EDIT_ALL_PROFILE_DATA: "Edit any profile",
    Permission.VIEW_REPORTING_ENGINE: "Use the reporting engine",
}

ALLOWED_PERMISSIONS: Final[frozenset[str]] = frozenset(p.value for p in Permission)


def validate_permission(name: str | Permission) -> Permission:
    """
    Return the registry member for a permission name.

    Raises:
        ValueError: If the name is not registered
    """
    if isinstance(name, Permission):
        return name
    try:
        return Permission(name)
    except ValueError:
        raise ValueError(f"Invalid permission: '{name}' is not in the permission registry") from None


def unknown_permissions(names: Iterable[str]) -> list[str]:
    """Names from ``names`` that are not registered, in input order, without repeats."""
    return [name for name in dict.fromkeys(names) if name not in ALLOWED_PERMISSIONS]
