"""
Role assignment invariants.

Checked BEFORE any side effects: a rejected assignment never touches the
user's stored roles, so no compensating action is ever needed.

INVARIANTS:
1. Privilege separation - at most one role above the unprivileged threshold
2. Level uniformity - all roles assigned together share one privilege level

The two checks are independent filters evaluated in that order. One
privileged role next to unprivileged roles still fails check 2 whenever the
levels differ.
"""

import logging
from collections.abc import Sequence

from ..errors import AssignmentViolationError, SecurityViolationError

logger = logging.getLogger(__name__)


class RoleAssignmentValidator:
    def __init__(self, unprivileged_threshold: int) -> None:
        if unprivileged_threshold < 0:
            raise ValueError("unprivileged_threshold must be greater than or equal to 0")
        self.unprivileged_threshold = unprivileged_threshold

    def is_privileged(self, privilege_level: int) -> bool:
        return privilege_level > self.unprivileged_threshold

    def validate(self, privilege_levels: Sequence[int], *, user_id: int | None = None) -> None:
        """
        Validate the privilege levels of a proposed role set.

        Args:
            privilege_levels: Level of every proposed role, one entry per role
            user_id: Target user, for logging only

        Raises:
            SecurityViolationError: More than one level exceeds the threshold
            AssignmentViolationError: Levels are not all equal
        """
        privileged_count = sum(1 for level in privilege_levels if self.is_privileged(level))
        if privileged_count > 1:
            logger.warning(
                "role_assignment_rejected invariant=privilege_separation user_id=%s levels=%s threshold=%s",
                user_id,
                list(privilege_levels),
                self.unprivileged_threshold,
            )
            raise SecurityViolationError(
                details={
                    "privileged_role_count": privileged_count,
                    "unprivileged_threshold": self.unprivileged_threshold,
                }
            )

        distinct_levels = sorted(set(privilege_levels))
        if len(distinct_levels) > 1:
            logger.warning(
                "role_assignment_rejected invariant=level_uniformity user_id=%s levels=%s",
                user_id,
                list(privilege_levels),
            )
            raise AssignmentViolationError(details={"privilege_levels": distinct_levels})
