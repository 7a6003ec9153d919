"""Constraint engine combining facility and labour rules."""

from ..config import ConfigLoader
from ..models import Day, Instructor, ScheduledAssignment
from ..utils import occupied_sub_slots
from .base import Violation
from .hard import HardConstraints
from .soft import SoftConstraints


class ConstraintEngine:
    """Stateless evaluator for proposed assignments.

    Nothing here mutates its arguments; callers commit through
    AllocationState once the checks pass.
    """

    def __init__(self, config: ConfigLoader | None = None):
        self.config = config or ConfigLoader()
        self.hard = HardConstraints(self.config)
        self.soft = SoftConstraints(self.config)

    def capacity_available(
        self, assignments: list[ScheduledAssignment], proposed: ScheduledAssignment
    ) -> bool:
        return self.hard.capacity_available(assignments, proposed)

    def occupied_sub_slots(self, time: str, duration: float) -> list[int]:
        return occupied_sub_slots(time, duration)

    def format_allowed_at_location(self, class_format: str, location: str) -> bool:
        return self.hard.format_allowed_at_location(class_format, location)

    def time_restricted(self, time: str, day: Day, is_private: bool = False) -> bool:
        return self.hard.time_restricted(time, day, is_private)

    def instructor_violations(
        self,
        instructor: Instructor,
        day: Day,
        time: str,
        duration: float,
        class_format: str,
        location: str,
    ) -> list[Violation]:
        """Every tier and labour rule the instructor would break."""
        violations = self.hard.tier_violations(instructor, class_format)
        violations.extend(
            self.soft.labour_violations(instructor, day, time, duration, location)
        )
        return violations

    def instructor_eligible(
        self,
        instructor: Instructor,
        day: Day,
        time: str,
        duration: float,
        class_format: str,
        location: str,
    ) -> bool:
        """Check whether an instructor can take a class without breaking any rule."""
        return not self.instructor_violations(
            instructor, day, time, duration, class_format, location
        )

    def check_proposal(
        self,
        assignments: list[ScheduledAssignment],
        proposed: ScheduledAssignment,
        instructor: Instructor,
    ) -> list[Violation]:
        """All facility, tier and labour checks for one proposed assignment.

        Args:
            assignments: Assignments already committed
            proposed: Assignment under consideration
            instructor: Current load of proposed.instructor

        Returns:
            Failed rules; facility rules first, then labour rules
        """
        violations = self.hard.check(proposed, assignments, instructor)
        violations.extend(self.soft.check(proposed, assignments, instructor))
        return violations
