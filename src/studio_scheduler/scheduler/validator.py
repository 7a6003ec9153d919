"""Validation of manual edits and full schedules."""

import logging
from collections.abc import Iterable

from ..exceptions import AssignmentRejectedError, OverrideRequiredError, SchedulerError
from .config import ConfigLoader
from .constants import (
    APPROACHING_LIMIT_MARGIN,
    CONSECUTIVE_GAP_MINUTES,
    DAYS_ORDER,
    MAX_CONSECUTIVE_CLASSES,
    MAX_DAILY_CLASSES,
    MAX_DAILY_HOURS,
    MIN_DAYS_OFF,
    get_weekly_hour_cap,
)
from .constraints import ConstraintEngine
from .models import ScheduledAssignment, ValidationResult, ViolationKind
from .state import AllocationState
from .utils import count_max_consecutive, intervals_overlap

logger = logging.getLogger(__name__)


class AssignmentValidator:
    """Checks a single proposed assignment against an existing schedule.

    Facility and tier rules are hard failures. Labour rules are soft
    failures the caller may override. The public-hours restriction is only
    reported as an advisory.
    """

    def __init__(self, config: ConfigLoader | None = None):
        self.config = config or ConfigLoader()
        self.engine = ConstraintEngine(self.config)

    def validate(
        self,
        existing: Iterable[ScheduledAssignment],
        proposed: ScheduledAssignment,
    ) -> ValidationResult:
        """Check a proposal without touching the existing schedule.

        Args:
            existing: Current schedule
            proposed: Assignment to add

        Returns:
            ValidationResult describing the first hard failure, or the first
            labour warning and any advisories
        """
        state = AllocationState.from_assignments(existing, self.config)
        instructor = state.get_instructor(proposed.instructor)
        violations = self.engine.check_proposal(
            state.assignments_at(proposed.location, proposed.day), proposed, instructor
        )
        projected = instructor.weekly_hours + proposed.duration

        hard = [v for v in violations if v.is_hard]
        if hard:
            return ValidationResult(
                valid=False,
                error_kind=hard[0].kind,
                error_message=hard[0].message,
                overridable=False,
                projected_hours=projected,
                advisories=[v.kind for v in violations if v is not hard[0]],
            )

        result = ValidationResult(
            valid=True,
            projected_hours=projected,
            advisories=[
                v.kind for v in violations if v.kind != ViolationKind.HOUR_LIMIT_EXCEEDED
            ],
        )

        labour = [v for v in violations if v.is_labour]
        cap = get_weekly_hour_cap(instructor.tier)
        if projected > cap:
            result.warning_kind = ViolationKind.HOUR_LIMIT_EXCEEDED
            result.warning_message = (
                f"{proposed.instructor} would have {projected:g} hours "
                f"(limit: {cap:g} hours)"
            )
            result.overridable = True
        elif labour:
            result.warning_kind = labour[0].kind
            result.warning_message = labour[0].message
            result.overridable = True
        elif projected > cap - APPROACHING_LIMIT_MARGIN:
            result.warning_kind = ViolationKind.APPROACHING_LIMIT
            result.warning_message = (
                f"{proposed.instructor} approaching limit: {projected:g}/{cap:g} hours"
            )

        return result

    def apply(
        self,
        existing: Iterable[ScheduledAssignment],
        proposed: ScheduledAssignment,
        override: bool = False,
    ) -> list[ScheduledAssignment]:
        """Return a new schedule with the proposal added.

        Raises:
            AssignmentRejectedError: On a hard failure
            OverrideRequiredError: On a labour-rule breach without override
        """
        existing = list(existing)
        result = self.validate(existing, proposed)

        if not result.valid:
            raise AssignmentRejectedError(result)
        if result.requires_override and not override:
            raise OverrideRequiredError(result)

        if result.requires_override:
            logger.info(f"Override accepted: {result.warning_message}")
        return [*existing, proposed]

    def accept_suggestions(
        self,
        existing: Iterable[ScheduledAssignment],
        suggestions: Iterable[ScheduledAssignment],
        strict: bool = True,
    ) -> tuple[list[ScheduledAssignment], list[tuple[ScheduledAssignment, ValidationResult]]]:
        """Run externally supplied suggestions through the validator in order.

        Suggestions are never overridden. With strict, a suggestion carrying
        any advisory is rejected as well.

        Returns:
            (accepted suggestions, [(rejected suggestion, its result)])
        """
        current = list(existing)
        accepted: list[ScheduledAssignment] = []
        rejected: list[tuple[ScheduledAssignment, ValidationResult]] = []

        for suggestion in suggestions:
            result = self.validate(current, suggestion)
            if strict and result.valid and result.advisories:
                rejected.append((suggestion, result))
                continue
            try:
                current = self.apply(current, suggestion)
            except SchedulerError:
                rejected.append((suggestion, result))
                continue
            accepted.append(suggestion)

        logger.info(f"Accepted {len(accepted)} suggestions, rejected {len(rejected)}")
        return accepted, rejected


def audit_schedule(
    assignments: Iterable[ScheduledAssignment],
    config: ConfigLoader | None = None,
) -> list[str]:
    """Re-check a full schedule against every facility and labour rule.

    Args:
        assignments: Schedule to audit
        config: Scheduling configuration

    Returns:
        Human-readable violations, empty when the schedule is clean
    """
    config = config or ConfigLoader()
    engine = ConstraintEngine(config)
    state = AllocationState.from_assignments(assignments, config)
    problems: list[str] = []

    for (location, day, sub_slot), count in sorted(state.occupancy.items()):
        capacity = config.locations.get_capacity(location)
        if count > capacity:
            problems.append(
                f"{location} {day.value} {sub_slot // 60:02d}:{sub_slot % 60:02d}: "
                f"{count} classes running, capacity {capacity}"
            )

    for assignment in state.assignments:
        if not engine.format_allowed_at_location(assignment.class_format, assignment.location):
            problems.append(
                f"{assignment.class_format} is not allowed at {assignment.location}"
            )
        instructor = state.get_instructor(assignment.instructor)
        for violation in engine.hard.tier_violations(instructor, assignment.class_format):
            problems.append(violation.message)

    for name in sorted(state.instructors):
        instructor = state.instructors[name]
        cap = get_weekly_hour_cap(instructor.tier)
        if instructor.weekly_hours > cap:
            problems.append(f"{name} teaches {instructor.weekly_hours:g}h (cap {cap:g}h)")

        max_working_days = len(DAYS_ORDER) - MIN_DAYS_OFF
        if len(instructor.working_days) > max_working_days:
            problems.append(f"{name} works {len(instructor.working_days)} days")

        for day in DAYS_ORDER:
            if instructor.classes_on(day) == 0:
                continue
            if len(instructor.locations_on(day)) > 1:
                problems.append(f"{name} is at several locations on {day.value}")
            if instructor.hours_on(day) > MAX_DAILY_HOURS:
                problems.append(
                    f"{name} teaches {instructor.hours_on(day):g}h on {day.value}"
                )
            if instructor.classes_on(day) > MAX_DAILY_CLASSES:
                problems.append(
                    f"{name} teaches {instructor.classes_on(day)} classes on {day.value}"
                )

            intervals = sorted(instructor.intervals_on(day))
            starts = [start for start, _ in intervals]
            if count_max_consecutive(starts, CONSECUTIVE_GAP_MINUTES) > MAX_CONSECUTIVE_CLASSES:
                problems.append(f"{name} teaches too many classes in a row on {day.value}")
            if any(
                intervals_overlap(first, second)
                for i, first in enumerate(intervals)
                for second in intervals[i + 1 :]
            ):
                problems.append(f"{name} has overlapping classes on {day.value}")

    # Tier violations repeat per assignment
    return list(dict.fromkeys(problems))
