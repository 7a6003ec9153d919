"""Instructor labour constraints.

Labour limits protect instructors from overload. The schedule builder treats
every one of them as binding; manual edits may override the weekly hour cap.
"""

from ..constants import (
    CONSECUTIVE_GAP_MINUTES,
    DAYS_ORDER,
    MAX_CONSECUTIVE_CLASSES,
    MAX_DAILY_CLASSES,
    MAX_DAILY_HOURS,
    MIN_DAYS_OFF,
    get_weekly_hour_cap,
)
from ..models import Day, Instructor, ScheduledAssignment, ViolationKind
from ..utils import class_interval, count_max_consecutive, intervals_overlap
from .base import ConstraintBase, Violation


class SoftConstraints(ConstraintBase):
    """
    Implementation of instructor labour limits.

    Soft Constraints:
    - SC-01: Weekly hours within the tier cap (10 new, 15 otherwise)
    - SC-02: At most 4 hours per day
    - SC-03: At most 4 classes per day
    - SC-04: No more than 2 classes in a row (starts within 90 minutes)
    - SC-05: No overlapping classes for one instructor
    - SC-06: One location per instructor per day
    - SC-07: At least 2 days off per week
    """

    def check(
        self,
        proposed: ScheduledAssignment,
        assignments: list[ScheduledAssignment],
        instructor: Instructor,
    ) -> list[Violation]:
        return self.labour_violations(
            instructor, proposed.day, proposed.time, proposed.duration, proposed.location
        )

    def labour_violations(
        self,
        instructor: Instructor,
        day: Day,
        time: str,
        duration: float,
        location: str,
    ) -> list[Violation]:
        """Evaluate every labour limit for adding one class to an instructor."""
        violations = []

        projected_weekly = instructor.weekly_hours + duration
        cap = get_weekly_hour_cap(instructor.tier)
        if projected_weekly > cap:
            violations.append(
                Violation(
                    ViolationKind.HOUR_LIMIT_EXCEEDED,
                    f"{instructor.name} would reach {projected_weekly:g}h "
                    f"(cap {cap:g}h)",
                )
            )

        projected_daily = instructor.hours_on(day) + duration
        if projected_daily > MAX_DAILY_HOURS:
            violations.append(
                Violation(
                    ViolationKind.DAILY_HOURS_EXCEEDED,
                    f"{instructor.name} would teach {projected_daily:g}h on {day.value} "
                    f"(max {MAX_DAILY_HOURS:g}h)",
                )
            )

        if instructor.classes_on(day) >= MAX_DAILY_CLASSES:
            violations.append(
                Violation(
                    ViolationKind.DAILY_CLASS_LIMIT,
                    f"{instructor.name} already has {instructor.classes_on(day)} "
                    f"classes on {day.value}",
                )
            )

        interval = class_interval(time, duration)
        intervals = instructor.intervals_on(day)

        starts = [start for start, _ in intervals] + [interval[0]]
        if count_max_consecutive(starts, CONSECUTIVE_GAP_MINUTES) > MAX_CONSECUTIVE_CLASSES:
            violations.append(
                Violation(
                    ViolationKind.CONSECUTIVE_LIMIT,
                    f"{instructor.name} would teach more than "
                    f"{MAX_CONSECUTIVE_CLASSES} classes in a row on {day.value}",
                )
            )

        if any(intervals_overlap(interval, other) for other in intervals):
            violations.append(
                Violation(
                    ViolationKind.INSTRUCTOR_BUSY,
                    f"{instructor.name} is already teaching at {time} on {day.value}",
                )
            )

        locations = instructor.locations_on(day)
        if locations and location not in locations:
            violations.append(
                Violation(
                    ViolationKind.LOCATION_CONFLICT,
                    f"{instructor.name} is already at {', '.join(sorted(locations))} "
                    f"on {day.value}",
                )
            )

        working_days = instructor.working_days
        max_working_days = len(DAYS_ORDER) - MIN_DAYS_OFF
        if day not in working_days and len(working_days) >= max_working_days:
            violations.append(
                Violation(
                    ViolationKind.DAYS_OFF_VIOLATION,
                    f"{instructor.name} already works {len(working_days)} days",
                )
            )

        return violations
