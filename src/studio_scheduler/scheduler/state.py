"""Mutable allocation state threaded through the construction phases."""

import logging
from collections import defaultdict
from collections.abc import Iterable

from .config import ConfigLoader
from .models import (
    Day,
    Instructor,
    ScheduledAssignment,
    SkippedSlot,
    ViolationKind,
)
from .utils import class_interval, get_shift, occupied_sub_slots

logger = logging.getLogger(__name__)


class AllocationState:
    """Tracks committed assignments and the load they put on instructors and studios.

    This object is the only place counters change:
    - assignments: Committed assignments in commit order
    - instructors: Per-instructor hours, class counts, locations, shifts and intervals
    - occupancy: (location, day, sub_slot) -> number of classes running
    - skipped: Slots and seeds that could not be filled
    - phase_counts: Assignments committed per phase
    """

    def __init__(self, config: ConfigLoader | None = None) -> None:
        self.config = config or ConfigLoader()
        self.assignments: list[ScheduledAssignment] = []
        self.instructors: dict[str, Instructor] = {}
        self.occupancy: dict[tuple[str, Day, int], int] = defaultdict(int)
        self.skipped: list[SkippedSlot] = []
        self.phase_counts: dict[str, int] = defaultdict(int)
        # (location, day) -> assignments, in commit order
        self._by_location_day: dict[tuple[str, Day], list[ScheduledAssignment]] = (
            defaultdict(list)
        )

    @classmethod
    def from_assignments(
        cls,
        assignments: Iterable[ScheduledAssignment],
        config: ConfigLoader | None = None,
    ) -> "AllocationState":
        """Rebuild state by replaying an existing assignment set.

        No constraint is checked; the counters simply reflect what is there.
        """
        state = cls(config)
        for assignment in assignments:
            state.commit(assignment)
        return state

    def get_instructor(self, name: str) -> Instructor:
        """Get the instructor record, creating it with its configured tier."""
        if name not in self.instructors:
            self.instructors[name] = Instructor(
                name=name, tier=self.config.instructors.get_tier(name)
            )
        return self.instructors[name]

    def commit(
        self, assignment: ScheduledAssignment, phase: str | None = None
    ) -> ScheduledAssignment:
        """Add an assignment and update every counter it affects.

        Args:
            assignment: Assignment to add (already checked by the caller)
            phase: Construction phase name, for statistics

        Returns:
            The committed assignment
        """
        self.assignments.append(assignment)
        self._by_location_day[(assignment.location, assignment.day)].append(assignment)

        for sub_slot in occupied_sub_slots(assignment.time, assignment.duration):
            self.occupancy[(assignment.location, assignment.day, sub_slot)] += 1

        instructor = self.get_instructor(assignment.instructor)
        day = assignment.day
        instructor.weekly_hours += assignment.duration
        instructor.daily_hours[day] = instructor.hours_on(day) + assignment.duration
        instructor.daily_class_count[day] = instructor.classes_on(day) + 1
        instructor.daily_locations.setdefault(day, set()).add(assignment.location)
        shift = get_shift(assignment.time)
        if shift is not None:
            instructor.daily_shifts.setdefault(day, set()).add(shift.value)
        instructor.daily_intervals.setdefault(day, []).append(
            class_interval(assignment.time, assignment.duration)
        )

        if phase:
            self.phase_counts[phase] += 1

        logger.debug(
            f"Committed {assignment.class_format} at {assignment.location} "
            f"{day.value} {assignment.time} -> {assignment.instructor}"
        )
        return assignment

    def skip(
        self,
        phase: str,
        location: str,
        day: Day,
        time: str,
        reason: ViolationKind,
        details: str = "",
    ) -> None:
        """Record a slot that could not be filled."""
        self.skipped.append(
            SkippedSlot(
                phase=phase,
                location=location,
                day=day,
                time=time,
                reason=reason,
                details=details,
            )
        )
        logger.debug(
            f"Skipped {location} {day.value} {time} in {phase}: {reason.value}"
            + (f" ({details})" if details else "")
        )

    def assignments_at(
        self, location: str, day: Day, time: str | None = None
    ) -> list[ScheduledAssignment]:
        """Assignments at a location on a day, optionally at one start time."""
        found = self._by_location_day.get((location, day), [])
        if time is None:
            return list(found)
        return [a for a in found if a.time == time]

    def formats_at_slot(self, location: str, day: Day, time: str) -> set[str]:
        """Formats already starting at this slot."""
        return {a.class_format for a in self.assignments_at(location, day, time)}

    def has_assignment_at(self, location: str, day: Day, time: str) -> bool:
        return bool(self.assignments_at(location, day, time))

    def count_on_day(self, day: Day) -> int:
        """Total assignments across all locations on a day."""
        return sum(1 for a in self.assignments if a.day == day)

    def occupancy_at(self, location: str, day: Day, sub_slot: int) -> int:
        return self.occupancy.get((location, day, sub_slot), 0)

    def next_index(self) -> int:
        return len(self.assignments)
