"""Facility and format constraints.

These rules describe what a studio and an instructor tier can physically or
contractually host. Apart from the midday restriction they are never
overridable.
"""

from ..models import Day, Instructor, ScheduledAssignment, Tier, ViolationKind
from ..utils import is_in_restricted_window, occupied_sub_slots
from .base import ConstraintBase, Violation


class HardConstraints(ConstraintBase):
    """
    Implementation of facility, format and tier constraints.

    Hard Constraints:
    - HC-01: Format allowed at location (substring allow/deny rule)
    - HC-02: Studio capacity per 15-minute sub-slot
    - HC-03: New-tier instructors only teach whitelisted formats
    - HC-04: Advanced formats are senior-only
    - HC-05: No public class starts in the midday window
    """

    def check(
        self,
        proposed: ScheduledAssignment,
        assignments: list[ScheduledAssignment],
        instructor: Instructor,
    ) -> list[Violation]:
        violations = []

        if not self.format_allowed_at_location(proposed.class_format, proposed.location):
            violations.append(
                Violation(
                    ViolationKind.FORMAT_LOCATION_VIOLATION,
                    f"{proposed.class_format} is not allowed at {proposed.location}",
                )
            )

        if not self.capacity_available(assignments, proposed):
            capacity = self.config.locations.get_capacity(proposed.location)
            violations.append(
                Violation(
                    ViolationKind.CAPACITY_VIOLATION,
                    f"{proposed.location} already runs {capacity} classes "
                    f"during {proposed.day.value} {proposed.time}",
                )
            )

        violations.extend(self.tier_violations(instructor, proposed.class_format))

        if self.time_restricted(proposed.time, proposed.day, proposed.is_private):
            violations.append(
                Violation(
                    ViolationKind.TIME_RESTRICTED,
                    f"public classes cannot start at {proposed.time} (12:00-17:00)",
                )
            )

        return violations

    def capacity_available(
        self, assignments: list[ScheduledAssignment], proposed: ScheduledAssignment
    ) -> bool:
        """
        HC-02: Studio capacity

        Every sub-slot the proposal spans must have fewer running classes than
        the location has studios.
        """
        capacity = self.config.locations.get_capacity(proposed.location)
        wanted = occupied_sub_slots(proposed.time, proposed.duration)

        counts = dict.fromkeys(wanted, 0)
        for existing in assignments:
            if existing.location != proposed.location or existing.day != proposed.day:
                continue
            for sub_slot in occupied_sub_slots(existing.time, existing.duration):
                if sub_slot in counts:
                    counts[sub_slot] += 1

        return all(count < capacity for count in counts.values())

    def format_allowed_at_location(self, class_format: str, location: str) -> bool:
        """HC-01: Unknown locations carry no format rule."""
        loc = self.config.locations.get_location(location)
        return loc is None or loc.allows(class_format)

    def time_restricted(self, time: str, day: Day, is_private: bool = False) -> bool:
        """HC-05: True when a class may NOT start at this time."""
        return not is_private and is_in_restricted_window(time)

    def tier_violations(self, instructor: Instructor, class_format: str) -> list[Violation]:
        """HC-03 and HC-04 for one instructor and format."""
        violations = []
        formats = self.config.formats

        if instructor.tier == Tier.NEW and not formats.is_allowed_for_new_tier(class_format):
            violations.append(
                Violation(
                    ViolationKind.TIER_WHITELIST_VIOLATION,
                    f"{instructor.name} is a new instructor and cannot teach {class_format}",
                )
            )

        if formats.is_advanced(class_format) and instructor.tier != Tier.SENIOR:
            violations.append(
                Violation(
                    ViolationKind.ADVANCED_FORMAT_VIOLATION,
                    f"{class_format} is an advanced format reserved for senior instructors",
                )
            )

        return violations
