"""Data models for the studio class scheduling system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar


class Day(str, Enum):
    """Days of the operating week."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_name(cls, name: "str | Day") -> "Day":
        """Resolve a day from any casing, e.g. 'Monday' or 'MONDAY'."""
        if isinstance(name, Day):
            return name
        return cls(str(name).strip().lower())

    @property
    def is_weekend(self) -> bool:
        return self in (Day.SATURDAY, Day.SUNDAY)


class Tier(str, Enum):
    """Instructor category governing hour caps and format eligibility."""

    SENIOR = "senior"
    STANDARD = "standard"
    NEW = "new"


class Objective(str, Enum):
    """Weighting strategy used to rank candidate formats."""

    REVENUE = "revenue"
    ATTENDANCE = "attendance"
    BALANCED = "balanced"


class ViolationKind(str, Enum):
    """Reasons a slot or a proposed assignment could not be accepted."""

    INFEASIBLE_SLOT = "infeasible_slot"
    CAPACITY_VIOLATION = "capacity_violation"
    FORMAT_LOCATION_VIOLATION = "format_location_violation"
    TIER_WHITELIST_VIOLATION = "tier_whitelist_violation"
    ADVANCED_FORMAT_VIOLATION = "advanced_format_violation"
    TIME_RESTRICTED = "time_restricted"
    HOUR_LIMIT_EXCEEDED = "hour_limit_exceeded"
    APPROACHING_LIMIT = "approaching_limit"
    DAILY_HOURS_EXCEEDED = "daily_hours_exceeded"
    DAILY_CLASS_LIMIT = "daily_class_limit"
    CONSECUTIVE_LIMIT = "consecutive_limit"
    LOCATION_CONFLICT = "location_conflict"
    DAYS_OFF_VIOLATION = "days_off_violation"
    INSTRUCTOR_BUSY = "instructor_busy"


# Violations the manual edit path can never override
HARD_VIOLATIONS = frozenset(
    {
        ViolationKind.CAPACITY_VIOLATION,
        ViolationKind.FORMAT_LOCATION_VIOLATION,
        ViolationKind.TIER_WHITELIST_VIOLATION,
        ViolationKind.ADVANCED_FORMAT_VIOLATION,
    }
)

# Labour rules a manual edit may only break with explicit consent
LABOUR_VIOLATIONS = frozenset(
    {
        ViolationKind.HOUR_LIMIT_EXCEEDED,
        ViolationKind.DAILY_HOURS_EXCEEDED,
        ViolationKind.DAILY_CLASS_LIMIT,
        ViolationKind.CONSECUTIVE_LIMIT,
        ViolationKind.LOCATION_CONFLICT,
        ViolationKind.DAYS_OFF_VIOLATION,
        ViolationKind.INSTRUCTOR_BUSY,
    }
)


@dataclass(frozen=True)
class HistoricalClassRecord:
    """A single past class occurrence. Never mutated."""

    class_format: str
    location: str
    day: Day
    time: str
    instructor: str
    participants: int = 0
    checked_in: int = 0
    revenue: float = 0.0
    late_cancellations: int = 0
    is_hosted: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoricalClassRecord":
        """Create a record from a dictionary."""
        return cls(
            class_format=data["class_format"],
            location=data["location"],
            day=Day.from_name(data["day"]),
            time=data["time"],
            instructor=data.get("instructor", ""),
            participants=int(data.get("participants", 0)),
            checked_in=int(data.get("checked_in", 0)),
            revenue=float(data.get("revenue", 0.0)),
            late_cancellations=int(data.get("late_cancellations", 0)),
            is_hosted=bool(data.get("is_hosted", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary."""
        return {
            "class_format": self.class_format,
            "location": self.location,
            "day": self.day.value,
            "time": self.time,
            "instructor": self.instructor,
            "participants": self.participants,
            "checked_in": self.checked_in,
            "revenue": self.revenue,
            "late_cancellations": self.late_cancellations,
            "is_hosted": self.is_hosted,
        }


@dataclass(frozen=True)
class PerformanceStat:
    """Aggregated historical performance for a slot key."""

    avg_participants: float
    avg_revenue: float
    count: int

    ZERO: ClassVar["PerformanceStat"]

    @property
    def is_empty(self) -> bool:
        return self.count == 0


PerformanceStat.ZERO = PerformanceStat(avg_participants=0.0, avg_revenue=0.0, count=0)


@dataclass(frozen=True)
class Location:
    """A studio site with a number of parallel rooms."""

    name: str
    capacity: int = 1
    denied_formats: tuple[str, ...] = ()
    allowed_formats: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Location":
        """Create a Location from a dictionary."""
        return cls(
            name=data["name"],
            capacity=int(data.get("capacity", 1)),
            denied_formats=tuple(s.lower() for s in data.get("denied_formats", [])),
            allowed_formats=tuple(s.lower() for s in data.get("allowed_formats", [])),
        )

    def allows(self, class_format: str) -> bool:
        """Check the location's substring allow/deny rule for a format."""
        lower = class_format.lower()
        if any(marker in lower for marker in self.denied_formats):
            return False
        if self.allowed_formats:
            return any(marker in lower for marker in self.allowed_formats)
        return True


@dataclass
class Instructor:
    """An instructor and the load accumulated during construction.

    Counters are only changed through AllocationState.commit.
    """

    name: str
    tier: Tier = Tier.STANDARD
    weekly_hours: float = 0.0
    daily_hours: dict[Day, float] = field(default_factory=dict)
    daily_class_count: dict[Day, int] = field(default_factory=dict)
    daily_locations: dict[Day, set[str]] = field(default_factory=dict)
    daily_shifts: dict[Day, set[str]] = field(default_factory=dict)
    # day -> list of (start_minute, end_minute)
    daily_intervals: dict[Day, list[tuple[int, int]]] = field(default_factory=dict)

    @property
    def working_days(self) -> set[Day]:
        """Days with at least one assignment."""
        return {day for day, count in self.daily_class_count.items() if count > 0}

    def hours_on(self, day: Day) -> float:
        return self.daily_hours.get(day, 0.0)

    def classes_on(self, day: Day) -> int:
        return self.daily_class_count.get(day, 0)

    def locations_on(self, day: Day) -> set[str]:
        return self.daily_locations.get(day, set())

    def shifts_on(self, day: Day) -> set[str]:
        return self.daily_shifts.get(day, set())

    def intervals_on(self, day: Day) -> list[tuple[int, int]]:
        return self.daily_intervals.get(day, [])


@dataclass(frozen=True)
class ScheduledAssignment:
    """A committed class in the weekly schedule."""

    class_format: str
    location: str
    day: Day
    time: str
    duration: float
    instructor: str
    participants: float = 0.0
    revenue: float = 0.0
    is_top_performer: bool = False
    is_private: bool = False
    is_locked: bool = False
    id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduledAssignment":
        """Create an assignment from a dictionary."""
        return cls(
            class_format=data["class_format"],
            location=data["location"],
            day=Day.from_name(data["day"]),
            time=data["time"],
            duration=float(data.get("duration", 1.0)),
            instructor=data["instructor"],
            participants=float(data.get("participants", 0.0)),
            revenue=float(data.get("revenue", 0.0)),
            is_top_performer=bool(data.get("is_top_performer", False)),
            is_private=bool(data.get("is_private", False)),
            is_locked=bool(data.get("is_locked", False)),
            id=data.get("id", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert assignment to dictionary."""
        return {
            "id": self.id,
            "class_format": self.class_format,
            "location": self.location,
            "day": self.day.value,
            "time": self.time,
            "duration": self.duration,
            "instructor": self.instructor,
            "participants": self.participants,
            "revenue": self.revenue,
            "is_top_performer": self.is_top_performer,
            "is_private": self.is_private,
            "is_locked": self.is_locked,
        }


@dataclass
class SkippedSlot:
    """A slot or seed that could not be filled."""

    phase: str
    location: str
    day: Day
    time: str
    reason: ViolationKind
    details: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "phase": self.phase,
            "location": self.location,
            "day": self.day.value,
            "time": self.time,
            "reason": self.reason.value,
            "details": self.details,
        }


@dataclass
class ScheduleStatistics:
    """Statistics about the generated schedule."""

    total_assignments: int = 0
    total_skipped: int = 0
    total_hours: float = 0.0
    predicted_participants: float = 0.0
    predicted_revenue: float = 0.0
    instructor_balance: float = 0.0
    by_day: dict[str, int] = field(default_factory=dict)
    by_location: dict[str, int] = field(default_factory=dict)
    by_phase: dict[str, int] = field(default_factory=dict)
    instructor_hours: dict[str, float] = field(default_factory=dict)
    instructor_days: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_assignments": self.total_assignments,
            "total_skipped": self.total_skipped,
            "total_hours": self.total_hours,
            "predicted_participants": self.predicted_participants,
            "predicted_revenue": self.predicted_revenue,
            "instructor_balance": self.instructor_balance,
            "by_day": self.by_day,
            "by_location": self.by_location,
            "by_phase": self.by_phase,
            "instructor_hours": self.instructor_hours,
            "instructor_days": self.instructor_days,
        }


@dataclass
class ScheduleResult:
    """Result of a schedule construction run."""

    assignments: list[ScheduledAssignment] = field(default_factory=list)
    skipped: list[SkippedSlot] = field(default_factory=list)
    statistics: ScheduleStatistics = field(default_factory=ScheduleStatistics)
    objective: Objective = Objective.BALANCED
    target_day: Day | None = None
    generation_date: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def total_assigned(self) -> int:
        return len(self.assignments)

    @property
    def total_skipped(self) -> int:
        return len(self.skipped)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "generation_date": self.generation_date,
            "objective": self.objective.value,
            "target_day": self.target_day.value if self.target_day else None,
            "assignments": [a.to_dict() for a in self.assignments],
            "skipped": [s.to_dict() for s in self.skipped],
            "statistics": self.statistics.to_dict(),
        }


@dataclass
class ValidationResult:
    """Outcome of checking a single proposed assignment."""

    valid: bool = True
    error_kind: ViolationKind | None = None
    error_message: str | None = None
    warning_kind: ViolationKind | None = None
    warning_message: str | None = None
    overridable: bool = False
    projected_hours: float | None = None
    advisories: list[ViolationKind] = field(default_factory=list)

    @property
    def requires_override(self) -> bool:
        """True when the proposal may only be committed with explicit consent."""
        return self.valid and self.overridable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "valid": self.valid,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error_message": self.error_message,
            "warning_kind": self.warning_kind.value if self.warning_kind else None,
            "warning_message": self.warning_message,
            "overridable": self.overridable,
            "projected_hours": self.projected_hours,
            "advisories": [a.value for a in self.advisories],
        }
