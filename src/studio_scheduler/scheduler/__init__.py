"""Weekly studio class scheduling engine.

This package builds a weekly class timetable from historical class records
with a greedy, phased heuristic. Facility capacity, format rules and
instructor labour limits are enforced on every commit.

Main classes:
- ScheduleBuilder: Runs the seed, opening, fill and top-up phases
- AssignmentValidator: Checks manual edits (hard failures vs. overridable warnings)
- PerformanceIndex: Historical statistics per slot
- ConfigLoader: Loads configuration from a config directory

Usage:
    from studio_scheduler.scheduler import create_builder, Objective

    builder = create_builder(records, objective=Objective.REVENUE)
    result = builder.build()
"""

from .builder import ScheduleBuilder, create_builder
from .config import ConfigLoader
from .constants import DAYS_ORDER, Shift, get_available_time_slots, get_weekly_hour_cap
from .constraints import ConstraintEngine, Violation
from .models import (
    Day,
    HistoricalClassRecord,
    Instructor,
    Location,
    Objective,
    PerformanceStat,
    ScheduledAssignment,
    ScheduleResult,
    ScheduleStatistics,
    SkippedSlot,
    Tier,
    ValidationResult,
    ViolationKind,
)
from .performance import PerformanceIndex, Specialty, TopPerformer
from .phases import PhaseContext, fill_phase, opening_phase, seed_phase, top_up_phase
from .ranking import CandidateRanker, RankedFormat
from .selection import InstructorScore, InstructorSelector
from .state import AllocationState
from .validator import AssignmentValidator, audit_schedule

__all__ = [
    # Main builder
    "ScheduleBuilder",
    "create_builder",
    # Components
    "PerformanceIndex",
    "ConstraintEngine",
    "CandidateRanker",
    "InstructorSelector",
    "AllocationState",
    "AssignmentValidator",
    "audit_schedule",
    # Phases
    "PhaseContext",
    "seed_phase",
    "opening_phase",
    "fill_phase",
    "top_up_phase",
    # Configuration
    "ConfigLoader",
    # Models
    "Day",
    "Tier",
    "Objective",
    "Shift",
    "ViolationKind",
    "HistoricalClassRecord",
    "PerformanceStat",
    "Instructor",
    "Location",
    "ScheduledAssignment",
    "SkippedSlot",
    "ScheduleStatistics",
    "ScheduleResult",
    "ValidationResult",
    "Violation",
    "RankedFormat",
    "InstructorScore",
    "Specialty",
    "TopPerformer",
    # Constants
    "DAYS_ORDER",
    "get_available_time_slots",
    "get_weekly_hour_cap",
]
