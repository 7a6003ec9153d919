"""Constants for schedule generation."""

from enum import Enum

from .models import Day, Objective, Tier


class Shift(str, Enum):
    """Shift of the day a class start falls into."""

    MORNING = "morning"
    EVENING = "evening"


# Days in scheduling order
DAYS_ORDER = [
    Day.MONDAY,
    Day.TUESDAY,
    Day.WEDNESDAY,
    Day.THURSDAY,
    Day.FRIDAY,
    Day.SATURDAY,
    Day.SUNDAY,
]

WEEKDAYS = DAYS_ORDER[:5]

# Capacity is accounted on a grid of 15-minute sub-slots
SUB_SLOT_MINUTES = 15

# Public classes may not start between 12:00 and 17:00
RESTRICTED_START_MINUTES = 12 * 60
RESTRICTED_END_MINUTES = 17 * 60

# Morning starts before noon, evening starts at 17:00 or later
MORNING_END_HOUR = 12
EVENING_START_HOUR = 17

# Labour limits
MAX_DAILY_HOURS = 4.0
MAX_DAILY_CLASSES = 4
MAX_CONSECUTIVE_CLASSES = 2
CONSECUTIVE_GAP_MINUTES = 90
MIN_DAYS_OFF = 2

WEEKLY_HOUR_CAPS = {
    Tier.SENIOR: 15.0,
    Tier.STANDARD: 15.0,
    Tier.NEW: 10.0,
}

# Validator warns when a proposal lands within this many hours of the cap
APPROACHING_LIMIT_MARGIN = 3.0

# Instructors more than this many hours below target get a selection boost
UNDERUTILIZATION_MARGIN = 3.0

# Ranking
MIN_AVERAGE_PARTICIPANTS = 5.0
REVENUE_NORMALIZER = 1000.0
TOP_PERFORMER_THRESHOLD = 6.0

# (revenue weight, participants weight)
OBJECTIVE_WEIGHTS = {
    Objective.REVENUE: (0.7, 0.3),
    Objective.ATTENDANCE: (0.2, 0.8),
    Objective.BALANCED: (0.5, 0.5),
}

# Additive instructor selection scores
SELECTION_WEIGHTS = {
    "historic_best": 100,
    "peak_senior": 50,
    "location_consistency": 40,
    "shift_separation": 30,
    "underutilized": 20,
    "shift_concentration": 15,
}

# Phase 3 top-up settings per objective:
# (tolerance hours, specialties considered, min specialty average, peak only)
TOP_UP_SETTINGS = {
    Objective.REVENUE: (2.0, 2, 8.0, True),
    Objective.ATTENDANCE: (1.0, 3, 0.0, False),
    Objective.BALANCED: (1.0, 3, 0.0, False),
}

# Top-up inspects this many historical specialties per instructor
SPECIALTY_LIMIT = 5

# Minimum repeat count for a slot to qualify as a top performer
TOP_PERFORMER_MIN_FREQUENCY = 2

PHASE_SEED = "seed"
PHASE_OPENING = "opening"
PHASE_FILL = "fill"
PHASE_TOP_UP = "top_up"


def _quarter_hours(start_hour: int, end_hour: int) -> list[str]:
    """Quarter-hour start times from start_hour:00 to end_hour:45 inclusive."""
    slots = []
    for hour in range(start_hour, end_hour + 1):
        for minute in (0, 15, 30, 45):
            slots.append(f"{hour:02d}:{minute:02d}")
    return slots


def get_available_time_slots(day: Day) -> list[str]:
    """Get the operating start times for a day.

    Weekdays open at 07:30, Saturday at 08:30 and Sunday at 10:00. Every day
    runs an evening block from 17:00.

    Args:
        day: Day of week

    Returns:
        Sorted list of HH:MM start times
    """
    if day == Day.SUNDAY:
        slots = _quarter_hours(10, 11) + _quarter_hours(17, 19)
    elif day == Day.SATURDAY:
        slots = ["08:30", "08:45"] + _quarter_hours(9, 11) + _quarter_hours(17, 19)
    else:
        slots = ["07:30", "07:45"] + _quarter_hours(8, 11) + _quarter_hours(17, 19)
    return sorted(slots)


def get_weekly_hour_cap(tier: Tier) -> float:
    """Weekly hour cap (and top-up target) for a tier."""
    return WEEKLY_HOUR_CAPS.get(tier, WEEKLY_HOUR_CAPS[Tier.STANDARD])
