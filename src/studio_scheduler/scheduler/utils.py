"""Utility functions for schedule generation."""

import re

from .constants import (
    EVENING_START_HOUR,
    MORNING_END_HOUR,
    RESTRICTED_END_MINUTES,
    RESTRICTED_START_MINUTES,
    SUB_SLOT_MINUTES,
    Shift,
)

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*([AaPp][Mm])?\s*$")


def normalize_time(value: str) -> str:
    """Normalize a clock time to zero-padded HH:MM.

    Accepts forms such as "7:30", "07:30:00" and "7:30 PM".

    Args:
        value: Raw time string

    Returns:
        Time in HH:MM format

    Raises:
        ValueError: If the value is not a recognisable time
    """
    match = _TIME_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Unrecognised time: {value!r}")

    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = match.group(3)

    if meridiem:
        meridiem = meridiem.lower()
        if meridiem == "pm" and hour < 12:
            hour += 12
        elif meridiem == "am" and hour == 12:
            hour = 0

    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {value!r}")

    return f"{hour:02d}:{minute:02d}"


def time_to_minutes(time: str) -> int:
    """Convert HH:MM to minutes since midnight."""
    hours, minutes = time.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def duration_minutes(duration: float) -> int:
    """Convert a duration in hours to whole minutes."""
    return int(round(duration * 60))


def class_interval(time: str, duration: float) -> tuple[int, int]:
    """(start, end) minutes of a class."""
    start = time_to_minutes(time)
    return start, start + duration_minutes(duration)


def occupied_sub_slots(time: str, duration: float) -> list[int]:
    """Get the capacity sub-slots a class occupies.

    Sub-slots are fixed SUB_SLOT_MINUTES intervals identified by their start
    minute. A class occupies every sub-slot its [start, end) span touches.

    Args:
        time: Start time (HH:MM)
        duration: Duration in hours

    Returns:
        Sorted sub-slot start minutes
    """
    start, end = class_interval(time, duration)
    first = (start // SUB_SLOT_MINUTES) * SUB_SLOT_MINUTES
    return list(range(first, max(end, start + 1), SUB_SLOT_MINUTES))


def get_hour(time: str) -> int:
    return int(time.split(":")[0])


def is_morning_slot(time: str) -> bool:
    return get_hour(time) < MORNING_END_HOUR


def is_evening_slot(time: str) -> bool:
    return get_hour(time) >= EVENING_START_HOUR


def get_shift(time: str) -> Shift | None:
    """Shift a start time belongs to, or None for midday starts."""
    if is_morning_slot(time):
        return Shift.MORNING
    if is_evening_slot(time):
        return Shift.EVENING
    return None


def is_peak_hour(time: str) -> bool:
    """Peak hours: starts from 07:00 to 11:59 and 17:00 to 19:59."""
    hour = get_hour(time)
    return 7 <= hour <= 11 or 17 <= hour <= 19


def is_in_restricted_window(time: str) -> bool:
    """Check if a start time falls in the midday window (12:00-17:00)."""
    minutes = time_to_minutes(time)
    return RESTRICTED_START_MINUTES <= minutes < RESTRICTED_END_MINUTES


def count_max_consecutive(start_times: list[int], gap_minutes: int) -> int:
    """Longest run of starts where each follows the previous within gap_minutes.

    Args:
        start_times: Class start minutes (any order)
        gap_minutes: Maximum start-to-start gap for two classes to be consecutive

    Returns:
        Length of the longest run (0 for no classes)
    """
    if not start_times:
        return 0

    ordered = sorted(start_times)
    longest = 1
    current = 1
    for previous, following in zip(ordered, ordered[1:]):
        if following - previous <= gap_minutes:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def intervals_overlap(first: tuple[int, int], second: tuple[int, int]) -> bool:
    return first[0] < second[1] and second[0] < first[1]


def make_assignment_id(location: str, day: str, time: str, class_format: str, index: int) -> str:
    """Deterministic assignment identifier."""
    slug = re.sub(r"[^a-z0-9]+", "-", f"{location}-{class_format}".lower()).strip("-")
    return f"{day}-{time.replace(':', '')}-{slug}-{index}"
