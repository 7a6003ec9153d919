"""Test fixtures for studio scheduler tests."""

import pytest

from studio_scheduler.scheduler.config import (
    ConfigLoader,
    FormatConfig,
    InstructorConfig,
    LocationConfig,
    SeedConfig,
)
from studio_scheduler.scheduler.models import (
    Day,
    HistoricalClassRecord,
    Location,
    ScheduledAssignment,
)

KWALITY = "Kwality House, Kemps Corner"
SUPREME = "Supreme HQ, Bandra"
KENKERE = "Kenkere House"


@pytest.fixture
def make_record():
    """Factory for historical class records."""

    def _make(
        class_format: str = "Studio Barre 57",
        location: str = KWALITY,
        day: Day = Day.MONDAY,
        time: str = "07:30",
        instructor: str = "Anisha Shah",
        participants: int = 8,
        revenue: float = 0.0,
        is_hosted: bool = False,
    ) -> HistoricalClassRecord:
        return HistoricalClassRecord(
            class_format=class_format,
            location=location,
            day=day,
            time=time,
            instructor=instructor,
            participants=participants,
            revenue=revenue,
            is_hosted=is_hosted,
        )

    return _make


@pytest.fixture
def make_assignment():
    """Factory for scheduled assignments."""

    def _make(
        class_format: str = "Studio Barre 57",
        location: str = KWALITY,
        day: Day = Day.MONDAY,
        time: str = "07:30",
        instructor: str = "Jordan Lee",
        duration: float = 1.0,
        is_private: bool = False,
    ) -> ScheduledAssignment:
        return ScheduledAssignment(
            class_format=class_format,
            location=location,
            day=day,
            time=time,
            duration=duration,
            instructor=instructor,
            is_private=is_private,
            id=f"{day.value}-{time}-{instructor}",
        )

    return _make


@pytest.fixture
def default_config():
    """Built-in configuration without seed classes."""
    return ConfigLoader(seeds=SeedConfig(data=[]))


@pytest.fixture
def single_studio_config():
    """One single-room studio, no seeds."""
    return ConfigLoader(
        locations=LocationConfig.from_locations(
            [Location("Studio One", capacity=1)],
            primary_location="Studio One",
        ),
        seeds=SeedConfig(data=[]),
    )


@pytest.fixture
def plain_formats():
    """Format rules with no day guidelines or class caps."""
    return FormatConfig(data={"day_guidelines": {}, "day_class_caps": {}})


@pytest.fixture
def studio_records(make_record):
    """Several weeks of history across two locations and five instructors."""
    rows = [
        # (format, location, day, time, instructor, participants, revenue)
        ("Studio Barre 57", KWALITY, Day.MONDAY, "07:30", "Anisha Shah", 12, 9000.0),
        ("Studio Mat 57", KWALITY, Day.MONDAY, "09:00", "Pranjali Jain", 9, 6500.0),
        ("Studio FIT", KWALITY, Day.MONDAY, "09:00", "Richard D'Costa", 7, 5000.0),
        ("Studio Barre 57", KWALITY, Day.MONDAY, "18:00", "Jordan Lee", 10, 7000.0),
        ("Studio powerCycle", SUPREME, Day.MONDAY, "08:00", "Vivaran Dhasmana", 11, 8000.0),
        ("Studio Mat 57", SUPREME, Day.MONDAY, "18:00", "Jordan Lee", 6, 4000.0),
        ("Studio FIT", KWALITY, Day.TUESDAY, "07:30", "Anisha Shah", 11, 8500.0),
        ("Studio Cardio Barre", KWALITY, Day.TUESDAY, "09:00", "Pranjali Jain", 8, 5500.0),
        ("Studio Barre 57", SUPREME, Day.TUESDAY, "18:00", "Vivaran Dhasmana", 9, 6000.0),
        ("Studio Barre 57", KWALITY, Day.WEDNESDAY, "07:30", "Anisha Shah", 10, 7500.0),
        ("Studio HIIT", SUPREME, Day.WEDNESDAY, "09:00", "Vivaran Dhasmana", 9, 6000.0),
        ("Studio HIIT", KWALITY, Day.WEDNESDAY, "18:00", "Richard D'Costa", 8, 5200.0),
        ("Studio Mat 57", KWALITY, Day.THURSDAY, "07:30", "Pranjali Jain", 8, 5000.0),
        ("Studio Recovery", KWALITY, Day.THURSDAY, "18:00", "Jordan Lee", 6, 3000.0),
        ("Studio FIT", KWALITY, Day.FRIDAY, "07:30", "Richard D'Costa", 9, 6000.0),
        ("Studio Barre 57", SUPREME, Day.SATURDAY, "10:00", "Anisha Shah", 14, 10000.0),
        ("Studio Barre 57", KWALITY, Day.SUNDAY, "11:00", "Pranjali Jain", 12, 9000.0),
    ]

    records = []
    for week in range(3):
        for class_format, location, day, time, instructor, participants, revenue in rows:
            records.append(
                make_record(
                    class_format=class_format,
                    location=location,
                    day=day,
                    time=time,
                    instructor=instructor,
                    participants=participants + (week % 2),
                    revenue=revenue,
                )
            )

    records.append(
        make_record(
            class_format="Hosted Community Class",
            location=KWALITY,
            day=Day.SATURDAY,
            time="09:00",
            instructor="Guest Host",
            participants=30,
            is_hosted=True,
        )
    )
    return records


@pytest.fixture
def studio_config():
    """Default locations and formats with a tiny seed list."""
    return ConfigLoader(
        instructors=InstructorConfig(data={"roster": ["Kabir Mehta"]}),
        seeds=SeedConfig(
            data=[
                {
                    "class_format": "Studio Barre 57",
                    "location": KWALITY,
                    "day": "monday",
                    "time": "07:30",
                    "instructor": "Anisha Shah",
                    "avg_participants": 12,
                }
            ]
        ),
    )
