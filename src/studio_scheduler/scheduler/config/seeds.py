"""Must-run seed classes committed before any slot filling."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...exceptions import ConfigError
from ..models import Day


@dataclass(frozen=True)
class SeedClass:
    """A historically proven class that is locked into the schedule."""

    class_format: str
    location: str
    day: Day
    time: str
    instructor: str
    avg_participants: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SeedClass":
        return cls(
            class_format=data["class_format"],
            location=data["location"],
            day=Day.from_name(data["day"]),
            time=data["time"],
            instructor=data["instructor"],
            avg_participants=float(data.get("avg_participants", 0.0)),
        )


_KWALITY = "Kwality House, Kemps Corner"

DEFAULT_SEEDS: list[dict[str, Any]] = [
    {"class_format": "Studio Barre 57", "day": "monday", "time": "07:30",
     "location": _KWALITY, "instructor": "Anisha Shah", "avg_participants": 12},
    {"class_format": "Studio Mat 57", "day": "monday", "time": "08:30",
     "location": _KWALITY, "instructor": "Anisha Shah", "avg_participants": 10},
    {"class_format": "Studio Barre 57", "day": "monday", "time": "18:45",
     "location": _KWALITY, "instructor": "Pranjali Jain", "avg_participants": 9},
    {"class_format": "Studio FIT", "day": "tuesday", "time": "07:30",
     "location": _KWALITY, "instructor": "Anisha Shah", "avg_participants": 11},
    {"class_format": "Studio FIT", "day": "tuesday", "time": "19:15",
     "location": _KWALITY, "instructor": "Richard D'Costa", "avg_participants": 9},
    {"class_format": "Studio Cardio Barre (Express)", "day": "wednesday", "time": "07:30",
     "location": _KWALITY, "instructor": "Anisha Shah", "avg_participants": 10},
    {"class_format": "Studio Mat 57 (Express)", "day": "thursday", "time": "07:30",
     "location": _KWALITY, "instructor": "Mrigakshi Jaiswal", "avg_participants": 8},
    {"class_format": "Studio Back Body Blaze (Express)", "day": "friday", "time": "07:30",
     "location": _KWALITY, "instructor": "Mrigakshi Jaiswal", "avg_participants": 9},
    {"class_format": "Studio Mat 57", "day": "saturday", "time": "10:15",
     "location": _KWALITY, "instructor": "Pranjali Jain", "avg_participants": 12},
    {"class_format": "Studio Barre 57", "day": "sunday", "time": "11:30",
     "location": _KWALITY, "instructor": "Rohan Dahima", "avg_participants": 10},
]


class SeedConfig:
    """Loader for seed-classes.json."""

    def __init__(self, path: Path | None = None, data: list[dict[str, Any]] | None = None):
        self._source = str(path) if path else None

        if path and path.exists():
            with open(path, encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigError(str(e), self._source) from e

        entries = DEFAULT_SEEDS if data is None else data
        try:
            self.seeds: list[SeedClass] = [SeedClass.from_dict(entry) for entry in entries]
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"bad seed entry: {e}", self._source) from e

    def find(self, class_format: str, location: str, day: Day, time: str) -> SeedClass | None:
        """Seed matching an exact slot and format, if any."""
        for seed in self.seeds:
            if (
                seed.class_format == class_format
                and seed.location == location
                and seed.day == day
                and seed.time == time
            ):
                return seed
        return None

    def __iter__(self):
        return iter(self.seeds)

    def __len__(self) -> int:
        return len(self.seeds)
