"""Location configuration loader."""

import json
from pathlib import Path
from typing import Any

from ...exceptions import ConfigError
from ..constants import WEEKDAYS
from ..models import Day, Location

DEFAULT_LOCATIONS: list[dict[str, Any]] = [
    {
        "name": "Kwality House, Kemps Corner",
        "capacity": 2,
        "denied_formats": ["powercycle", "power cycle"],
    },
    {
        "name": "Supreme HQ, Bandra",
        "capacity": 3,
        "denied_formats": ["amped up", "hiit"],
    },
    {
        "name": "Kenkere House",
        "capacity": 2,
        "denied_formats": ["powercycle", "power cycle"],
    },
]

DEFAULT_PRIMARY_LOCATION = "Kwality House, Kemps Corner"
DEFAULT_OPENING_TIME = "07:30"

# Start times where the balanced objective schedules two parallel classes
DEFAULT_PARALLEL_TIMES: dict[str, list[str]] = {
    "Kwality House, Kemps Corner": ["07:30", "09:00", "11:00", "18:00", "19:15"],
    "Supreme HQ, Bandra": ["08:00", "09:00", "10:00", "18:00", "19:00"],
}


class LocationConfig:
    """Loader for studio locations and opening rules."""

    def __init__(self, path: Path | None = None, data: dict[str, Any] | None = None):
        self.locations: list[Location] = []
        self.primary_location: str | None = DEFAULT_PRIMARY_LOCATION
        self.opening_time: str = DEFAULT_OPENING_TIME
        self.opening_days: list[Day] = list(WEEKDAYS)
        self.parallel_times: dict[str, set[str]] = {
            name: set(times) for name, times in DEFAULT_PARALLEL_TIMES.items()
        }
        self._source = str(path) if path else None

        if path and path.exists():
            with open(path, encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigError(str(e), self._source) from e

        if data is None:
            self._load({"locations": DEFAULT_LOCATIONS})
        else:
            self._load(data)

    @classmethod
    def from_locations(cls, locations: list[Location], **options: Any) -> "LocationConfig":
        """Build a config from Location objects.

        Options are the same keys accepted in locations.json
        (primary_location, opening_time, opening_days, parallel_times).
        """
        data: dict[str, Any] = {
            "locations": [
                {
                    "name": loc.name,
                    "capacity": loc.capacity,
                    "denied_formats": list(loc.denied_formats),
                    "allowed_formats": list(loc.allowed_formats),
                }
                for loc in locations
            ],
        }
        data.update(options)
        return cls(data=data)

    def _load(self, data: dict[str, Any]) -> None:
        entries = data.get("locations", DEFAULT_LOCATIONS)
        try:
            self.locations = [Location.from_dict(entry) for entry in entries]
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"bad location entry: {e}", self._source) from e

        for location in self.locations:
            if location.capacity < 1:
                raise ConfigError(
                    f"location '{location.name}' must have capacity >= 1", self._source
                )

        if "primary_location" in data:
            self.primary_location = data["primary_location"]
        if "opening_time" in data:
            self.opening_time = data["opening_time"]
        if "opening_days" in data:
            try:
                self.opening_days = [Day.from_name(d) for d in data["opening_days"]]
            except ValueError as e:
                raise ConfigError(f"bad opening day: {e}", self._source) from e
        if "parallel_times" in data:
            self.parallel_times = {
                name: set(times) for name, times in data["parallel_times"].items()
            }

    def get_location(self, name: str) -> Location | None:
        """Get a location by name."""
        for location in self.locations:
            if location.name == name:
                return location
        return None

    def get_capacity(self, name: str) -> int:
        """Parallel class capacity; unknown locations host a single class."""
        location = self.get_location(name)
        return location.capacity if location else 1

    def get_location_names(self) -> list[str]:
        return [loc.name for loc in self.locations]

    def is_parallel_time(self, location: str, time: str) -> bool:
        """Check if the balanced objective aims for two classes at this start."""
        return time in self.parallel_times.get(location, set())
