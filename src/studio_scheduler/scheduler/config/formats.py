"""Class format rules: durations, tier eligibility and daily guidelines."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...exceptions import ConfigError
from ..models import Day

DEFAULT_ADVANCED_FORMATS = ["Studio HIIT", "Studio Amped Up!"]

DEFAULT_NEW_TIER_FORMATS = [
    "Studio Barre 57",
    "Studio Barre 57 (Express)",
    "Studio powerCycle",
    "Studio powerCycle (Express)",
    "Studio Cardio Barre",
]

# (lowercase substring, hours); first match wins
DEFAULT_DURATION_RULES: list[tuple[str, float]] = [
    ("express", 0.75),
    ("recovery", 0.5),
    ("sweat in 30", 0.5),
]
DEFAULT_DURATION = 1.0

DEFAULT_HOSTED_MARKER = "hosted"

DEFAULT_DAY_GUIDELINES: dict[str, dict[str, Any]] = {
    "monday": {
        "focus": "Strong start with high-demand formats and senior trainers",
        "avoid": ["Studio Recovery"],
        "priority": ["Studio Barre 57", "Studio FIT", "Studio powerCycle", "Studio Mat 57"],
    },
    "tuesday": {
        "focus": "Balance beginner and intermediate classes",
        "avoid": ["Studio HIIT", "Studio Amped Up!"],
        "priority": ["Studio Barre 57", "Studio Mat 57", "Studio Foundations", "Studio Cardio Barre"],
    },
    "wednesday": {
        "focus": "Midweek peak, repeat Monday's popular formats",
        "avoid": [],
        "priority": ["Studio Barre 57", "Studio FIT", "Studio powerCycle", "Studio Mat 57"],
    },
    "thursday": {
        "focus": "Lighter mix with recovery formats",
        "avoid": [],
        "priority": ["Studio Recovery", "Studio Mat 57", "Studio Cardio Barre", "Studio Back Body Blaze"],
    },
    "friday": {
        "focus": "Energy-focused with HIIT and advanced classes",
        "avoid": [],
        "priority": ["Studio HIIT", "Studio Amped Up!", "Studio FIT", "Studio Cardio Barre"],
    },
    "saturday": {
        "focus": "Family-friendly and community formats",
        "avoid": ["Studio HIIT"],
        "priority": ["Studio Barre 57", "Studio Foundations", "Studio Recovery", "Studio Mat 57"],
    },
    "sunday": {
        "focus": "Few classes, highest scoring formats only",
        "avoid": ["Studio HIIT", "Studio Amped Up!"],
        "priority": ["Studio Barre 57", "Studio Recovery", "Studio Mat 57"],
    },
}

DEFAULT_DAY_CLASS_CAPS = {"sunday": 5}


@dataclass
class DayGuideline:
    """Per-day format preferences."""

    focus: str = ""
    avoid: list[str] = field(default_factory=list)
    priority: list[str] = field(default_factory=list)


class FormatConfig:
    """Loader for class format rules."""

    def __init__(self, path: Path | None = None, data: dict[str, Any] | None = None):
        self.advanced_formats: set[str] = set(DEFAULT_ADVANCED_FORMATS)
        self.new_tier_formats: set[str] = set(DEFAULT_NEW_TIER_FORMATS)
        self.duration_rules: list[tuple[str, float]] = list(DEFAULT_DURATION_RULES)
        self.default_duration: float = DEFAULT_DURATION
        self.hosted_marker: str = DEFAULT_HOSTED_MARKER
        self.day_guidelines: dict[Day, DayGuideline] = {}
        self.day_class_caps: dict[Day, int] = {}
        self._source = str(path) if path else None

        if path and path.exists():
            with open(path, encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigError(str(e), self._source) from e

        self._load_guidelines(DEFAULT_DAY_GUIDELINES)
        self._load_caps(DEFAULT_DAY_CLASS_CAPS)
        if data:
            self._load(data)

    def _load(self, data: dict[str, Any]) -> None:
        if "advanced_formats" in data:
            self.advanced_formats = set(data["advanced_formats"])
        if "new_tier_formats" in data:
            self.new_tier_formats = set(data["new_tier_formats"])
        if "duration_rules" in data:
            try:
                self.duration_rules = [
                    (str(rule["contains"]).lower(), float(rule["hours"]))
                    for rule in data["duration_rules"]
                ]
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"bad duration rule: {e}", self._source) from e
        if "default_duration" in data:
            self.default_duration = float(data["default_duration"])
        if "hosted_marker" in data:
            self.hosted_marker = str(data["hosted_marker"]).lower()
        if "day_guidelines" in data:
            self.day_guidelines = {}
            self._load_guidelines(data["day_guidelines"])
        if "day_class_caps" in data:
            self.day_class_caps = {}
            self._load_caps(data["day_class_caps"])

    def _load_guidelines(self, guidelines: dict[str, dict[str, Any]]) -> None:
        for day_name, entry in guidelines.items():
            try:
                day = Day.from_name(day_name)
            except ValueError as e:
                raise ConfigError(f"unknown day '{day_name}'", self._source) from e
            self.day_guidelines[day] = DayGuideline(
                focus=entry.get("focus", ""),
                avoid=list(entry.get("avoid", [])),
                priority=list(entry.get("priority", [])),
            )

    def _load_caps(self, caps: dict[str, int]) -> None:
        for day_name, cap in caps.items():
            try:
                self.day_class_caps[Day.from_name(day_name)] = int(cap)
            except ValueError as e:
                raise ConfigError(f"bad class cap for '{day_name}'", self._source) from e

    def get_duration(self, class_format: str) -> float:
        """Class length in hours, derived from the format name."""
        lower = class_format.lower()
        for marker, hours in self.duration_rules:
            if marker in lower:
                return hours
        return self.default_duration

    def is_hosted(self, class_format: str) -> bool:
        """Hosted sessions are not bookable and never count as history."""
        return self.hosted_marker in class_format.lower()

    def is_advanced(self, class_format: str) -> bool:
        return class_format in self.advanced_formats

    def is_allowed_for_new_tier(self, class_format: str) -> bool:
        return class_format in self.new_tier_formats

    def get_guideline(self, day: Day) -> DayGuideline:
        return self.day_guidelines.get(day, DayGuideline())

    def get_day_class_cap(self, day: Day) -> int | None:
        """Maximum classes for a day, or None when uncapped."""
        return self.day_class_caps.get(day)
