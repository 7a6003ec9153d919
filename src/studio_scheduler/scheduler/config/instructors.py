"""Instructor configuration loader."""

import json
from pathlib import Path
from typing import Any

from ...exceptions import ConfigError
from ..models import Tier

DEFAULT_SENIOR_MARKERS = [
    "Anisha",
    "Vivaran",
    "Mrigakshi",
    "Pranjali",
    "Atulan",
    "Cauveri",
    "Rohan",
]
DEFAULT_NEW_MARKERS = ["Kabir", "Simonelle"]
DEFAULT_EXCLUDED_MARKERS = ["Nishanth", "Saniya"]


class InstructorConfig:
    """Loader for instructor tiers and roster rules.

    Tier markers are matched as substrings of the full instructor name, so a
    first name is enough to classify an instructor.
    """

    def __init__(self, path: Path | None = None, data: dict[str, Any] | None = None):
        self.senior_markers: list[str] = list(DEFAULT_SENIOR_MARKERS)
        self.new_markers: list[str] = list(DEFAULT_NEW_MARKERS)
        self.excluded_markers: list[str] = list(DEFAULT_EXCLUDED_MARKERS)
        # Exact name -> tier, takes precedence over markers
        self.tiers: dict[str, Tier] = {}
        # Instructors to include even without historical records
        self.roster: list[str] = []
        self._source = str(path) if path else None

        if path and path.exists():
            with open(path, encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigError(str(e), self._source) from e

        if data:
            self._load(data)

    def _load(self, data: dict[str, Any]) -> None:
        if "senior" in data:
            self.senior_markers = list(data["senior"])
        if "new" in data:
            self.new_markers = list(data["new"])
        if "excluded" in data:
            self.excluded_markers = list(data["excluded"])
        if "roster" in data:
            self.roster = list(data["roster"])
        for name, tier in data.get("tiers", {}).items():
            try:
                self.tiers[name] = Tier(tier)
            except ValueError as e:
                raise ConfigError(f"unknown tier for '{name}': {tier}", self._source) from e

    def get_tier(self, name: str) -> Tier:
        """Resolve an instructor's tier."""
        if name in self.tiers:
            return self.tiers[name]
        if any(marker in name for marker in self.new_markers):
            return Tier.NEW
        if any(marker in name for marker in self.senior_markers):
            return Tier.SENIOR
        return Tier.STANDARD

    def is_excluded(self, name: str) -> bool:
        """Check if an instructor must never be scheduled."""
        return any(marker in name for marker in self.excluded_markers)
