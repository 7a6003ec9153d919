"""Historical performance index built from past class records."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import pandas as pd

from .config import ConfigLoader
from .constants import SPECIALTY_LIMIT, TOP_PERFORMER_MIN_FREQUENCY, TOP_PERFORMER_THRESHOLD
from .models import Day, HistoricalClassRecord, PerformanceStat
from .utils import normalize_time

logger = logging.getLogger(__name__)

RECORD_COLUMNS = [
    "class_format",
    "location",
    "day",
    "time",
    "instructor",
    "participants",
    "checked_in",
    "revenue",
    "late_cancellations",
    "is_hosted",
]

SLOT_KEY = ["location", "day", "time"]


@dataclass(frozen=True)
class Specialty:
    """A format an instructor has a track record in."""

    class_format: str
    avg_participants: float
    class_count: int


@dataclass(frozen=True)
class TopPerformer:
    """A recurring slot with consistently high attendance."""

    class_format: str
    location: str
    day: Day
    time: str
    instructor: str
    avg_participants: float
    avg_revenue: float
    frequency: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "class_format": self.class_format,
            "location": self.location,
            "day": self.day.value,
            "time": self.time,
            "instructor": self.instructor,
            "avg_participants": self.avg_participants,
            "avg_revenue": self.avg_revenue,
            "frequency": self.frequency,
        }


def _mean(series: pd.Series) -> float:
    return round(float(series.mean()), 1)


class PerformanceIndex:
    """Aggregates historical records into per-slot statistics.

    Hosted (non-bookable) sessions are dropped once at construction, so every
    query only ever sees bookable history. The index is immutable after
    construction and all queries are deterministic folds over the records.
    """

    def __init__(
        self,
        records: Iterable[HistoricalClassRecord],
        config: ConfigLoader | None = None,
    ) -> None:
        """Initialize the index.

        Args:
            records: Historical class records
            config: Scheduling configuration (hosted marker, excluded instructors)
        """
        self.config = config or ConfigLoader()
        self.records: list[HistoricalClassRecord] = list(records)

        frame = pd.DataFrame([r.to_dict() for r in self.records], columns=RECORD_COLUMNS)
        if not frame.empty:
            frame["time"] = frame["time"].map(normalize_time)
            hosted = frame["is_hosted"].astype(bool) | frame["class_format"].map(
                self.config.formats.is_hosted
            )
            frame = frame[~hosted]
        self._frame = frame.reset_index(drop=True)

        self._by_slot: dict[tuple[str, str, str], pd.DataFrame] = {
            key: group for key, group in self._frame.groupby(SLOT_KEY, sort=False)
        }

        logger.debug(
            f"Indexed {len(self._frame)} bookable records "
            f"({len(self.records) - len(self._frame)} hosted dropped) "
            f"across {len(self._by_slot)} slots"
        )

    def __len__(self) -> int:
        return len(self._frame)

    @property
    def frame(self) -> pd.DataFrame:
        """Bookable records as a DataFrame (copy)."""
        return self._frame.copy()

    def slot_records(self, location: str, day: Day, time: str) -> pd.DataFrame:
        """Bookable records for an exact (location, day, time) slot."""
        group = self._by_slot.get((location, Day.from_name(day).value, normalize_time(time)))
        if group is None:
            return self._frame.iloc[0:0]
        return group

    def stats_for(
        self,
        class_format: str,
        location: str,
        day: Day,
        time: str,
        instructor: str | None = None,
    ) -> PerformanceStat:
        """Average participants/revenue for a format in a slot.

        Args:
            class_format: Format name
            location: Location name
            day: Day of week
            time: Start time (HH:MM)
            instructor: Optionally restrict to one instructor

        Returns:
            PerformanceStat, or PerformanceStat.ZERO when nothing matches
        """
        slot = self.slot_records(location, day, time)
        matches = slot[slot["class_format"] == class_format]
        if instructor is not None:
            matches = matches[matches["instructor"] == instructor]

        if matches.empty:
            return PerformanceStat.ZERO

        return PerformanceStat(
            avg_participants=_mean(matches["participants"]),
            avg_revenue=_mean(matches["revenue"]),
            count=int(len(matches)),
        )

    def best_instructor(
        self, class_format: str, location: str, day: Day, time: str
    ) -> str | None:
        """Instructor with the highest historical average for an exact slot.

        A seed class configured for the slot wins outright. Excluded
        instructors are ignored. Ties go to the alphabetically first name.
        """
        day = Day.from_name(day)
        time = normalize_time(time)
        seed = self.config.seeds.find(class_format, location, day, time)
        if seed is not None and not self.config.instructors.is_excluded(seed.instructor):
            return seed.instructor

        slot = self.slot_records(location, day, time)
        matches = slot[slot["class_format"] == class_format]
        if matches.empty:
            return None

        averages = matches.groupby("instructor")["participants"].mean()
        candidates = [
            (name, float(avg))
            for name, avg in averages.items()
            if name and not self.config.instructors.is_excluded(name)
        ]
        if not candidates:
            return None

        candidates.sort(key=lambda item: (-item[1], item[0]))
        return candidates[0][0]

    def instructor_specialties(
        self, instructor: str, limit: int = SPECIALTY_LIMIT
    ) -> list[Specialty]:
        """Formats an instructor has taught, most experienced first.

        Sorted by class count, then average participants, then format name.
        """
        taught = self._frame[self._frame["instructor"] == instructor]
        if taught.empty:
            return []

        grouped = taught.groupby("class_format")["participants"].agg(["mean", "count"])
        specialties = [
            Specialty(
                class_format=str(class_format),
                avg_participants=round(float(row["mean"]), 1),
                class_count=int(row["count"]),
            )
            for class_format, row in grouped.iterrows()
        ]
        specialties.sort(key=lambda s: (-s.class_count, -s.avg_participants, s.class_format))
        return specialties[:limit]

    def top_performers(
        self,
        min_average: float = TOP_PERFORMER_THRESHOLD,
        include_instructor: bool = True,
    ) -> list[TopPerformer]:
        """Recurring slots whose average attendance clears min_average.

        Only formats allowed at their location are considered and a slot must
        have run at least twice.
        """
        frame = self._frame
        if frame.empty:
            return []

        allowed = [
            self._allowed_at(fmt, loc)
            for fmt, loc in zip(frame["class_format"], frame["location"])
        ]
        frame = frame[allowed]
        if frame.empty:
            return []

        keys = ["class_format", "location", "day", "time"]
        if include_instructor:
            keys.append("instructor")

        grouped = frame.groupby(keys).agg(
            participants=("participants", "mean"),
            revenue=("revenue", "mean"),
            frequency=("participants", "size"),
        )

        performers = []
        for key, row in grouped.iterrows():
            values = dict(zip(keys, key))
            avg = round(float(row["participants"]), 1)
            frequency = int(row["frequency"])
            if frequency < TOP_PERFORMER_MIN_FREQUENCY or avg < min_average:
                continue
            performers.append(
                TopPerformer(
                    class_format=values["class_format"],
                    location=values["location"],
                    day=Day.from_name(values["day"]),
                    time=values["time"],
                    instructor=values.get("instructor", ""),
                    avg_participants=avg,
                    avg_revenue=round(float(row["revenue"]), 1),
                    frequency=frequency,
                )
            )

        performers.sort(
            key=lambda p: (-p.avg_participants, -p.frequency, p.class_format, p.time)
        )
        return performers

    def instructors(self) -> list[str]:
        """All schedulable instructor names seen in the records, sorted."""
        names = {
            r.instructor
            for r in self.records
            if r.instructor and not self.config.instructors.is_excluded(r.instructor)
        }
        return sorted(names)

    def location_average(self, location: str) -> float:
        """Average participants across all bookable classes at a location."""
        at_location = self._frame[self._frame["location"] == location]
        if at_location.empty:
            return 0.0
        return _mean(at_location["participants"])

    def time_slots_with_data(self, location: str) -> set[str]:
        """Start times that have bookable history at a location."""
        at_location = self._frame[self._frame["location"] == location]
        return set(at_location["time"])

    def _allowed_at(self, class_format: str, location: str) -> bool:
        loc = self.config.locations.get_location(location)
        return loc is None or loc.allows(class_format)
