"""Instructor selection for a chosen slot and format."""

import logging
from dataclasses import dataclass, field

from .config import ConfigLoader
from .constants import SELECTION_WEIGHTS, UNDERUTILIZATION_MARGIN, Shift, get_weekly_hour_cap
from .constraints import ConstraintEngine
from .models import Day, Tier
from .performance import PerformanceIndex
from .state import AllocationState
from .utils import get_shift, is_peak_hour

logger = logging.getLogger(__name__)


@dataclass
class InstructorScore:
    """Selection score of one eligible instructor with its components."""

    name: str
    score: int = 0
    reasons: dict[str, int] = field(default_factory=dict)

    def add(self, reason: str) -> None:
        points = SELECTION_WEIGHTS[reason]
        self.reasons[reason] = points
        self.score += points


def build_roster(index: PerformanceIndex, config: ConfigLoader) -> list[str]:
    """Schedulable instructors: everyone in the history, the seeds and the
    configured roster, minus excluded names, sorted by name."""
    names = set(index.instructors())
    names.update(seed.instructor for seed in config.seeds)
    names.update(config.instructors.roster)
    return sorted(name for name in names if name and not config.instructors.is_excluded(name))


class InstructorSelector:
    """Scores eligible instructors for a slot and picks the best one."""

    def __init__(
        self,
        index: PerformanceIndex,
        engine: ConstraintEngine,
        roster: list[str] | None = None,
    ):
        self.index = index
        self.engine = engine
        self.config = engine.config
        self.roster = roster if roster is not None else build_roster(index, self.config)

    def historic_best(self, class_format: str, location: str, day: Day, time: str) -> str | None:
        """Seed instructor for the slot, else the best historical average."""
        return self.index.best_instructor(class_format, location, day, time)

    def score_candidates(
        self,
        state: AllocationState,
        class_format: str,
        location: str,
        day: Day,
        time: str,
        duration: float,
    ) -> list[InstructorScore]:
        """Score every eligible instructor, in roster order.

        Args:
            state: Current allocation state
            class_format: Chosen format
            location: Location name
            day: Day of week
            time: Start time (HH:MM)
            duration: Class length in hours

        Returns:
            Scores for eligible instructors only
        """
        best = self.historic_best(class_format, location, day, time)
        shift = get_shift(time)
        peak = is_peak_hour(time)

        scores = []
        for name in self.roster:
            if self.config.instructors.is_excluded(name):
                continue

            instructor = state.get_instructor(name)
            if not self.engine.instructor_eligible(
                instructor, day, time, duration, class_format, location
            ):
                continue

            candidate = InstructorScore(name=name)
            if name == best:
                candidate.add("historic_best")
            if peak and instructor.tier == Tier.SENIOR:
                candidate.add("peak_senior")
            if location in instructor.locations_on(day):
                candidate.add("location_consistency")

            worked = instructor.shifts_on(day)
            if shift == Shift.MORNING and Shift.EVENING.value not in worked:
                candidate.add("shift_separation")
            elif shift == Shift.EVENING and Shift.MORNING.value not in worked:
                candidate.add("shift_separation")

            target = get_weekly_hour_cap(instructor.tier)
            if instructor.weekly_hours < target - UNDERUTILIZATION_MARGIN:
                candidate.add("underutilized")
            if shift is not None and shift.value in worked:
                candidate.add("shift_concentration")

            scores.append(candidate)

        return scores

    def select(
        self,
        state: AllocationState,
        class_format: str,
        location: str,
        day: Day,
        time: str,
        duration: float,
    ) -> InstructorScore | None:
        """Highest-scoring eligible instructor; ties go to the earlier roster name."""
        chosen = None
        for candidate in self.score_candidates(state, class_format, location, day, time, duration):
            if chosen is None or candidate.score > chosen.score:
                chosen = candidate

        if chosen is None:
            logger.debug(
                f"No eligible instructor for {class_format} at {location} {day.value} {time}"
            )
        return chosen
