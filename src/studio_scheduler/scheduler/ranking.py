"""Candidate format ranking for a single slot."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .constants import MIN_AVERAGE_PARTICIPANTS, OBJECTIVE_WEIGHTS, REVENUE_NORMALIZER
from .constraints import ConstraintEngine
from .models import Day, Objective
from .performance import PerformanceIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedFormat:
    """A candidate format for a slot with its objective score."""

    class_format: str
    score: float
    avg_participants: float
    avg_revenue: float
    count: int
    is_priority: bool = False


def objective_score(objective: Objective, avg_participants: float, avg_revenue: float) -> float:
    """Weighted blend of participants and normalized revenue."""
    revenue_weight, participants_weight = OBJECTIVE_WEIGHTS[objective]
    normalized_revenue = avg_revenue / REVENUE_NORMALIZER
    return revenue_weight * normalized_revenue + participants_weight * avg_participants


class CandidateRanker:
    """Ranks the formats that have run in a slot before.

    Formats must be allowed at the location, must not be on the day's avoid
    list and must have averaged at least MIN_AVERAGE_PARTICIPANTS. Formats on
    the day's priority list always rank above the rest.
    """

    def __init__(
        self,
        index: PerformanceIndex,
        engine: ConstraintEngine,
        objective: Objective = Objective.BALANCED,
        min_average: float = MIN_AVERAGE_PARTICIPANTS,
    ):
        self.index = index
        self.engine = engine
        self.objective = objective
        self.min_average = min_average

    def rank(
        self,
        location: str,
        day: Day,
        time: str,
        exclude: Iterable[str] = (),
    ) -> list[RankedFormat]:
        """Rank candidate formats for a slot.

        Args:
            location: Location name
            day: Day of week
            time: Start time (HH:MM)
            exclude: Formats to leave out (e.g. already running in the slot)

        Returns:
            Candidates, best first. Empty when nothing qualifies.
        """
        records = self.index.slot_records(location, day, time)
        if records.empty:
            return []

        guideline = self.engine.config.formats.get_guideline(day)
        avoid = set(guideline.avoid)
        priority = set(guideline.priority)
        excluded = set(exclude)

        candidates = []
        for class_format in sorted(set(records["class_format"])):
            if class_format in excluded or class_format in avoid:
                continue
            if not self.engine.format_allowed_at_location(class_format, location):
                continue

            stat = self.index.stats_for(class_format, location, day, time)
            if stat.avg_participants < self.min_average:
                continue

            candidates.append(
                RankedFormat(
                    class_format=class_format,
                    score=round(
                        objective_score(self.objective, stat.avg_participants, stat.avg_revenue),
                        3,
                    ),
                    avg_participants=stat.avg_participants,
                    avg_revenue=stat.avg_revenue,
                    count=stat.count,
                    is_priority=class_format in priority,
                )
            )

        candidates.sort(key=lambda c: (not c.is_priority, -c.score, c.class_format))
        return candidates

    def best(
        self,
        location: str,
        day: Day,
        time: str,
        exclude: Iterable[str] = (),
    ) -> RankedFormat | None:
        """Top-ranked format for a slot, or None when no candidate qualifies."""
        ranked = self.rank(location, day, time, exclude)
        if not ranked:
            logger.debug(f"No candidate format for {location} {day.value} {time}")
            return None
        return ranked[0]
