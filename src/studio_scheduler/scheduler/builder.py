"""Greedy phased schedule builder."""

import logging
import random
from collections import defaultdict
from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from .config import ConfigLoader
from .constants import DAYS_ORDER
from .constraints import ConstraintEngine
from .models import (
    Day,
    HistoricalClassRecord,
    Objective,
    ScheduleResult,
    ScheduleStatistics,
)
from .performance import PerformanceIndex
from .phases import DEFAULT_PHASES, Phase, PhaseContext
from .ranking import CandidateRanker
from .selection import InstructorSelector, build_roster
from .state import AllocationState
from .utils import time_to_minutes
from .validator import audit_schedule

logger = logging.getLogger(__name__)


class ScheduleBuilder:
    """
    Weekly class scheduler built from historical performance.

    Runs an ordered list of phases over one AllocationState. No phase undoes
    an earlier commit, so the result is a greedy (not optimal) schedule that
    satisfies every facility and labour rule.
    """

    def __init__(
        self,
        index: PerformanceIndex,
        config: ConfigLoader | None = None,
        objective: Objective = Objective.BALANCED,
        target_day: Day | None = None,
        seed: int | None = None,
        prediction_variance: float = 0.0,
        phases: list[Phase] | None = None,
    ):
        """
        Initialize the builder.

        Args:
            index: Historical performance index.
            config: Scheduling configuration. Defaults to the index's config.
            objective: Weighting used to rank candidate formats.
            target_day: Restrict construction to a single day.
            seed: Seed for the prediction jitter source.
            prediction_variance: Relative jitter applied to predicted
                                 participants and revenue (0 disables it).
            phases: Phase functions to run, in order.
        """
        self.index = index
        self.config = config or index.config
        self.objective = Objective(objective)
        self.target_day = Day.from_name(target_day) if target_day else None
        self.seed = seed
        self.prediction_variance = prediction_variance
        self.phases = phases if phases is not None else list(DEFAULT_PHASES)

        self.engine = ConstraintEngine(self.config)
        self.ranker = CandidateRanker(index, self.engine, self.objective)
        self.selector = InstructorSelector(index, self.engine, build_roster(index, self.config))

    def build(self) -> ScheduleResult:
        """Construct the weekly schedule.

        Returns:
            ScheduleResult with assignments, skipped slots and statistics
        """
        ctx = PhaseContext(
            index=self.index,
            engine=self.engine,
            ranker=self.ranker,
            selector=self.selector,
            config=self.config,
            objective=self.objective,
            days=[self.target_day] if self.target_day else list(DAYS_ORDER),
            rng=random.Random(self.seed),
            prediction_variance=self.prediction_variance,
        )

        logger.info(
            f"Building schedule from {len(self.index)} records for "
            f"{len(self.selector.roster)} instructors ({self.objective.value})"
        )

        state = AllocationState(self.config)
        for phase in self.phases:
            state = phase(ctx, state)

        self._log_utilization(state)
        problems = audit_schedule(state.assignments, self.config)
        if problems:
            logger.warning(f"Schedule verification found {len(problems)} violations")
            for problem in problems:
                logger.warning(f"  {problem}")
        else:
            logger.info("Studio capacity and instructor limits verified")

        return self._build_result(state)

    def _log_utilization(self, state: AllocationState) -> None:
        for name in sorted(state.instructors):
            instructor = state.instructors[name]
            if instructor.weekly_hours == 0:
                continue
            logger.info(
                f"{name}: {instructor.weekly_hours:g}h over "
                f"{len(instructor.working_days)} days"
            )

    def _build_result(self, state: AllocationState) -> ScheduleResult:
        """Build the schedule result.

        Args:
            state: Final allocation state

        Returns:
            ScheduleResult object
        """
        day_rank = {day: i for i, day in enumerate(DAYS_ORDER)}
        assignments = sorted(
            state.assignments,
            key=lambda a: (day_rank[a.day], time_to_minutes(a.time), a.location, a.class_format),
        )

        by_day: dict[str, int] = defaultdict(int)
        by_location: dict[str, int] = defaultdict(int)
        for assignment in assignments:
            by_day[assignment.day.value] += 1
            by_location[assignment.location] += 1

        working = {
            name: instructor
            for name, instructor in sorted(state.instructors.items())
            if instructor.weekly_hours > 0
        }
        instructor_hours = {name: i.weekly_hours for name, i in working.items()}
        balance = 0.0
        if instructor_hours:
            balance = round(float(pd.Series(list(instructor_hours.values())).std(ddof=0)), 2)

        statistics = ScheduleStatistics(
            total_assignments=len(assignments),
            total_skipped=len(state.skipped),
            total_hours=sum(a.duration for a in assignments),
            predicted_participants=round(sum(a.participants for a in assignments), 1),
            predicted_revenue=round(sum(a.revenue for a in assignments), 1),
            instructor_balance=balance,
            by_day=dict(by_day),
            by_location=dict(by_location),
            by_phase=dict(state.phase_counts),
            instructor_hours=instructor_hours,
            instructor_days={name: len(i.working_days) for name, i in working.items()},
        )

        return ScheduleResult(
            assignments=assignments,
            skipped=list(state.skipped),
            statistics=statistics,
            objective=self.objective,
            target_day=self.target_day,
        )


def create_builder(
    records: Iterable[HistoricalClassRecord],
    config_dir: Path | None = None,
    objective: Objective = Objective.BALANCED,
    target_day: Day | None = None,
    seed: int | None = None,
    prediction_variance: float = 0.0,
) -> ScheduleBuilder:
    """Create a schedule builder with all dependencies.

    Args:
        records: Historical class records
        config_dir: Optional directory with locations.json, instructors.json,
                    formats.json and seed-classes.json
        objective: Ranking objective
        target_day: Optional single day to build
        seed: Optional seed for prediction jitter
        prediction_variance: Relative prediction jitter

    Returns:
        Configured ScheduleBuilder instance
    """
    config = ConfigLoader(config_dir)
    index = PerformanceIndex(records, config)
    return ScheduleBuilder(
        index,
        config,
        objective=objective,
        target_day=target_day,
        seed=seed,
        prediction_variance=prediction_variance,
    )
