"""Construction phases of the weekly schedule.

Each phase is a plain function taking the shared PhaseContext and the current
AllocationState and returning the state. Phases only ever add assignments:
- Phase 0 (seed): lock in the configured must-run classes
- Phase 1 (opening): guarantee a class at the primary location's opening time
- Phase 2 (fill): walk every operating slot and add distinct formats up to a
  target parallelism
- Phase 3 (top-up): place under-utilised instructors in their specialties
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from .config import ConfigLoader
from .constants import (
    DAYS_ORDER,
    MAX_DAILY_CLASSES,
    MAX_DAILY_HOURS,
    PHASE_FILL,
    PHASE_OPENING,
    PHASE_SEED,
    PHASE_TOP_UP,
    TOP_PERFORMER_THRESHOLD,
    TOP_UP_SETTINGS,
    get_available_time_slots,
    get_weekly_hour_cap,
)
from .constraints import ConstraintEngine, Violation
from .models import Day, Objective, ScheduledAssignment, ViolationKind
from .performance import PerformanceIndex
from .ranking import CandidateRanker
from .selection import InstructorSelector
from .state import AllocationState
from .utils import is_peak_hour, make_assignment_id

logger = logging.getLogger(__name__)


@dataclass
class PhaseContext:
    """Read-only collaborators shared by all phases."""

    index: PerformanceIndex
    engine: ConstraintEngine
    ranker: CandidateRanker
    selector: InstructorSelector
    config: ConfigLoader
    objective: Objective = Objective.BALANCED
    days: list[Day] = field(default_factory=lambda: list(DAYS_ORDER))
    rng: random.Random = field(default_factory=lambda: random.Random(0))
    prediction_variance: float = 0.0


Phase = Callable[[PhaseContext, AllocationState], AllocationState]


def _predict(ctx: PhaseContext, participants: float, revenue: float) -> tuple[float, float]:
    """Apply the optional seeded jitter to a historical prediction."""
    if ctx.prediction_variance <= 0:
        return participants, revenue
    factor = 1 + ctx.rng.uniform(-ctx.prediction_variance, ctx.prediction_variance)
    return round(participants * factor, 1), round(revenue * factor, 1)


def build_assignment(
    ctx: PhaseContext,
    state: AllocationState,
    class_format: str,
    location: str,
    day: Day,
    time: str,
    instructor: str,
    participants: float,
    revenue: float,
    is_locked: bool = False,
) -> ScheduledAssignment:
    """Create an assignment with its duration, prediction and identifier."""
    participants, revenue = _predict(ctx, participants, revenue)
    return ScheduledAssignment(
        class_format=class_format,
        location=location,
        day=day,
        time=time,
        duration=ctx.config.formats.get_duration(class_format),
        instructor=instructor,
        participants=participants,
        revenue=revenue,
        is_top_performer=participants > TOP_PERFORMER_THRESHOLD,
        is_locked=is_locked,
        id=make_assignment_id(location, day.value, time, class_format, state.next_index()),
    )


def check_assignment(
    ctx: PhaseContext, state: AllocationState, proposed: ScheduledAssignment
) -> list[Violation]:
    """Run every constraint for a proposal against the current state."""
    return ctx.engine.check_proposal(
        state.assignments_at(proposed.location, proposed.day),
        proposed,
        state.get_instructor(proposed.instructor),
    )


def _describe(violations: list[Violation]) -> str:
    return "; ".join(v.message for v in violations)


def _slot_has_room(
    ctx: PhaseContext, state: AllocationState, location: str, day: Day, time: str
) -> bool:
    """Probe capacity with a class of the default length."""
    probe = ScheduledAssignment(
        class_format="",
        location=location,
        day=day,
        time=time,
        duration=ctx.config.formats.default_duration,
        instructor="",
    )
    return ctx.engine.capacity_available(state.assignments_at(location, day), probe)


def _day_full(ctx: PhaseContext, state: AllocationState, day: Day) -> bool:
    cap = ctx.config.formats.get_day_class_cap(day)
    return cap is not None and state.count_on_day(day) >= cap


def place_best(
    ctx: PhaseContext,
    state: AllocationState,
    location: str,
    day: Day,
    time: str,
    phase: str,
) -> ScheduledAssignment | ViolationKind:
    """Commit the best (format, instructor) pair for a slot.

    Ranked formats not yet running in the slot are tried in order until one
    has an eligible instructor.

    Returns:
        The committed assignment, or the reason nothing could be placed
    """
    ranked = ctx.ranker.rank(location, day, time, exclude=state.formats_at_slot(location, day, time))
    if not ranked:
        return ViolationKind.INFEASIBLE_SLOT

    reason = ViolationKind.INFEASIBLE_SLOT
    for candidate in ranked:
        duration = ctx.config.formats.get_duration(candidate.class_format)
        choice = ctx.selector.select(
            state, candidate.class_format, location, day, time, duration
        )
        if choice is None:
            continue

        proposed = build_assignment(
            ctx,
            state,
            candidate.class_format,
            location,
            day,
            time,
            choice.name,
            candidate.avg_participants,
            candidate.avg_revenue,
        )
        violations = check_assignment(ctx, state, proposed)
        if violations:
            reason = violations[0].kind
            logger.debug(
                f"{candidate.class_format} at {location} {day.value} {time} "
                f"rejected: {_describe(violations)}"
            )
            continue

        return state.commit(proposed, phase)

    return reason


def seed_phase(ctx: PhaseContext, state: AllocationState) -> AllocationState:
    """Phase 0: commit the must-run seed classes, locked."""
    seeds = [seed for seed in ctx.config.seeds if seed.day in ctx.days]
    logger.info(f"Phase 0: Scheduling {len(seeds)} seed classes")

    for seed in seeds:
        stat = ctx.index.stats_for(seed.class_format, seed.location, seed.day, seed.time)
        participants = stat.avg_participants if not stat.is_empty else seed.avg_participants

        proposed = build_assignment(
            ctx,
            state,
            seed.class_format,
            seed.location,
            seed.day,
            seed.time,
            seed.instructor,
            participants,
            stat.avg_revenue,
            is_locked=True,
        )

        if ctx.config.instructors.is_excluded(seed.instructor):
            violations = [
                Violation(
                    ViolationKind.INFEASIBLE_SLOT,
                    f"{seed.instructor} is excluded from scheduling",
                )
            ]
        else:
            violations = check_assignment(ctx, state, proposed)

        if violations:
            logger.info(
                f"Could not place seed {seed.class_format} at {seed.location} "
                f"{seed.day.value} {seed.time}: {_describe(violations)}"
            )
            state.skip(
                PHASE_SEED,
                seed.location,
                seed.day,
                seed.time,
                violations[0].kind,
                _describe(violations),
            )
            continue

        state.commit(proposed, PHASE_SEED)

    logger.info(f"Phase 0 complete: {state.phase_counts.get(PHASE_SEED, 0)} seed classes placed")
    return state


def opening_phase(ctx: PhaseContext, state: AllocationState) -> AllocationState:
    """Phase 1: a class at the primary location's opening time on opening days."""
    locations = ctx.config.locations
    primary = locations.primary_location
    opening_time = locations.opening_time

    if not primary or locations.get_location(primary) is None:
        logger.info("Phase 1: No primary location configured, skipping")
        return state

    days = [day for day in locations.opening_days if day in ctx.days]
    logger.info(f"Phase 1: Ensuring {opening_time} classes at {primary} on {len(days)} days")

    for day in days:
        if state.has_assignment_at(primary, day, opening_time):
            continue

        placed = place_best(ctx, state, primary, day, opening_time, PHASE_OPENING)
        if isinstance(placed, ViolationKind):
            state.skip(
                PHASE_OPENING,
                primary,
                day,
                opening_time,
                placed,
                "no eligible format and instructor for the opening class",
            )
            continue

        logger.info(
            f"Opening class for {day.value}: {placed.class_format} with {placed.instructor}"
        )

    return state


def target_parallelism(ctx: PhaseContext, location: str, time: str) -> int:
    """Number of distinct classes Phase 2 aims for in a slot."""
    capacity = ctx.config.locations.get_capacity(location)

    if ctx.objective == Objective.REVENUE and is_peak_hour(time):
        return capacity
    if ctx.objective == Objective.ATTENDANCE:
        return min(2, capacity)
    if ctx.config.locations.is_parallel_time(location, time):
        return min(2, capacity)
    return 1


def fill_phase(ctx: PhaseContext, state: AllocationState) -> AllocationState:
    """Phase 2: fill every operating slot up to its target parallelism."""
    logger.info(f"Phase 2: Filling slots with {ctx.objective.value} optimization")
    location_names = ctx.config.locations.get_location_names()

    for day in ctx.days:
        for location in location_names:
            for time in get_available_time_slots(day):
                if _day_full(ctx, state, day):
                    break

                target = target_parallelism(ctx, location, time)
                reason = None
                while len(state.assignments_at(location, day, time)) < target:
                    if _day_full(ctx, state, day):
                        break
                    if not _slot_has_room(ctx, state, location, day, time):
                        logger.debug(f"Studio capacity reached for {location} {day.value} {time}")
                        break

                    placed = place_best(ctx, state, location, day, time, PHASE_FILL)
                    if isinstance(placed, ViolationKind):
                        reason = placed
                        break

                if (
                    reason is not None
                    and not state.has_assignment_at(location, day, time)
                    and not ctx.index.slot_records(location, day, time).empty
                ):
                    state.skip(PHASE_FILL, location, day, time, reason)

        logger.info(f"{day.value.capitalize()}: {state.count_on_day(day)} classes")

    logger.info(f"Phase 2 complete: {state.phase_counts.get(PHASE_FILL, 0)} classes added")
    return state


def _top_up_instructor(
    ctx: PhaseContext, state: AllocationState, name: str
) -> int:
    """Place one instructor in their specialties until the weekly target is met."""
    tolerance, specialty_count, min_average, peak_only = TOP_UP_SETTINGS[ctx.objective]
    instructor = state.get_instructor(name)
    target = get_weekly_hour_cap(instructor.tier)

    if instructor.weekly_hours >= target - tolerance:
        return 0

    specialties = [
        s for s in ctx.index.instructor_specialties(name) if s.avg_participants > min_average
    ][:specialty_count]

    added = 0
    for specialty in specialties:
        class_format = specialty.class_format
        for location in ctx.config.locations.get_location_names():
            if not ctx.engine.format_allowed_at_location(class_format, location):
                continue

            for day in ctx.days:
                if instructor.weekly_hours >= target:
                    return added
                if (
                    instructor.hours_on(day) >= MAX_DAILY_HOURS
                    or instructor.classes_on(day) >= MAX_DAILY_CLASSES
                    or _day_full(ctx, state, day)
                ):
                    continue

                times = get_available_time_slots(day)
                if peak_only:
                    times = [t for t in times if is_peak_hour(t)]

                for time in times:
                    if class_format in state.formats_at_slot(location, day, time):
                        continue

                    proposed = build_assignment(
                        ctx, state, class_format, location, day, time, name,
                        specialty.avg_participants, 0.0,
                    )
                    if check_assignment(ctx, state, proposed):
                        continue

                    # Prefer the instructor's own history for this exact slot
                    stat = ctx.index.stats_for(class_format, location, day, time, name)
                    if not stat.is_empty:
                        proposed = build_assignment(
                            ctx, state, class_format, location, day, time, name,
                            stat.avg_participants, stat.avg_revenue,
                        )

                    state.commit(proposed, PHASE_TOP_UP)
                    added += 1
                    break

    return added


def top_up_phase(ctx: PhaseContext, state: AllocationState) -> AllocationState:
    """Phase 3: raise under-utilised instructors towards their weekly target."""
    logger.info("Phase 3: Topping up instructor hours")

    for name in ctx.selector.roster:
        added = _top_up_instructor(ctx, state, name)
        if added:
            logger.debug(f"Added {added} classes for {name}")

    logger.info(f"Phase 3 complete: {state.phase_counts.get(PHASE_TOP_UP, 0)} classes added")
    return state


DEFAULT_PHASES: list[Phase] = [seed_phase, opening_phase, fill_phase, top_up_phase]
