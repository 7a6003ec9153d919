"""Tests for manual edit validation and schedule audits."""

import pytest

from studio_scheduler.exceptions import AssignmentRejectedError, OverrideRequiredError
from studio_scheduler.scheduler.models import Day, ViolationKind
from studio_scheduler.scheduler.validator import AssignmentValidator, audit_schedule

KWALITY = "Kwality House, Kemps Corner"
SUPREME = "Supreme HQ, Bandra"
KENKERE = "Kenkere House"
WEEKDAYS = [Day.MONDAY, Day.TUESDAY, Day.WEDNESDAY, Day.THURSDAY, Day.FRIDAY]


@pytest.fixture
def validator(default_config):
    return AssignmentValidator(default_config)


@pytest.fixture
def full_week(make_assignment):
    """Fifteen one-hour classes for a standard instructor."""
    return [
        make_assignment(location=SUPREME, day=day, time=time, instructor="Jordan Lee")
        for day in WEEKDAYS
        for time in ("08:00", "10:00", "18:00")
    ]


class TestHourLimit:
    """Weekly hour cap is an overridable warning."""

    def test_over_cap_needs_override(self, validator, full_week, make_assignment):
        proposed = make_assignment(
            class_format="Studio Mat 57", location=SUPREME, time="19:30", instructor="Jordan Lee"
        )
        result = validator.validate(full_week, proposed)

        assert result.valid
        assert result.warning_kind == ViolationKind.HOUR_LIMIT_EXCEEDED
        assert result.overridable
        assert result.requires_override
        assert result.projected_hours == 16.0
        assert result.advisories == []

    def test_approaching_limit(self, validator, full_week, make_assignment):
        existing = full_week[:12]
        proposed = make_assignment(location=SUPREME, day=Day.FRIDAY, time="08:00")
        result = validator.validate(existing, proposed)

        assert result.valid
        assert result.warning_kind == ViolationKind.APPROACHING_LIMIT
        assert not result.overridable
        assert result.projected_hours == 13.0

    def test_no_warning_with_headroom(self, validator, make_assignment):
        result = validator.validate([], make_assignment())
        assert result.valid
        assert result.warning_kind is None
        assert result.projected_hours == 1.0

    def test_apply_requires_override(self, validator, full_week, make_assignment):
        proposed = make_assignment(location=SUPREME, time="19:30")
        with pytest.raises(OverrideRequiredError) as exc_info:
            validator.apply(full_week, proposed)
        assert exc_info.value.result.projected_hours == 16.0

        updated = validator.apply(full_week, proposed, override=True)
        assert updated[-1] == proposed
        assert len(updated) == len(full_week) + 1
        assert len(full_week) == 15


class TestHardRejections:
    """Facility and tier failures can never be overridden."""

    def test_new_tier_whitelist(self, validator, make_assignment):
        proposed = make_assignment(class_format="Studio Mat 57", instructor="Kabir Mehta")
        result = validator.validate([], proposed)

        assert not result.valid
        assert result.error_kind == ViolationKind.TIER_WHITELIST_VIOLATION
        assert not result.overridable
        assert not result.requires_override

    def test_advanced_format(self, validator, make_assignment):
        proposed = make_assignment(class_format="Studio HIIT", instructor="Jordan Lee")
        result = validator.validate([], proposed)
        assert result.error_kind == ViolationKind.ADVANCED_FORMAT_VIOLATION

    def test_format_location(self, validator, make_assignment):
        proposed = make_assignment(class_format="Studio powerCycle", location=KWALITY)
        result = validator.validate([], proposed)
        assert result.error_kind == ViolationKind.FORMAT_LOCATION_VIOLATION

    @pytest.mark.parametrize("time", ["09:00", "09:15", "09:45", "08:15"])
    def test_capacity_beats_everything_else(self, validator, make_assignment, time):
        existing = [
            make_assignment(location=KENKERE, time="09:00", instructor="Anisha Shah"),
            make_assignment(location=KENKERE, time="09:00", instructor="Pranjali Jain"),
        ]
        proposed = make_assignment(
            class_format="Studio Mat 57", location=KENKERE, time=time, instructor="Kabir Mehta"
        )
        result = validator.validate(existing, proposed)

        assert not result.valid
        assert result.error_kind == ViolationKind.CAPACITY_VIOLATION
        assert not result.overridable
        assert ViolationKind.TIER_WHITELIST_VIOLATION in result.advisories

    def test_apply_rejects(self, validator, make_assignment):
        proposed = make_assignment(class_format="Studio Mat 57", instructor="Kabir Mehta")
        with pytest.raises(AssignmentRejectedError):
            validator.apply([], proposed, override=True)


class TestLabourWarnings:
    """Labour rules are soft failures that need an explicit override."""

    def test_daily_hours_need_override(self, validator, make_assignment):
        existing = [
            make_assignment(location=KENKERE, time=time)
            for time in ("07:30", "10:00", "17:00", "19:30")
        ]
        proposed = make_assignment(location=KENKERE, time="11:45")
        result = validator.validate(existing, proposed)

        assert result.valid
        assert result.warning_kind == ViolationKind.DAILY_HOURS_EXCEEDED
        assert result.warning_message == "Jordan Lee would teach 5h on monday (max 4h)"
        assert result.requires_override
        assert result.projected_hours == 5.0
        assert result.advisories == [
            ViolationKind.DAILY_HOURS_EXCEEDED,
            ViolationKind.DAILY_CLASS_LIMIT,
        ]

        with pytest.raises(OverrideRequiredError):
            validator.apply(existing, proposed)
        assert len(validator.apply(existing, proposed, override=True)) == 5

    def test_double_booking_needs_override(self, validator, make_assignment):
        existing = [make_assignment(location=KENKERE, time="09:00")]
        proposed = make_assignment(location=SUPREME, time="09:00")
        result = validator.validate(existing, proposed)

        assert result.valid
        assert result.warning_kind == ViolationKind.INSTRUCTOR_BUSY
        assert result.overridable
        assert result.advisories == [
            ViolationKind.INSTRUCTOR_BUSY,
            ViolationKind.LOCATION_CONFLICT,
        ]

        with pytest.raises(OverrideRequiredError) as exc_info:
            validator.apply(existing, proposed)
        assert exc_info.value.result.warning_kind == ViolationKind.INSTRUCTOR_BUSY

    def test_location_conflict_needs_override(self, validator, make_assignment):
        existing = [make_assignment(location=KWALITY, time="07:30")]
        proposed = make_assignment(location=SUPREME, time="18:00")
        result = validator.validate(existing, proposed)

        assert result.warning_kind == ViolationKind.LOCATION_CONFLICT
        assert result.warning_message == "Jordan Lee is already at Kwality House, Kemps Corner on monday"
        assert result.requires_override
        with pytest.raises(OverrideRequiredError):
            validator.apply(existing, proposed)

    def test_weekly_cap_message_takes_precedence(self, validator, full_week, make_assignment):
        proposed = make_assignment(location=KWALITY, time="19:30")
        result = validator.validate(full_week, proposed)

        assert result.warning_kind == ViolationKind.HOUR_LIMIT_EXCEEDED
        assert result.advisories == [ViolationKind.LOCATION_CONFLICT]
        assert result.requires_override


class TestAdvisories:
    """The public-hours restriction never blocks a manual edit."""

    def test_midday_public_class_is_advisory(self, validator, make_assignment):
        proposed = make_assignment(time="13:00")
        result = validator.validate([], proposed)

        assert result.valid
        assert result.advisories == [ViolationKind.TIME_RESTRICTED]
        assert not result.requires_override
        assert validator.apply([], proposed) == [proposed]

    def test_private_midday_class(self, validator, make_assignment):
        result = validator.validate([], make_assignment(time="13:00", is_private=True))
        assert result.advisories == []


class TestAcceptSuggestions:
    """Tests for accept_suggestions."""

    def test_suggestions_checked_in_order(self, validator, make_assignment):
        suggestions = [
            make_assignment(location=KENKERE, time="09:00", instructor="Anisha Shah"),
            make_assignment(location=KENKERE, time="09:00", instructor="Pranjali Jain"),
            make_assignment(location=KENKERE, time="09:15", instructor="Jordan Lee"),
        ]
        accepted, rejected = validator.accept_suggestions([], suggestions)

        assert accepted == suggestions[:2]
        [(suggestion, result)] = rejected
        assert suggestion is suggestions[2]
        assert result.error_kind == ViolationKind.CAPACITY_VIOLATION

    def test_never_overrides(self, validator, full_week, make_assignment):
        proposed = make_assignment(location=SUPREME, time="19:30")
        accepted, rejected = validator.accept_suggestions(full_week, [proposed])
        assert accepted == []
        assert rejected[0][1].warning_kind == ViolationKind.HOUR_LIMIT_EXCEEDED

    def test_strict_rejects_advisories(self, validator, make_assignment):
        proposed = make_assignment(time="13:00")

        accepted, rejected = validator.accept_suggestions([], [proposed])
        assert accepted == []
        assert rejected[0][1].advisories == [ViolationKind.TIME_RESTRICTED]

        accepted, rejected = validator.accept_suggestions([], [proposed], strict=False)
        assert accepted == [proposed]
        assert rejected == []

    def test_labour_breach_rejected_without_strict(self, validator, make_assignment):
        existing = [make_assignment(location=KWALITY, time="07:30")]
        proposed = make_assignment(location=SUPREME, time="18:00")

        accepted, rejected = validator.accept_suggestions(existing, [proposed], strict=False)
        assert accepted == []
        assert rejected[0][1].warning_kind == ViolationKind.LOCATION_CONFLICT


class TestAuditSchedule:
    """Tests for audit_schedule."""

    def test_clean_schedule(self, default_config, make_assignment):
        assignments = [
            make_assignment(time="07:30", instructor="Anisha Shah"),
            make_assignment(time="18:00", instructor="Anisha Shah"),
            make_assignment(time="07:30", instructor="Jordan Lee"),
        ]
        assert audit_schedule(assignments, default_config) == []

    def test_over_capacity(self, default_config, make_assignment):
        assignments = [
            make_assignment(location=KENKERE, time="09:00", instructor=name)
            for name in ("Anisha Shah", "Pranjali Jain", "Jordan Lee")
        ]
        problems = audit_schedule(assignments, default_config)
        assert "Kenkere House monday 09:00: 3 classes running, capacity 2" in problems

    def test_labour_problems(self, default_config, make_assignment):
        assignments = [
            make_assignment(location=KWALITY, time="07:30"),
            make_assignment(location=SUPREME, time="08:00"),
        ]
        problems = audit_schedule(assignments, default_config)
        assert "Jordan Lee is at several locations on monday" in problems
        assert "Jordan Lee has overlapping classes on monday" in problems

    def test_tier_problem_reported_once(self, default_config, make_assignment):
        assignments = [
            make_assignment(class_format="Studio Mat 57", day=day, instructor="Kabir Mehta")
            for day in (Day.MONDAY, Day.TUESDAY)
        ]
        problems = audit_schedule(assignments, default_config)
        assert problems == ["Kabir Mehta is a new instructor and cannot teach Studio Mat 57"]

    def test_hours_and_days(self, default_config, full_week, make_assignment):
        schedule = full_week + [make_assignment(location=SUPREME, day=Day.SATURDAY, time="10:00")]
        problems = audit_schedule(schedule, default_config)
        assert "Jordan Lee teaches 16h (cap 15h)" in problems
        assert "Jordan Lee works 6 days" in problems
