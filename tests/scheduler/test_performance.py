"""Tests for the historical performance index."""

from studio_scheduler.scheduler.config import ConfigLoader, InstructorConfig, SeedConfig
from studio_scheduler.scheduler.models import Day, PerformanceStat
from studio_scheduler.scheduler.performance import PerformanceIndex

KWALITY = "Kwality House, Kemps Corner"
SUPREME = "Supreme HQ, Bandra"


class TestStats:
    """Tests for slot statistics."""

    def test_average_over_matching_records(self, make_record, default_config):
        records = [
            make_record(participants=10, revenue=1000.0),
            make_record(participants=7, revenue=500.0),
            make_record(participants=8, revenue=600.0),
        ]
        index = PerformanceIndex(records, default_config)
        stat = index.stats_for("Studio Barre 57", KWALITY, Day.MONDAY, "07:30")
        assert stat == PerformanceStat(avg_participants=8.3, avg_revenue=700.0, count=3)

    def test_instructor_filter(self, make_record, default_config):
        records = [
            make_record(instructor="Anisha Shah", participants=12),
            make_record(instructor="Jordan Lee", participants=6),
        ]
        index = PerformanceIndex(records, default_config)
        stat = index.stats_for(
            "Studio Barre 57", KWALITY, Day.MONDAY, "07:30", instructor="Jordan Lee"
        )
        assert stat.avg_participants == 6.0
        assert stat.count == 1

    def test_unknown_slot_is_zero(self, make_record, default_config):
        index = PerformanceIndex([make_record()], default_config)
        stat = index.stats_for("Studio Barre 57", KWALITY, Day.TUESDAY, "07:30")
        assert stat is PerformanceStat.ZERO
        assert stat.is_empty

    def test_day_accepts_name(self, make_record, default_config):
        index = PerformanceIndex([make_record()], default_config)
        assert not index.slot_records(KWALITY, "Monday", "07:30").empty

    def test_unpadded_record_times_match(self, make_record, default_config):
        records = [make_record(time="7:30", participants=9), make_record(participants=11)]
        index = PerformanceIndex(records, default_config)
        stat = index.stats_for("Studio Barre 57", KWALITY, Day.MONDAY, "07:30")
        assert stat.count == 2
        assert stat.avg_participants == 10.0
        assert index.stats_for("Studio Barre 57", KWALITY, Day.MONDAY, "7:30 AM").count == 2

    def test_empty_history(self, default_config):
        index = PerformanceIndex([], default_config)
        assert len(index) == 0
        assert index.stats_for("Studio FIT", KWALITY, Day.MONDAY, "07:30").is_empty
        assert index.top_performers() == []
        assert index.instructor_specialties("Anisha Shah") == []


class TestHostedRecords:
    """Hosted sessions never count as history."""

    def test_flagged_records_dropped(self, make_record, default_config):
        records = [make_record(), make_record(participants=40, is_hosted=True)]
        index = PerformanceIndex(records, default_config)
        assert len(index) == 1
        assert index.stats_for("Studio Barre 57", KWALITY, Day.MONDAY, "07:30").avg_participants == 8.0

    def test_hosted_format_name_dropped(self, make_record, default_config):
        records = [make_record(class_format="Hosted Brunch Barre", participants=30)]
        index = PerformanceIndex(records, default_config)
        assert len(index) == 0
        assert index.slot_records(KWALITY, Day.MONDAY, "07:30").empty


class TestBestInstructor:
    """Tests for best_instructor."""

    def test_highest_average_wins(self, make_record, default_config):
        records = [
            make_record(instructor="Jordan Lee", participants=9),
            make_record(instructor="Anisha Shah", participants=12),
            make_record(instructor="Anisha Shah", participants=10),
        ]
        index = PerformanceIndex(records, default_config)
        assert index.best_instructor("Studio Barre 57", KWALITY, Day.MONDAY, "07:30") == "Anisha Shah"

    def test_tie_goes_to_first_name(self, make_record, default_config):
        records = [
            make_record(instructor="Zara Khan", participants=9),
            make_record(instructor="Jordan Lee", participants=9),
        ]
        index = PerformanceIndex(records, default_config)
        assert index.best_instructor("Studio Barre 57", KWALITY, Day.MONDAY, "07:30") == "Jordan Lee"

    def test_excluded_instructor_skipped(self, make_record, default_config):
        records = [
            make_record(instructor="Nishanth Raj", participants=20),
            make_record(instructor="Jordan Lee", participants=8),
        ]
        index = PerformanceIndex(records, default_config)
        assert index.best_instructor("Studio Barre 57", KWALITY, Day.MONDAY, "07:30") == "Jordan Lee"

    def test_no_history(self, default_config):
        index = PerformanceIndex([], default_config)
        assert index.best_instructor("Studio Barre 57", KWALITY, Day.MONDAY, "07:30") is None

    def test_seed_wins_over_history(self, make_record):
        config = ConfigLoader(
            seeds=SeedConfig(
                data=[
                    {
                        "class_format": "Studio Barre 57",
                        "location": KWALITY,
                        "day": "monday",
                        "time": "07:30",
                        "instructor": "Pranjali Jain",
                    }
                ]
            )
        )
        records = [make_record(instructor="Anisha Shah", participants=15)]
        index = PerformanceIndex(records, config)
        assert index.best_instructor("Studio Barre 57", KWALITY, Day.MONDAY, "07:30") == "Pranjali Jain"
        assert index.best_instructor("Studio Barre 57", KWALITY, Day.TUESDAY, "07:30") is None


class TestSpecialties:
    """Tests for instructor_specialties."""

    def test_ordering(self, make_record, default_config):
        records = [
            make_record(class_format="Studio FIT", time="09:00", participants=6),
            make_record(class_format="Studio FIT", time="10:00", participants=8),
            make_record(class_format="Studio Mat 57", time="11:00", participants=14),
            make_record(class_format="Studio Barre 57", time="18:00", participants=9),
        ]
        index = PerformanceIndex(records, default_config)
        specialties = index.instructor_specialties("Anisha Shah")
        assert [s.class_format for s in specialties] == [
            "Studio FIT",
            "Studio Mat 57",
            "Studio Barre 57",
        ]
        assert specialties[0].avg_participants == 7.0
        assert specialties[0].class_count == 2

    def test_limit(self, make_record, default_config):
        records = [make_record(class_format=f"Format {i}", time="09:00") for i in range(8)]
        index = PerformanceIndex(records, default_config)
        assert len(index.instructor_specialties("Anisha Shah")) == 5
        assert len(index.instructor_specialties("Anisha Shah", limit=2)) == 2


class TestTopPerformers:
    """Tests for top_performers."""

    def test_requires_repeat_and_threshold(self, make_record, default_config):
        records = [
            make_record(participants=12),
            make_record(participants=10),
            # Only ran once
            make_record(class_format="Studio FIT", time="09:00", participants=20),
            # Below threshold
            make_record(class_format="Studio Mat 57", time="10:00", participants=4),
            make_record(class_format="Studio Mat 57", time="10:00", participants=5),
        ]
        index = PerformanceIndex(records, default_config)
        performers = index.top_performers()
        assert len(performers) == 1
        assert performers[0].class_format == "Studio Barre 57"
        assert performers[0].avg_participants == 11.0
        assert performers[0].frequency == 2

    def test_disallowed_format_ignored(self, make_record, default_config):
        records = [
            make_record(class_format="Studio powerCycle", participants=15),
            make_record(class_format="Studio powerCycle", participants=15),
        ]
        index = PerformanceIndex(records, default_config)
        assert index.top_performers() == []

    def test_sorted_by_average_then_frequency(self, make_record, default_config):
        records = [
            make_record(time="09:00", participants=9),
            make_record(time="09:00", participants=9),
            make_record(time="09:00", participants=9),
            make_record(time="10:00", participants=9),
            make_record(time="10:00", participants=9),
            make_record(time="11:00", participants=13),
            make_record(time="11:00", participants=13),
        ]
        index = PerformanceIndex(records, default_config)
        performers = index.top_performers()
        assert [(p.time, p.frequency) for p in performers] == [
            ("11:00", 2),
            ("09:00", 3),
            ("10:00", 2),
        ]

    def test_without_instructor_merges_slots(self, make_record, default_config):
        records = [
            make_record(instructor="Anisha Shah", participants=9),
            make_record(instructor="Jordan Lee", participants=9),
        ]
        index = PerformanceIndex(records, default_config)
        assert index.top_performers() == []
        merged = index.top_performers(include_instructor=False)
        assert len(merged) == 1
        assert merged[0].instructor == ""
        assert merged[0].to_dict()["day"] == "monday"


class TestInstructorsAndLocations:
    """Tests for roster and location helpers."""

    def test_instructors_sorted_without_excluded(self, make_record, default_config):
        records = [
            make_record(instructor="Pranjali Jain"),
            make_record(instructor="Saniya Kapoor"),
            make_record(instructor="Anisha Shah"),
            make_record(instructor=""),
        ]
        index = PerformanceIndex(records, default_config)
        assert index.instructors() == ["Anisha Shah", "Pranjali Jain"]

    def test_custom_exclusions(self, make_record):
        config = ConfigLoader(instructors=InstructorConfig(data={"excluded": ["Jordan"]}))
        index = PerformanceIndex([make_record(instructor="Jordan Lee")], config)
        assert index.instructors() == []

    def test_location_average_and_times(self, make_record, default_config):
        records = [
            make_record(location=SUPREME, time="08:00", participants=10),
            make_record(location=SUPREME, time="18:00", participants=6),
        ]
        index = PerformanceIndex(records, default_config)
        assert index.location_average(SUPREME) == 8.0
        assert index.location_average(KWALITY) == 0.0
        assert index.time_slots_with_data(SUPREME) == {"08:00", "18:00"}
