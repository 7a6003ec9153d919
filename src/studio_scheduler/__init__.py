"""Studio Scheduler - weekly fitness class timetables from historical data.

This module builds a conflict-free weekly class schedule across studio
locations from historical class records, and validates manual edits against
the same facility and labour rules.

Example usage:
    from studio_scheduler import load_records
    from studio_scheduler.scheduler import create_builder, Objective

    records = load_records("classes.csv")
    result = create_builder(records, objective=Objective.REVENUE).build()

    print(f"Total classes: {result.total_assigned}")

    for assignment in result.assignments:
        print(f"{assignment.day.value} {assignment.time} | {assignment.class_format} | {assignment.instructor}")

    # Export to JSON
    from studio_scheduler.exporters import JSONExporter
    exporter = JSONExporter()
    exporter.export(result, "schedule.json")
"""

from .exceptions import (
    AssignmentRejectedError,
    ConfigError,
    DataLoadError,
    MissingColumnsError,
    OverrideRequiredError,
    SchedulerError,
)
from .exporters import CSVExporter, ExcelExporter, JSONExporter, get_exporter
from .loader import load_records, load_schedule

__version__ = "0.1.0"

__all__ = [
    # Loading
    "load_records",
    "load_schedule",
    # Exporters
    "JSONExporter",
    "CSVExporter",
    "ExcelExporter",
    "get_exporter",
    # Exceptions
    "SchedulerError",
    "DataLoadError",
    "MissingColumnsError",
    "ConfigError",
    "AssignmentRejectedError",
    "OverrideRequiredError",
]
