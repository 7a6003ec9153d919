"""Export functionality for generated schedules."""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd

from .scheduler.models import ScheduleResult


class BaseExporter(ABC):
    """Base class for exporters."""

    @abstractmethod
    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to file.

        Args:
            result: ScheduleResult to export
            output_path: Path to output file or directory
        """
        pass


def _assignment_rows(result: ScheduleResult) -> list[dict]:
    return [assignment.to_dict() for assignment in result.assignments]


def _summary_rows(result: ScheduleResult) -> list[dict]:
    stats = result.statistics
    return [
        {"metric": "generation_date", "value": result.generation_date},
        {"metric": "objective", "value": result.objective.value},
        {"metric": "target_day", "value": result.target_day.value if result.target_day else "all"},
        {"metric": "total_assignments", "value": stats.total_assignments},
        {"metric": "total_skipped", "value": stats.total_skipped},
        {"metric": "total_hours", "value": stats.total_hours},
        {"metric": "predicted_participants", "value": stats.predicted_participants},
        {"metric": "predicted_revenue", "value": stats.predicted_revenue},
        {"metric": "instructor_balance", "value": stats.instructor_balance},
    ]


def _instructor_rows(result: ScheduleResult) -> list[dict]:
    stats = result.statistics
    return [
        {
            "instructor": name,
            "weekly_hours": hours,
            "working_days": stats.instructor_days.get(name, 0),
        }
        for name, hours in stats.instructor_hours.items()
    ]


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """Initialize exporter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(
                result.to_dict(),
                f,
                indent=self.indent,
                ensure_ascii=self.ensure_ascii,
            )


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to CSV files.

        Creates up to four files:
        - assignments.csv: Scheduled classes
        - skipped.csv: Slots that could not be filled
        - instructors.csv: Weekly hours per instructor
        - summary.csv: Overall summary

        Args:
            result: ScheduleResult to export
            output_path: Path to output directory
        """
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        self._write_csv(output_dir / "assignments.csv", _assignment_rows(result))
        self._write_csv(output_dir / "skipped.csv", [s.to_dict() for s in result.skipped])
        self._write_csv(output_dir / "instructors.csv", _instructor_rows(result))
        self._write_csv(output_dir / "summary.csv", _summary_rows(result))

    def _write_csv(self, output_path: Path, rows: list[dict]) -> None:
        """Write rows to CSV file."""
        if not rows:
            return

        with open(output_path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=rows[0].keys())
            writer.writeheader()
            writer.writerows(rows)


class ExcelExporter(BaseExporter):
    """Export to Excel format (single workbook with multiple sheets)."""

    def export(self, result: ScheduleResult, output_path: str | Path) -> None:
        """Export schedule result to an Excel file.

        Creates workbook with sheets:
        - Schedule: Scheduled classes
        - Instructors: Weekly hours per instructor
        - Skipped: Slots that could not be filled
        - Summary: Overall summary

        Args:
            result: ScheduleResult to export
            output_path: Path to output Excel file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            self._write_sheet(writer, "Schedule", _assignment_rows(result), ["id"])
            self._write_sheet(writer, "Instructors", _instructor_rows(result), ["instructor"])
            self._write_sheet(
                writer, "Skipped", [s.to_dict() for s in result.skipped], ["phase"]
            )
            self._write_sheet(writer, "Summary", _summary_rows(result), ["metric", "value"])

    def _write_sheet(
        self,
        writer: pd.ExcelWriter,
        sheet_name: str,
        rows: list[dict],
        empty_columns: list[str],
    ) -> None:
        df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=empty_columns)
        df.columns = [str(c).replace("_", " ").title() for c in df.columns]
        df.to_excel(writer, sheet_name=sheet_name, index=False)


def get_exporter(format_type: str) -> BaseExporter:
    """Get appropriate exporter for format type.

    Args:
        format_type: Export format ('json', 'csv', 'excel')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format type is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
    }

    if format_type not in exporters:
        raise ValueError(
            f"Unsupported format: {format_type}. Supported: {', '.join(exporters.keys())}"
        )

    return exporters[format_type]()
