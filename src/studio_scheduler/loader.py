"""Loading of historical class records and schedule snapshots."""

import json
import logging
from pathlib import Path

import pandas as pd

from .exceptions import DataLoadError, MissingColumnsError
from .scheduler.models import Day, HistoricalClassRecord, ScheduledAssignment
from .scheduler.utils import normalize_time

logger = logging.getLogger(__name__)

# Canonical column -> accepted source headers, first match wins
COLUMN_ALIASES: dict[str, list[str]] = {
    "class_format": ["Cleaned Class", "Class Name", "class_format", "format"],
    "location": ["Location", "location"],
    "day": ["Day of the Week", "day_of_week", "day"],
    "time": ["Class Time", "class_time", "time"],
    "instructor": ["Teacher Name", "teacher_name", "instructor"],
    "participants": ["Participants", "participants"],
    "checked_in": ["Checked in", "checked_in"],
    "revenue": ["Total Revenue", "total_revenue", "revenue"],
    "late_cancellations": ["Late cancellations", "late_cancellations"],
    "is_hosted": ["Hosted", "is_hosted"],
}

REQUIRED_COLUMNS = ["class_format", "location", "day", "time"]
NUMERIC_COLUMNS = ["participants", "checked_in", "revenue", "late_cancellations"]

_TRUE_VALUES = {"true", "yes", "y", "1"}


def _read_frame(path: Path) -> pd.DataFrame:
    """Read a CSV or JSON records file into a DataFrame of strings."""
    try:
        if path.suffix.lower() == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                data = data.get("records", [])
            return pd.DataFrame(data)
        return pd.read_csv(path, dtype=str, keep_default_na=False)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DataLoadError(str(path), str(e)) from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DataLoadError(str(path), f"unreadable CSV: {e}") from e


def _normalize_columns(df: pd.DataFrame, path: Path) -> pd.DataFrame:
    """Rename source headers to canonical names and fill optional columns."""
    available = [str(c).strip() for c in df.columns]
    df.columns = available

    renames = {}
    for canonical, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in available:
                renames[alias] = canonical
                break

    missing = [c for c in REQUIRED_COLUMNS if c not in renames.values()]
    if missing:
        raise MissingColumnsError(str(path), missing, available)

    df = df.rename(columns=renames)[list(renames.values())].fillna("")

    for column in NUMERIC_COLUMNS:
        if column in df.columns:
            df[column] = pd.to_numeric(df[column], errors="coerce").fillna(0)
        else:
            df[column] = 0

    if "instructor" not in df.columns:
        df["instructor"] = ""
    if "is_hosted" in df.columns:
        df["is_hosted"] = df["is_hosted"].map(lambda v: str(v).strip().lower() in _TRUE_VALUES)
    else:
        df["is_hosted"] = False

    return df


def load_records(path: str | Path) -> list[HistoricalClassRecord]:
    """Load historical class records from a CSV export or JSON file.

    Rows with an unknown day or an unreadable time are skipped with a warning.

    Args:
        path: Path to the records file

    Returns:
        List of HistoricalClassRecord

    Raises:
        DataLoadError: If the file cannot be read
        MissingColumnsError: If a required column is absent
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(str(path), "file not found")

    df = _normalize_columns(_read_frame(path), path)

    records = []
    skipped = 0
    for row in df.to_dict(orient="records"):
        class_format = str(row["class_format"]).strip()
        location = str(row["location"]).strip()
        if not class_format or not location:
            skipped += 1
            continue
        try:
            day = Day.from_name(row["day"])
            time = normalize_time(row["time"])
        except ValueError:
            skipped += 1
            continue

        records.append(
            HistoricalClassRecord(
                class_format=class_format,
                location=location,
                day=day,
                time=time,
                instructor=str(row["instructor"] or "").strip(),
                participants=int(row["participants"]),
                checked_in=int(row["checked_in"]),
                revenue=float(row["revenue"]),
                late_cancellations=int(row["late_cancellations"]),
                is_hosted=bool(row["is_hosted"]),
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} malformed rows in {path.name}")
    logger.info(f"Loaded {len(records)} records from {path.name}")
    return records


def load_schedule(path: str | Path) -> list[ScheduledAssignment]:
    """Load a schedule snapshot written by the JSON exporter.

    Accepts either a full result document (with an "assignments" key) or a
    bare list of assignments.

    Raises:
        DataLoadError: If the file cannot be read or an assignment is malformed
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(str(path), "file not found")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DataLoadError(str(path), str(e)) from e

    entries = data.get("assignments", []) if isinstance(data, dict) else data
    try:
        return [ScheduledAssignment.from_dict(entry) for entry in entries]
    except (KeyError, TypeError, ValueError) as e:
        raise DataLoadError(str(path), f"malformed assignment: {e}") from e
