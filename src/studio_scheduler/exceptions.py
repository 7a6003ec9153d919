"""Custom exceptions for the studio scheduler."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .scheduler.models import ValidationResult


class SchedulerError(Exception):
    """Base exception for scheduler errors."""

    pass


class DataLoadError(SchedulerError):
    """Historical records or schedule file could not be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load '{path}': {reason}")


class MissingColumnsError(DataLoadError):
    """Records file lacks required columns."""

    def __init__(self, path: str, missing: list[str], available: list[str] | None = None):
        self.missing = missing
        self.available = available or []
        reason = f"missing required columns: {', '.join(missing)}"
        if self.available:
            reason += f". Available columns: {', '.join(self.available)}"
        super().__init__(path, reason)


class ConfigError(SchedulerError):
    """Configuration file is malformed."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        location = f" in '{path}'" if path else ""
        super().__init__(f"Invalid configuration{location}: {message}")


class AssignmentRejectedError(SchedulerError):
    """Proposed assignment hit a hard, non-overridable violation."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        super().__init__(result.error_message or "Assignment rejected")


class OverrideRequiredError(SchedulerError):
    """Proposed assignment breaks a soft limit and needs explicit consent."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        super().__init__(
            result.warning_message or "Assignment requires an explicit override"
        )
