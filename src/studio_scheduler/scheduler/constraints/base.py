"""Base class for constraint implementations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..models import HARD_VIOLATIONS, LABOUR_VIOLATIONS, Instructor, ScheduledAssignment, ViolationKind

if TYPE_CHECKING:
    from ..config import ConfigLoader


@dataclass(frozen=True)
class Violation:
    """A single failed rule for a proposed assignment."""

    kind: ViolationKind
    message: str

    @property
    def is_hard(self) -> bool:
        return self.kind in HARD_VIOLATIONS

    @property
    def is_labour(self) -> bool:
        return self.kind in LABOUR_VIOLATIONS


class ConstraintBase(ABC):
    """Abstract base class for constraint implementations."""

    def __init__(self, config: "ConfigLoader"):
        """
        Initialize constraint handler.

        Args:
            config: Configuration loader with location/instructor/format configs.
        """
        self.config = config

    @abstractmethod
    def check(
        self,
        proposed: ScheduledAssignment,
        assignments: list[ScheduledAssignment],
        instructor: Instructor,
    ) -> list[Violation]:
        """
        Evaluate the constraints for one proposed assignment.

        Args:
            proposed: The assignment being considered.
            assignments: Assignments already committed (at least those at the
                         proposed location and day).
            instructor: Current load of the proposed instructor.

        Returns:
            Every failed rule, in evaluation order. Empty when all pass.
        """
        pass
