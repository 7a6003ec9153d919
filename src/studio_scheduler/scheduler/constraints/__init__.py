"""Constraint implementations for the scheduler."""

from .base import ConstraintBase, Violation
from .engine import ConstraintEngine
from .hard import HardConstraints
from .soft import SoftConstraints

__all__ = [
    "ConstraintBase",
    "ConstraintEngine",
    "HardConstraints",
    "SoftConstraints",
    "Violation",
]
