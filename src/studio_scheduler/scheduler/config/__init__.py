"""Configuration loaders for the scheduler."""

from .formats import DayGuideline, FormatConfig
from .instructors import InstructorConfig
from .loader import ConfigLoader
from .locations import LocationConfig
from .seeds import SeedClass, SeedConfig

__all__ = [
    "ConfigLoader",
    "LocationConfig",
    "InstructorConfig",
    "FormatConfig",
    "DayGuideline",
    "SeedConfig",
    "SeedClass",
]
