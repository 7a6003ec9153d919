"""Unified configuration loader."""

from pathlib import Path

from .formats import FormatConfig
from .instructors import InstructorConfig
from .locations import LocationConfig
from .seeds import SeedConfig


class ConfigLoader:
    """Unified loader for all scheduling configuration files."""

    def __init__(
        self,
        config_dir: Path | None = None,
        *,
        locations: LocationConfig | None = None,
        instructors: InstructorConfig | None = None,
        formats: FormatConfig | None = None,
        seeds: SeedConfig | None = None,
    ):
        """
        Initialize configuration loader.

        Args:
            config_dir: Directory containing configuration files. Expected files:
                       - locations.json
                       - instructors.json
                       - formats.json
                       - seed-classes.json
                       Missing files fall back to built-in defaults.
            locations: Pre-built location config, overrides locations.json.
            instructors: Pre-built instructor config, overrides instructors.json.
            formats: Pre-built format config, overrides formats.json.
            seeds: Pre-built seed config, overrides seed-classes.json.
        """
        self.config_dir = Path(config_dir) if config_dir is not None else None

        self.locations = (
            locations if locations is not None else LocationConfig(self._get_path("locations.json"))
        )
        self.instructors = (
            instructors
            if instructors is not None
            else InstructorConfig(self._get_path("instructors.json"))
        )
        self.formats = formats if formats is not None else FormatConfig(self._get_path("formats.json"))
        self.seeds = seeds if seeds is not None else SeedConfig(self._get_path("seed-classes.json"))

    def _get_path(self, filename: str) -> Path | None:
        """Get path to config file if it exists."""
        if self.config_dir is None:
            return None
        path = self.config_dir / filename
        return path if path.exists() else None
