"""Locate test files and load runner configuration files."""

import logging
import runpy
from collections.abc import Callable, Sequence
from pathlib import Path

import yaml
from pydantic import ValidationError

from slimrunner.models.options import FileConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "slimrunner.yaml"


class Loader:
    """Collects python test files matching glob patterns."""

    def __init__(self, base_dir: Path | None = None) -> None:
        """Initialize loader resolving patterns relative to ``base_dir``."""
        self.base_dir = base_dir or Path.cwd()
        self.patterns: list[str] = []
        self._filter: Callable[[str], bool] | None = None

    def files(self, patterns: Sequence[str]) -> None:
        """Replace the glob patterns used to find test files."""
        self.patterns = list(patterns)

    def filter(self, predicate: Callable[[str], bool]) -> None:
        """Keep only files for which ``predicate`` returns True."""
        self._filter = predicate

    def find_files(self) -> list[Path]:
        """Return matching files, sorted and without duplicates."""
        found: set[Path] = set()
        for pattern in self.patterns:
            candidate = Path(pattern)
            if candidate.is_absolute():
                matches = [candidate] if candidate.is_file() else []
            else:
                matches = [p for p in self.base_dir.glob(pattern) if p.is_file()]
            if not matches:
                logger.warning(f"No test files match {pattern!r}")
            found.update(p.resolve() for p in matches if p.suffix == ".py")

        files = sorted(found)
        if self._filter is not None:
            files = [f for f in files if self._filter(str(f))]
        logger.info(f"Found {len(files)} test files")
        return files

    def load(self, files: Sequence[Path]) -> None:
        """Execute each test file so its declarations register."""
        for file in files:
            logger.debug(f"Loading test file {file}")
            runpy.run_path(str(file), run_name="__slimrunner__")


def load_config(path: Path) -> FileConfig:
    """Load runner configuration from a YAML file.

    Args:
        path: Path to the configuration file

    Returns:
        Parsed configuration

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If YAML is invalid or doesn't match schema

    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return FileConfig()

    try:
        return FileConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config schema in {path}: {e}") from e
