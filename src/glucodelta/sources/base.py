"""Clases base para fuentes de lecturas exportadas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from glucodelta.model import GlucoseReading


@dataclass(frozen=True)
class SourcePaths:
    """Container for the export directory."""

    root: Path


class DataSource(ABC):
    """Abstract reader of exported glucose files."""

    pattern: str = "*.json"

    def __init__(self, paths: SourcePaths) -> None:
        """Create a data source.

        Args:
            paths: Source paths configuration.
        """
        self._paths = paths

    def validate(self) -> None:
        """Validate that the export directory exists.

        Raises:
            FileNotFoundError: If the directory is missing.
        """
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    def newest_json(self) -> Path:
        """Return the newest export file matching ``pattern`` by mtime."""
        files = sorted(
            self._paths.root.glob(self.pattern),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not files:
            raise FileNotFoundError(f"No {self.pattern} in {self._paths.root}")
        return files[0]

    @abstractmethod
    def load_readings(self, path: Path) -> list[GlucoseReading]:
        """Parse an export file into readings sorted by timestamp.

        Raises:
            ValueError: If the file shape is invalid.
        """
