"""Lectura de exportaciones JSON de entries de Nightscout."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser
from dateutil import tz

from glucodelta.model import GlucoseReading
from glucodelta.sources.base import DataSource, SourcePaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NightscoutPaths(SourcePaths):
    """Paths for Nightscout entries exports."""

    # root: folder containing entries*.json (GET /api/v1/entries.json)


class NightscoutSource(DataSource):
    """Nightscout CGM entries reader (sgv only)."""

    pattern = "entries*.json"

    def load_readings(self, path: Path) -> list[GlucoseReading]:
        """Parse a Nightscout entries export.

        Only ``sgv`` entries are kept; calibrations (``cal``) and meter
        values (``mbg``) are skipped.

        Raises:
            ValueError: If the JSON is not a list.
        """
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError("Nightscout entries JSON must be a list")

        out = [r for r in (_entry_to_reading(item) for item in raw) if r is not None]
        skipped = len(raw) - len(out)
        if skipped:
            logger.debug("Skipped %d non-sgv or incomplete entries in %s", skipped, path)
        out.sort(key=lambda r: r.timestamp)
        return out


def _entry_to_reading(item: Any) -> GlucoseReading | None:
    if not isinstance(item, dict):
        return None
    if item.get("type", "sgv") != "sgv":
        return None
    sgv = item.get("sgv")
    if not isinstance(sgv, int | float) or isinstance(sgv, bool):
        return None
    ts = _entry_timestamp(item)
    if ts is None:
        return None
    return GlucoseReading(timestamp=ts, value=float(sgv), recalculated=float(sgv))


def _entry_timestamp(item: dict[str, Any]) -> int | None:
    """Epoch ms from ``date``, falling back to ISO ``dateString`` (naive = UTC)."""
    date_ms = item.get("date")
    if isinstance(date_ms, int | float) and not isinstance(date_ms, bool):
        return int(date_ms)
    date_string = item.get("dateString")
    if isinstance(date_string, str) and date_string.strip():
        try:
            parsed = date_parser.isoparse(date_string)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=tz.UTC)
        return int(parsed.timestamp() * 1000)
    return None
