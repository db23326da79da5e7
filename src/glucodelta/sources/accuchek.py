"""Lectura de exportaciones JSON de Accu-Chek."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dateutil import tz

from glucodelta.model import GlucoseReading
from glucodelta.sources.base import DataSource, SourcePaths

_LOCAL_TZ = tz.gettz("America/Argentina/Buenos_Aires")


@dataclass(frozen=True)
class AccuChekPaths(SourcePaths):
    """Paths for Accu-Chek JSON exports."""

    # root: folder containing accuchek_*.json


class AccuChekSource(DataSource):
    """Accu-Chek JSON reading source."""

    pattern = "accuchek_*.json"

    def load_readings(self, path: Path) -> list[GlucoseReading]:
        """Parse Accu-Chek JSON into typed readings.

        Fingerstick readings are sparse: one rarely falls inside the search
        window, so deltas from this source are usually 0.0.

        Args:
            path: Path to JSON file.

        Returns:
            List of glucose readings sorted by timestamp.

        Raises:
            ValueError: If JSON shape is invalid.
        """
        text = path.read_text(encoding="utf-8")
        raw = _extract_json_list(text)
        if not isinstance(raw, list):
            raise ValueError("Accu-Chek JSON must be a list")

        out: list[GlucoseReading] = []
        for item in raw:
            reading = _item_to_reading(item)
            if reading is not None:
                out.append(reading)
        out.sort(key=lambda r: r.timestamp)
        return out


def _item_to_reading(item: Any) -> GlucoseReading | None:
    """Convierte un ítem dict en GlucoseReading; None si falta mg/dL."""
    if not isinstance(item, dict):
        return None
    mg_dl = item.get("mg/dL")
    if mg_dl is None:
        return None
    # Glucómetro capilar: no hay recalibración, ambos valores coinciden
    return GlucoseReading(
        timestamp=_timestamp_ms(item.get("timestamp"), item.get("epoch")),
        value=float(mg_dl),
        recalculated=float(mg_dl),
    )


def _extract_json_list(text: str) -> Any:
    """JSON array del export; ignora texto previo (p. ej. líneas de log)."""
    return json.loads(text[max(text.find("["), 0) :])


def _timestamp_ms(local_str: Any, epoch_s: Any) -> int:
    """Epoch ms desde "%Y/%m/%d %H:%M" (hora local) o desde epoch en segundos."""
    if isinstance(local_str, str) and local_str.strip():
        moment = datetime.strptime(local_str, "%Y/%m/%d %H:%M").replace(
            tzinfo=_LOCAL_TZ
        )
        return int(moment.timestamp() * 1000)
    if epoch_s is not None:
        return int(epoch_s) * 1000
    raise ValueError("Accu-Chek item without timestamp or epoch")
