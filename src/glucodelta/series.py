"""Serie tabular de lecturas con su delta a 5 minutos."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Sequence
from datetime import datetime

import pandas as pd
from dateutil import tz

from glucodelta.delta import DEFAULT_CONFIG, DeltaConfig, NullObserver, estimate_delta
from glucodelta.model import GlucoseReading

_LOCAL_TZ = tz.gettz("America/Argentina/Buenos_Aires")

FRAME_COLUMNS = ["timestamp", "datetime", "value", "recalculated"]


def readings_to_frame(readings: Sequence[GlucoseReading]) -> pd.DataFrame:
    """Convert readings to a DataFrame sorted by timestamp."""
    rows = [
        {
            "timestamp": r.timestamp,
            "datetime": datetime.fromtimestamp(r.timestamp / 1000, tz=_LOCAL_TZ),
            "value": r.value,
            "recalculated": r.recalculated,
        }
        for r in readings
    ]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    return df.sort_values("timestamp", kind="stable").reset_index(drop=True)


def delta_series(
    readings: Sequence[GlucoseReading],
    config: DeltaConfig = DEFAULT_CONFIG,
) -> pd.DataFrame:
    """One row per reading with the delta estimated at that reading.

    Each reading acts as the current value. Readings are sorted once and
    only those inside the search window of each row are offered to
    ``estimate_delta``, which would discard the rest anyway.

    Args:
        readings: Reading history, in any order.
        config: Estimation parameters.

    Returns:
        DataFrame with columns timestamp, datetime, value, recalculated,
        delta_5min.
    """
    df = readings_to_frame(readings)
    if df.empty:
        return pd.DataFrame(columns=[*FRAME_COLUMNS, "delta_5min"])

    # Orden estable: empates en timestamp conservan el orden de entrada
    ordered = sorted(readings, key=lambda r: r.timestamp)
    stamps = [r.timestamp for r in ordered]

    # Sin logging por fila: en series largas es solo ruido
    quiet = NullObserver()
    deltas: list[float] = []
    for row in df.itertuples(index=False):
        current_time = int(row.timestamp)
        target = current_time - config.lookback_ms
        lo = bisect_left(stamps, target - config.half_width_ms)
        hi = bisect_right(stamps, target + config.half_width_ms)
        deltas.append(
            estimate_delta(
                float(row.recalculated),
                current_time,
                ordered[lo:hi],
                config=config,
                observer=quiet,
            )
        )
    df["delta_5min"] = deltas
    return df


def latest_delta(
    readings: Sequence[GlucoseReading],
    config: DeltaConfig = DEFAULT_CONFIG,
) -> float | None:
    """Delta for the newest reading, or None if there are no readings."""
    if not readings:
        return None
    newest = max(readings, key=lambda r: r.timestamp)
    return estimate_delta(newest.recalculated, newest.timestamp, readings, config=config)
