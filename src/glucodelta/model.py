"""Modelo tipado para lecturas de glucosa."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GlucoseReading:
    """One glucose measurement (timestamp in epoch milliseconds).

    ``value`` is the raw sensor value and is only used to discard invalid
    readings; ``recalculated`` is the calibrated value used in calculations.
    """

    timestamp: int
    value: float
    recalculated: float
