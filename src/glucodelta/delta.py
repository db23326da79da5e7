"""Delta de glucosa a 5 minutos por interpolación lineal ponderada."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from glucodelta.model import GlucoseReading

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60 * 1000
REPORT_INTERVAL_MINUTES = 5
REPORT_INTERVAL_MS = REPORT_INTERVAL_MINUTES * MS_PER_MINUTE

DEFAULT_LOOKBACK_MINUTES = 5
DEFAULT_WINDOW_HALF_WIDTH_MIN = 2.5
DEFAULT_MIN_VALID_VALUE = 39.0


@dataclass(frozen=True)
class DeltaConfig:
    """Tunable parameters of the delta estimation.

    Attributes:
        lookback_minutes: Distance from the current reading to the target time.
        window_half_width_min: Half-width of the search window around target.
        min_valid_value: Readings with a raw value at or below this are ignored.
    """

    lookback_minutes: float = DEFAULT_LOOKBACK_MINUTES
    window_half_width_min: float = DEFAULT_WINDOW_HALF_WIDTH_MIN
    min_valid_value: float = DEFAULT_MIN_VALID_VALUE

    def __post_init__(self) -> None:
        if self.lookback_minutes <= 0:
            raise ValueError(
                f"lookback_minutes must be positive, got {self.lookback_minutes}"
            )
        if self.window_half_width_min < 0:
            raise ValueError(
                "window_half_width_min must be >= 0, "
                f"got {self.window_half_width_min}"
            )

    @property
    def lookback_ms(self) -> float:
        return self.lookback_minutes * MS_PER_MINUTE

    @property
    def half_width_ms(self) -> float:
        return self.window_half_width_min * MS_PER_MINUTE


DEFAULT_CONFIG = DeltaConfig()


class DeltaObserver:
    """Diagnostic hooks called during a delta estimation.

    Every hook is a no-op by default, so a plain instance ignores every
    event; subclasses override the ones they need.
    Hooks never influence the returned delta.
    """

    def candidates_found(self, count: int, target_time: float) -> None:
        """Called once with the number of readings inside the window."""

    def no_candidates(self, target_time: float) -> None:
        """Called when no valid reading falls inside the window."""

    def two_sided(
        self,
        expected: float,
        weight_before: float,
        weight_after: float,
        delta: float,
    ) -> None:
        """Called after interpolating between readings on both sides."""

    def one_sided(
        self, closest: GlucoseReading, intervals: float, delta: float
    ) -> None:
        """Called after the nearest-neighbour fallback."""

    def zero_elapsed(self, closest: GlucoseReading) -> None:
        """Called when the chosen reading has the same timestamp as current."""


class NullObserver(DeltaObserver):
    """Observer that ignores every event."""


class LoggingObserver(DeltaObserver):
    """Observer that writes every event to a :mod:`logging` logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log if log is not None else logger

    def candidates_found(self, count: int, target_time: float) -> None:
        self._log.debug(
            "Found %d measurements in interval around target %d",
            count,
            target_time,
        )

    def no_candidates(self, target_time: float) -> None:
        self._log.debug("No measurements in interval around target %d", target_time)

    def two_sided(
        self,
        expected: float,
        weight_before: float,
        weight_after: float,
        delta: float,
    ) -> None:
        self._log.debug(
            "Two-sided delta: expected=%s delta=%s weights before=%s after=%s",
            expected,
            delta,
            weight_before,
            weight_after,
        )

    def one_sided(
        self, closest: GlucoseReading, intervals: float, delta: float
    ) -> None:
        self._log.debug(
            "Single-sided measurement at %d, %s intervals of 5 min, delta=%s",
            closest.timestamp,
            intervals,
            delta,
        )

    def zero_elapsed(self, closest: GlucoseReading) -> None:
        self._log.warning(
            "Closest measurement at %d has zero elapsed time, delta set to 0.0",
            closest.timestamp,
        )


_DEFAULT_OBSERVER = LoggingObserver()


def estimate_delta(
    current_value: float,
    current_time: int,
    readings: Iterable[GlucoseReading],
    *,
    config: DeltaConfig = DEFAULT_CONFIG,
    observer: DeltaObserver | None = None,
) -> float:
    """Estimate the glucose change per 5 minutes.

    The value at ``current_time - lookback`` is interpolated from the
    closest valid readings on each side of that instant, or taken from the
    single closest reading when only one side has data.

    Args:
        current_value: Current glucose value (mg/dL).
        current_time: Timestamp of the current value (epoch ms).
        readings: Prior readings, in any order.
        config: Look-back, window and validity parameters.
        observer: Diagnostic sink; defaults to a logging observer.

    Returns:
        Delta in mg/dL per 5 minutes, ``0.0`` when there is no usable data.
    """
    obs = observer if observer is not None else _DEFAULT_OBSERVER

    target_time = current_time - config.lookback_ms
    window_start = target_time - config.half_width_ms
    window_end = target_time + config.half_width_ms

    candidates = [
        r
        for r in readings
        if window_start <= r.timestamp <= window_end
        and r.value > config.min_valid_value
    ]
    obs.candidates_found(len(candidates), target_time)

    if not candidates:
        obs.no_candidates(target_time)
        return 0.0

    before = [r for r in candidates if r.timestamp <= target_time]
    after = [r for r in candidates if r.timestamp > target_time]

    if before and after:
        closest_before = max(before, key=lambda r: r.timestamp)
        closest_after = min(after, key=lambda r: r.timestamp)

        gap_before = abs(target_time - closest_before.timestamp)
        gap_after = abs(closest_after.timestamp - target_time)
        gap_total = abs(closest_after.timestamp - closest_before.timestamp)

        weight_before = 1.0 - gap_before / gap_total
        weight_after = 1.0 - gap_after / gap_total

        # Renormalizar: el redondeo puede dejar la suma fuera de 1.0
        total_weight = weight_before + weight_after
        norm_before = weight_before / total_weight
        norm_after = weight_after / total_weight

        expected = (
            closest_before.recalculated * norm_before
            + closest_after.recalculated * norm_after
        )
        delta = (
            REPORT_INTERVAL_MINUTES
            * (current_value - expected)
            / config.lookback_minutes
        )
        obs.two_sided(expected, norm_before, norm_after, delta)
        return delta

    side = before if before else after
    closest = min(side, key=lambda r: abs(r.timestamp - target_time))

    elapsed_ms = abs(current_time - closest.timestamp)
    if elapsed_ms == 0:
        obs.zero_elapsed(closest)
        return 0.0

    intervals = elapsed_ms / REPORT_INTERVAL_MS
    delta = (current_value - closest.recalculated) / intervals
    obs.one_sided(closest, intervals, delta)
    return delta
