"""CLI para calcular el delta a 5 minutos desde una exportación de lecturas."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path

from dateutil import tz

from glucodelta.delta import (
    DEFAULT_LOOKBACK_MINUTES,
    DEFAULT_MIN_VALID_VALUE,
    DEFAULT_WINDOW_HALF_WIDTH_MIN,
    DeltaConfig,
)
from glucodelta.excel_writer import ExcelLayout, write_delta_xlsx
from glucodelta.logging_config import configure_logging
from glucodelta.series import delta_series, latest_delta
from glucodelta.sources.accuchek import AccuChekPaths, AccuChekSource
from glucodelta.sources.base import DataSource
from glucodelta.sources.nightscout import NightscoutPaths, NightscoutSource

_LOCAL_TZ = tz.gettz("America/Argentina/Buenos_Aires")

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Delta de glucosa (mg/dL cada 5 min) por interpolación."
    )
    parser.add_argument(
        "--source",
        choices=["accuchek", "nightscout"],
        default="nightscout",
        help="Formato de la exportación (default: nightscout).",
    )
    parser.add_argument(
        "--input-dir",
        default=str(Path.home() / "proyectos" / "salud" / "glucosa" / "datos"),
        help="Directorio con las exportaciones JSON.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Ruta .xlsx para exportar la serie de deltas (opcional).",
    )
    parser.add_argument(
        "--lookback-minutes",
        type=float,
        default=DEFAULT_LOOKBACK_MINUTES,
        help="Minutos hacia atrás del punto objetivo (default: 5).",
    )
    parser.add_argument(
        "--window-minutes",
        type=float,
        default=DEFAULT_WINDOW_HALF_WIDTH_MIN,
        help="Semiancho de la ventana de búsqueda en minutos (default: 2.5).",
    )
    parser.add_argument(
        "--min-value",
        type=float,
        default=DEFAULT_MIN_VALID_VALUE,
        help="Lecturas con valor <= este se descartan (default: 39).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Nivel de logging (default: LOG_LEVEL o WARNING).",
    )
    return parser.parse_args()


def _build_source(name: str, root: Path) -> DataSource:
    if name == "accuchek":
        return AccuChekSource(AccuChekPaths(root=root))
    return NightscoutSource(NightscoutPaths(root=root))


def main() -> int:
    """Run the delta CLI.

    Returns:
        Exit code (0 on success, 1 if the export has no readings).
    """
    ns = parse_args()
    configure_logging(ns.log_level)

    config = DeltaConfig(
        lookback_minutes=ns.lookback_minutes,
        window_half_width_min=ns.window_minutes,
        min_valid_value=ns.min_value,
    )
    source = _build_source(ns.source, Path(ns.input_dir).expanduser().resolve())
    source.validate()

    in_file = source.newest_json()
    readings = source.load_readings(in_file)
    logger.info("Loaded %d readings from %s", len(readings), in_file)

    delta = latest_delta(readings, config)
    if delta is None:
        print(f"Sin lecturas en {in_file}")
        return 1

    newest = max(readings, key=lambda r: r.timestamp)
    when = datetime.fromtimestamp(newest.timestamp / 1000, tz=_LOCAL_TZ)
    print(f"OK: Input: {in_file}")
    print(f"OK: Ultima lectura: {newest.recalculated:g} mg/dL ({when:%d/%m/%Y %H:%M})")
    print(f"OK: Delta: {delta:+.2f} mg/dL/5min")

    if ns.output:
        out_path = Path(ns.output).expanduser()
        write_delta_xlsx(delta_series(readings, config), out_path, ExcelLayout())
        print(f"OK: Output: {out_path}")
    return 0
