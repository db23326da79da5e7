"""Generación de Excel formateado con la serie de deltas."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

_HEADER_MAP: dict[str, str] = {
    "weekday": "Día",
    "datetime": "Fecha / Hora",
    "value": "Glucosa (mg/dL)",
    "recalculated": "Recalculada (mg/dL)",
    "delta_5min": "Delta (mg/dL/5min)",
}

_COLUMN_WIDTHS: dict[str, int] = {
    "Día": 6,
    "Fecha / Hora": 18,
    "Glucosa (mg/dL)": 14,
    "Recalculada (mg/dL)": 18,
    "Delta (mg/dL/5min)": 18,
}

_NUMBER_FORMATS: dict[str, str] = {
    "Fecha / Hora": "dd/mm/yyyy hh:mm",
    "Glucosa (mg/dL)": "0",
    "Recalculada (mg/dL)": "0.0",
    "Delta (mg/dL/5min)": "+0.00;-0.00;0.00",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the delta sheet."""

    sheet_name: str = "Deltas"


def _weekday_label(i: object) -> str:
    """Convierte índice 0-6 (lunes-domingo) a etiqueta de 3 letras."""
    if isinstance(i, bool) or not isinstance(i, Real) or pd.isna(i):
        return ""
    idx = int(i)
    return _DIA_SEMANA[idx] if 0 <= idx < 7 else ""


def _prepare_export_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Añade Día, quita timezone de datetime y descarta timestamp crudo."""
    out = df.drop(columns=["timestamp"], errors="ignore").copy()
    if "datetime" not in out.columns:
        return out
    moments = pd.to_datetime(out["datetime"], errors="coerce", utc=True)
    local = moments.dt.tz_convert(_first_tz(out["datetime"])).dt.tz_localize(None)
    out["datetime"] = local
    out.insert(0, "weekday", local.dt.weekday.map(_weekday_label))
    return out


def _first_tz(values: pd.Series) -> Any:
    """Zona horaria del primer valor no nulo (UTC si no hay ninguna)."""
    for value in values:
        tzinfo = getattr(value, "tzinfo", None)
        if tzinfo is not None:
            return tzinfo
    return "UTC"


def write_delta_xlsx(
    df: pd.DataFrame, out_path: Path, layout: ExcelLayout | None = None
) -> None:
    """Write a formatted Excel file with one row per reading.

    Args:
        df: Delta series (see ``glucodelta.series.delta_series``).
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    layout = layout or ExcelLayout()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    export_df = _prepare_export_frame(df).rename(columns=_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws)


def _style_rows(ws: Any) -> None:
    """Bordes y centrado en todas las celdas; cabecera en negrita."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = center
        cell.border = border
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_rows(ws)
    col_index = {str(cell.value): cell.column for cell in ws[1]}

    for header, width in _COLUMN_WIDTHS.items():
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width

    for row in ws.iter_rows(min_row=2):
        for header, fmt in _NUMBER_FORMATS.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt
