from __future__ import annotations

import csv
import io
from datetime import datetime, tzinfo
from typing import Optional, Sequence

import pandas as pd

from ..core.constants import MONTH_NAMES, WEEKDAY_NAMES
from ..sessions.model import WorkSession
from .aggregation import classify_performance

CSV_COLUMNS = ["Fecha", "Día", "Hora Entrada", "Hora Salida", "Horas Trabajadas", "Pausas", "Rendimiento"]


def _hhmm(value: Optional[datetime], tz: tzinfo) -> str:
    return value.astimezone(tz).strftime("%H:%M") if value else ""


def export_rows(sessions: Sequence[WorkSession], *, target_hours: float, tz: tzinfo) -> list[list]:
    rows = []
    for s in sessions:
        hours = s.total_minutes / 60
        rows.append(
            [
                s.work_date.isoformat(),
                WEEKDAY_NAMES[s.work_date.weekday()],
                _hhmm(s.started_at, tz),
                _hhmm(s.check_out, tz),
                f"{hours:.2f}",
                len(s.breaks),
                classify_performance(hours, target_hours).value,
            ]
        )
    return rows


def export_filename(*, month: int, year: int, extension: str) -> str:
    return f"reporte_{MONTH_NAMES[int(month) - 1]}_{int(year)}.{extension}"


def build_csv(sessions: Sequence[WorkSession], *, target_hours: float, tz: tzinfo) -> Optional[str]:
    """CSV text of the report, or None when there is nothing to export."""
    if not sessions:
        return None

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    writer.writerows(export_rows(sessions, target_hours=target_hours, tz=tz))
    # No trailing newline after the last row.
    return out.getvalue().rstrip("\n")


def build_xlsx(sessions: Sequence[WorkSession], *, target_hours: float, tz: tzinfo) -> Optional[bytes]:
    if not sessions:
        return None

    df = pd.DataFrame(export_rows(sessions, target_hours=target_hours, tz=tz), columns=CSV_COLUMNS)
    df["Horas Trabajadas"] = df["Horas Trabajadas"].astype(float)

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Reporte")
    return out.getvalue()
