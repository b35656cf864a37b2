from __future__ import annotations

import calendar
from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Fecha no válida (YYYY-MM-DD): {value!r}")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive inputs are rejected: every timestamp exchanged with the API carries an offset.
    """
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except (TypeError, ValueError):
        raise ValidationError(f"Marca de tiempo no válida: {value!r}")
    return require_aware(parsed)


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError):
        raise ValidationError("Hora no válida (HH:MM)")


def require_aware(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError("La marca de tiempo no tiene zona horaria")
    return value.astimezone(timezone.utc)


def now_utc() -> datetime:
    """Current UTC time truncated to whole seconds.

    Note: Wrapped so tests can patch/mock easier. Whole seconds keep the
    checkpoint and break-subtraction totals exactly comparable.
    """
    return datetime.now(timezone.utc).replace(microsecond=0)


def to_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """MySQL DATETIME columns hold naive UTC."""
    if value is None:
        return None
    return require_aware(value).replace(tzinfo=None)


def from_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Zona horaria desconocida: {name}")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month (month is 1-12)."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("Mes no válido (1-12)")
    if not 1970 <= int(year) <= 9999:
        raise ValidationError("Año no válido")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)
