"""Pure aggregation over completed work sessions.

Every function sums integer minutes before converting to hours, so results do
not depend on the order of the input and repeated calls give the same value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..core.constants import (
    DASHBOARD_CHART_DAYS,
    GOOD_PERFORMANCE_RATIO,
    MIN_REPORTED_MINUTES,
    MONTH_WEEK_BUCKETS,
    WEEKDAY_SHORT_NAMES,
)
from ..core.enums import Performance, SessionStatus
from ..sessions.model import WorkSession
from .calculator.base import WorkedTimeCalculator
from .calculator.checkpoint_calculator import CheckpointCalculator


@dataclass(frozen=True)
class PeriodStats:
    total_minutes: int
    total_hours: float
    average_hours: float
    total_breaks: int
    work_days: int


@dataclass(frozen=True)
class HoursBreakdown:
    worked_hours: float
    break_hours: float
    target_hours: float


@dataclass(frozen=True)
class ChartPoint:
    label: str
    hours: float
    date: Optional[str] = None


def _minutes(sessions: Iterable[WorkSession], calculator: Optional[WorkedTimeCalculator]) -> int:
    calculator = calculator or CheckpointCalculator()
    return sum(calculator.worked_minutes(s) for s in sessions)


def filter_reportable(sessions: Iterable[WorkSession], *, min_minutes: int = MIN_REPORTED_MINUTES) -> list[WorkSession]:
    return [s for s in sessions if s.status == SessionStatus.COMPLETED and s.total_minutes >= min_minutes]


def summarize(sessions: Sequence[WorkSession], *, calculator: Optional[WorkedTimeCalculator] = None) -> PeriodStats:
    total_minutes = _minutes(sessions, calculator)
    total_hours = total_minutes / 60
    work_days = len({s.work_date for s in sessions})
    return PeriodStats(
        total_minutes=total_minutes,
        total_hours=total_hours,
        average_hours=total_hours / work_days if work_days else 0.0,
        total_breaks=sum(len(s.breaks) for s in sessions),
        work_days=work_days,
    )


def hours_breakdown(sessions: Sequence[WorkSession], *, target_hours: float) -> HoursBreakdown:
    stats = summarize(sessions)
    break_minutes = sum(b.duration_minutes for s in sessions for b in s.breaks)
    return HoursBreakdown(
        worked_hours=stats.total_hours,
        break_hours=break_minutes / 60,
        target_hours=stats.work_days * float(target_hours),
    )


def week_of_month(day: date) -> int:
    # Days 29-31 fold into the last bucket.
    return min(math.ceil(day.day / 7), MONTH_WEEK_BUCKETS)


def weekly_buckets(sessions: Iterable[WorkSession]) -> list[ChartPoint]:
    minutes = {week: 0 for week in range(1, MONTH_WEEK_BUCKETS + 1)}
    for s in sessions:
        minutes[week_of_month(s.work_date)] += int(s.total_minutes)
    return [ChartPoint(label=f"Sem {week}", hours=round(m / 60, 1)) for week, m in minutes.items()]


def _minutes_by_date(sessions: Iterable[WorkSession]) -> dict[date, int]:
    out: dict[date, int] = {}
    for s in sessions:
        out[s.work_date] = out.get(s.work_date, 0) + int(s.total_minutes)
    return out


def previous_week_start(today: date) -> date:
    """Monday of the last complete Monday-Sunday week (on Sundays, the week ending today)."""
    offset = 6 if today.weekday() == 6 else today.weekday() + 7
    return today - timedelta(days=offset)


def weekday_buckets(sessions: Iterable[WorkSession], *, week_start: date) -> list[ChartPoint]:
    by_date = _minutes_by_date(sessions)
    points = []
    for i, label in enumerate(WEEKDAY_SHORT_NAMES):
        day = week_start + timedelta(days=i)
        points.append(ChartPoint(label=label, hours=by_date.get(day, 0) / 60, date=day.isoformat()))
    return points


def last_days_chart(sessions: Iterable[WorkSession], *, today: date, days: int = DASHBOARD_CHART_DAYS) -> list[ChartPoint]:
    by_date = _minutes_by_date(sessions)
    points = []
    for i in range(days - 1, -1, -1):
        day = today - timedelta(days=i)
        points.append(
            ChartPoint(
                label=WEEKDAY_SHORT_NAMES[day.weekday()],
                hours=round(by_date.get(day, 0) / 60, 1),
                date=day.isoformat(),
            )
        )
    return points


def classify_performance(hours: float, target_hours: float) -> Performance:
    if hours >= target_hours:
        return Performance.EXCELLENT
    if hours >= target_hours * GOOD_PERFORMANCE_RATIO:
        return Performance.GOOD
    return Performance.REGULAR
