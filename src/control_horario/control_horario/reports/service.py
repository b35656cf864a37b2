from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import month_bounds, now_utc
from ..core.constants import DEFAULT_TARGET_HOURS, WEEKDAY_NAMES
from ..core.enums import AttendanceMark, SessionStatus
from ..sessions.model import WorkSession
from ..sessions.repository import WorkSessionRepository
from .aggregation import (
    ChartPoint,
    HoursBreakdown,
    PeriodStats,
    filter_reportable,
    hours_breakdown,
    last_days_chart,
    previous_week_start,
    summarize,
    weekday_buckets,
    weekly_buckets,
)
from .calculator.base import WorkedTimeCalculator
from .calculator.checkpoint_calculator import CheckpointCalculator
from .export import build_csv, build_xlsx, export_filename

_STATUS_LABELS = {
    SessionStatus.ACTIVE: "Trabajando",
    SessionStatus.PAUSED: "En Pausa",
}


@dataclass(frozen=True)
class ReportData:
    sessions: list[WorkSession]
    stats: PeriodStats
    breakdown: HoursBreakdown
    daily: list[ChartPoint]
    weekly: list[ChartPoint]


@dataclass(frozen=True)
class DashboardData:
    today_minutes: int
    today_breaks: int
    status_label: str
    current: Optional[WorkSession]
    chart: list[ChartPoint]


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
    mimetype: str


class ReportService:
    def __init__(
        self,
        sessions: WorkSessionRepository,
        *,
        target_hours: float = DEFAULT_TARGET_HOURS,
        display_tz: tzinfo,
        attendance_cutoff: time = time(8, 10),
        calculator: Optional[WorkedTimeCalculator] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._sessions = sessions
        self._target_hours = float(target_hours)
        self._tz = display_tz
        self._cutoff = attendance_cutoff
        self._calculator = calculator or CheckpointCalculator()
        self._clock = clock

    @property
    def target_hours(self) -> float:
        return self._target_hours

    def today(self) -> date:
        """Current calendar day in the display timezone."""
        return self._clock().astimezone(self._tz).date()

    def history(self, *, user_id: int, month: int, year: int) -> list[WorkSession]:
        """Completed sessions of a month, newest first."""
        start, end = month_bounds(year, month)
        return list(self._sessions.list_completed(user_id=int(user_id), start_date=start, end_date=end))

    def history_rows(self, *, user_id: int, month: int, year: int) -> list[dict]:
        return [self._to_history_row(s) for s in self.history(user_id=user_id, month=month, year=year)]

    def _attendance_mark(self, session: WorkSession) -> AttendanceMark:
        if not session.started_at:
            return AttendanceMark.PENDING
        local = session.started_at.astimezone(self._tz).time().replace(second=0, microsecond=0)
        return AttendanceMark.PRESENT if local <= self._cutoff else AttendanceMark.LATE

    def _to_history_row(self, s: WorkSession) -> dict:
        total = int(s.accumulated_seconds)
        hours, minutes, seconds = total // 3600, (total % 3600) // 60, total % 60

        def _fmt(value: Optional[datetime]) -> str:
            return value.astimezone(self._tz).strftime("%H:%M:%S") if value else "--:--:--"

        return {
            "session_id": s.session_id,
            "day": WEEKDAY_NAMES[s.work_date.weekday()].capitalize(),
            "date": s.work_date.strftime("%d/%m/%Y"),
            "status": self._attendance_mark(s).value,
            "check_in": _fmt(s.started_at),
            "check_out": _fmt(s.check_out),
            "total": f"{hours}h {minutes}m {seconds}s" if total > 0 else "--",
            "breaks": len(s.breaks),
        }

    def monthly_report(
        self,
        *,
        user_id: int,
        month: int,
        year: int,
        today: Optional[date] = None,
    ) -> ReportData:
        today = today or self.today()
        sessions = filter_reportable(self.history(user_id=user_id, month=month, year=year))

        return ReportData(
            sessions=sessions,
            stats=summarize(sessions, calculator=self._calculator),
            breakdown=hours_breakdown(sessions, target_hours=self._target_hours),
            daily=weekday_buckets(sessions, week_start=previous_week_start(today)),
            weekly=weekly_buckets(sessions),
        )

    def dashboard(self, *, user_id: int, today: Optional[date] = None) -> DashboardData:
        today = today or self.today()
        current = self._sessions.find_open_for_user(int(user_id))

        # Seven-day window may cross a month boundary.
        window_start = today - timedelta(days=6)
        recent: Sequence[WorkSession] = self._sessions.list_completed(
            user_id=int(user_id), start_date=window_start, end_date=today
        )
        todays = [s for s in recent if s.work_date == today]

        today_breaks = sum(len(s.breaks) for s in todays)
        if current is not None and current.work_date == today:
            today_breaks += len(current.breaks)

        return DashboardData(
            today_minutes=sum(self._calculator.worked_minutes(s) for s in todays),
            today_breaks=today_breaks,
            status_label=_STATUS_LABELS.get(current.status, "Inactivo") if current else "Inactivo",
            current=current,
            chart=last_days_chart(recent, today=today),
        )

    def export_csv(self, *, user_id: int, month: int, year: int) -> Optional[ExportFile]:
        sessions = filter_reportable(self.history(user_id=user_id, month=month, year=year))
        text = build_csv(sessions, target_hours=self._target_hours, tz=self._tz)
        if text is None:
            return None
        return ExportFile(
            filename=export_filename(month=month, year=year, extension="csv"),
            content=text.encode("utf-8-sig"),
            mimetype="text/csv; charset=utf-8",
        )

    def export_xlsx(self, *, user_id: int, month: int, year: int) -> Optional[ExportFile]:
        sessions = filter_reportable(self.history(user_id=user_id, month=month, year=year))
        content = build_xlsx(sessions, target_hours=self._target_hours, tz=self._tz)
        if content is None:
            return None
        return ExportFile(
            filename=export_filename(month=month, year=year, extension="xlsx"),
            content=content,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
