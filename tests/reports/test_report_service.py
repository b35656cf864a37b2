from __future__ import annotations

from dataclasses import replace
from datetime import date, time, timedelta, timezone

import pytest

from conftest import completed_session, utc
from src.control_horario.control_horario.core.enums import SessionStatus
from src.control_horario.control_horario.core.exceptions import ValidationError
from src.control_horario.control_horario.reports.service import ReportService
from src.control_horario.control_horario.sessions.model import Break


@pytest.fixture
def reports(sessions_repo, clock) -> ReportService:
    return ReportService(
        sessions_repo,
        target_hours=8,
        display_tz=timezone.utc,
        attendance_cutoff=time(8, 10),
        clock=clock,
    )


@pytest.fixture
def march(sessions_repo):
    sessions_repo.add(completed_session(1, date(2025, 3, 3), 480, start_hour=8))
    sessions_repo.add(completed_session(2, date(2025, 3, 4), 450))
    sessions_repo.add(completed_session(3, date(2025, 3, 5), 390))
    sessions_repo.add(completed_session(4, date(2025, 2, 28), 300))
    sessions_repo.add(completed_session(5, date(2025, 3, 6), 200, user_id=2))


def test_history_is_month_scoped_and_newest_first(reports, march):
    items = reports.history(user_id=1, month=3, year=2025)
    assert [s.session_id for s in items] == [3, 2, 1]


def test_history_rejects_invalid_month(reports):
    with pytest.raises(ValidationError):
        reports.history(user_id=1, month=13, year=2025)


def test_history_rows_format(reports, sessions_repo):
    sessions_repo.add(replace(completed_session(1, date(2025, 3, 3), 480), accumulated_seconds=28845))
    late = completed_session(2, date(2025, 3, 4), 450)
    sessions_repo.add(replace(late, started_at=utc(2025, 3, 4, 8, 11), check_in=utc(2025, 3, 4, 8, 11)))

    rows = reports.history_rows(user_id=1, month=3, year=2025)

    assert rows[1] == {
        "session_id": 1,
        "day": "Lunes",
        "date": "03/03/2025",
        "status": "Tardanza",
        "check_in": "09:00:00",
        "check_out": "17:00:00",
        "total": "8h 0m 45s",
        "breaks": 0,
    }
    assert rows[0]["status"] == "Tardanza"


def test_check_in_at_cutoff_counts_as_attendance(reports, sessions_repo):
    s = completed_session(1, date(2025, 3, 3), 480)
    sessions_repo.add(replace(s, started_at=utc(2025, 3, 3, 8, 10, 59)))

    rows = reports.history_rows(user_id=1, month=3, year=2025)
    assert rows[0]["status"] == "Asistencia"


def test_monthly_report(reports, march, clock):
    clock.now = utc(2025, 3, 12, 10, 0)

    data = reports.monthly_report(user_id=1, month=3, year=2025)

    assert data.stats.total_hours == 22.0
    assert data.stats.work_days == 3
    assert data.breakdown.target_hours == 24.0
    assert [p.hours for p in data.weekly] == [22.0, 0.0, 0.0, 0.0]
    # Week of Monday 3 March, the last complete week before the 12th.
    assert [p.hours for p in data.daily][:3] == [8.0, 7.5, 6.5]


def test_dashboard_reports_open_session_and_breaks(reports, sessions_repo, clock):
    today = date(2025, 3, 12)
    clock.now = utc(2025, 3, 12, 15, 0)
    sessions_repo.add(completed_session(1, today, 120, start_hour=7))
    sessions_repo.add(completed_session(2, date(2025, 3, 1), 300))
    pause_at = utc(2025, 3, 12, 14, 0)
    sessions_repo.add(
        replace(
            completed_session(3, today, 0, start_hour=12),
            status=SessionStatus.PAUSED,
            check_out=None,
            accumulated_seconds=7200,
            breaks=(Break(9, 3, pause_at),),
        )
    )

    data = reports.dashboard(user_id=1, today=today)

    assert data.status_label == "En Pausa"
    assert data.current.session_id == 3
    assert data.today_minutes == 120
    assert data.today_breaks == 1
    assert len(data.chart) == 7
    assert data.chart[-1].hours == 2.0


def test_dashboard_inactive_without_open_session(reports):
    data = reports.dashboard(user_id=1, today=date(2025, 3, 12))
    assert data.status_label == "Inactivo"
    assert data.today_minutes == 0
    assert data.current is None


def test_csv_export_empty_month_returns_none(reports, march):
    assert reports.export_csv(user_id=1, month=6, year=2025) is None


def test_csv_export_file(reports, march):
    export = reports.export_csv(user_id=1, month=3, year=2025)

    assert export.filename == "reporte_Marzo_2025.csv"
    assert export.content.startswith("\ufeffFecha,".encode("utf-8"))
    assert export.content.decode("utf-8-sig").count("\n") == 3


def test_today_defaults_to_display_zone(sessions_repo, clock):
    # 02:00 UTC on the 12th is still the evening of the 11th five hours west.
    clock.now = utc(2025, 3, 12, 2, 0)
    reports = ReportService(sessions_repo, display_tz=timezone(timedelta(hours=-5)), clock=clock)
    sessions_repo.add(completed_session(1, date(2025, 3, 11), 300, start_hour=14))

    assert reports.today() == date(2025, 3, 11)
    assert reports.dashboard(user_id=1).today_minutes == 300
