from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .common.datetime_utils import get_zone, now_utc, parse_hhmm
from .core.constants import DEFAULT_ATTENDANCE_CUTOFF, DEFAULT_DISPLAY_TIMEZONE, DEFAULT_TARGET_HOURS
from .core.enums import DailySessionPolicy
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .sessions.factory import SessionTransitionFactory
from .sessions.mysql_break_repository import MySQLBreakRepository
from .sessions.mysql_session_repository import MySQLWorkSessionRepository
from .sessions.repository import BreakRepository, WorkSessionRepository
from .sessions.service import SessionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    # None when the container is wired with in-memory repositories.
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    sessions_repo: WorkSessionRepository
    breaks_repo: BreakRepository

    auth_service: AuthService
    user_service: UserService
    session_service: SessionService
    report_service: ReportService


def wire(
    *,
    users_repo: UserRepository,
    sessions_repo: WorkSessionRepository,
    breaks_repo: BreakRepository,
    conn: Optional[DatabaseConnection] = None,
    target_hours: float = DEFAULT_TARGET_HOURS,
    session_policy: str = DailySessionPolicy.MULTIPLE.value,
    display_timezone: str = DEFAULT_DISPLAY_TIMEZONE,
    attendance_cutoff: str = DEFAULT_ATTENDANCE_CUTOFF,
    clock: Callable[[], datetime] = now_utc,
) -> Container:
    """Build services on top of the given repositories."""
    display_tz = get_zone(display_timezone)

    session_service = SessionService(
        sessions_repo,
        breaks_repo,
        users_repo,
        transition_factory=SessionTransitionFactory(),
        policy=DailySessionPolicy(session_policy),
        clock=clock,
        work_tz=display_tz,
    )
    report_service = ReportService(
        sessions_repo,
        target_hours=target_hours,
        display_tz=display_tz,
        attendance_cutoff=parse_hhmm(attendance_cutoff),
        clock=clock,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        sessions_repo=sessions_repo,
        breaks_repo=breaks_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        session_service=session_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    target_hours: float = DEFAULT_TARGET_HOURS,
    session_policy: str = DailySessionPolicy.MULTIPLE.value,
    display_timezone: str = DEFAULT_DISPLAY_TIMEZONE,
    attendance_cutoff: str = DEFAULT_ATTENDANCE_CUTOFF,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    breaks_repo = MySQLBreakRepository(conn)
    sessions_repo = MySQLWorkSessionRepository(conn, breaks=breaks_repo)
    users_repo = MySQLUserRepository(conn)

    return wire(
        conn=conn,
        users_repo=users_repo,
        sessions_repo=sessions_repo,
        breaks_repo=breaks_repo,
        target_hours=target_hours,
        session_policy=session_policy,
        display_timezone=display_timezone,
        attendance_cutoff=attendance_cutoff,
    )
