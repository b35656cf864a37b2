from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

from ..common.datetime_utils import now_utc, require_aware
from ..common.validators import require_positive_id
from ..core.enums import DailySessionPolicy, SessionEvent
from ..core.exceptions import (
    ConflictError,
    DomainError,
    DuplicateSessionError,
    SessionMismatchError,
    ValidationError,
)
from ..users.repository import UserRepository
from .accounting import elapsed_seconds, projection_drift
from .factory import SessionTransitionFactory
from .model import SessionSnapshot, WorkSession
from .repository import BreakRepository, WorkSessionRepository
from .strategies.base import TransitionPlan

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: drive a user's work session through start/pause/resume/stop.

    The service keeps no session state of its own. Every command re-reads the
    user's open session from the store, plans the transition with a strategy,
    then writes it. The session update is guarded by the status that was read,
    so a concurrent change from another client fails with ConflictError instead
    of being overwritten.
    """

    def __init__(
        self,
        sessions: WorkSessionRepository,
        breaks: BreakRepository,
        users: UserRepository,
        *,
        transition_factory: SessionTransitionFactory | None = None,
        policy: DailySessionPolicy = DailySessionPolicy.MULTIPLE,
        clock: Callable[[], datetime] = now_utc,
        work_tz: tzinfo = timezone.utc,
    ):
        self._sessions = sessions
        self._breaks = breaks
        self._users = users
        self._factory = transition_factory or SessionTransitionFactory()
        self._policy = DailySessionPolicy(policy)
        self._clock = clock
        # Calendar day of a session is taken in this zone.
        self._work_tz = work_tz

    @property
    def policy(self) -> DailySessionPolicy:
        return self._policy

    def _now(self, now: Optional[datetime]) -> datetime:
        return require_aware(now) if now is not None else self._clock()

    def _work_date(self, now: datetime):
        return now.astimezone(self._work_tz).date()

    def get_current(self, user_id: int) -> Optional[WorkSession]:
        return self._sessions.find_open_for_user(int(user_id))

    def snapshot(self, user_id: int, *, now: Optional[datetime] = None) -> SessionSnapshot:
        now = self._now(now)
        current = self.get_current(user_id)
        elapsed = elapsed_seconds(current, now) if current else 0
        return SessionSnapshot(session=current, elapsed_seconds=elapsed, computed_at=now)

    def elapsed(self, session: WorkSession, *, now: Optional[datetime] = None) -> int:
        return elapsed_seconds(session, self._now(now))

    def start(self, user_id: int, *, now: Optional[datetime] = None) -> WorkSession:
        now = self._now(now)
        user_id = require_positive_id(user_id, "user_id")

        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("Usuario no encontrado")
        if not user.company_id:
            raise ValidationError("El usuario no tiene empresa asignada (company_id)")

        self._ensure_can_start(user_id, now)

        created = self._sessions.create_session(
            user_id=user_id,
            company_id=user.company_id,
            work_date=self._work_date(now),
            check_in=now,
        )
        logger.info(
            "session started",
            extra={"user_id": user_id, "session_id": created.session_id, "event": SessionEvent.START.value},
        )
        return created

    def _ensure_can_start(self, user_id: int, now: datetime) -> None:
        # The only place the daily policy is enforced.
        if self._sessions.find_open_for_user(user_id):
            raise DuplicateSessionError("Ya tienes una jornada activa")

        if self._policy == DailySessionPolicy.SINGLE:
            if self._sessions.list_for_user_and_date(user_id, self._work_date(now)):
                raise DuplicateSessionError("Ya registraste una jornada hoy")

    def pause(self, user_id: int, session_id: int, *, now: Optional[datetime] = None) -> WorkSession:
        return self._transition(user_id, session_id, SessionEvent.PAUSE, now)

    def resume(self, user_id: int, session_id: int, *, now: Optional[datetime] = None) -> WorkSession:
        return self._transition(user_id, session_id, SessionEvent.RESUME, now)

    def stop(self, user_id: int, session_id: int, *, now: Optional[datetime] = None) -> WorkSession:
        return self._transition(user_id, session_id, SessionEvent.STOP, now)

    def _load_tracked(self, user_id: int, session_id: int) -> WorkSession:
        current = self._sessions.find_open_for_user(user_id)
        if current is None:
            raise SessionMismatchError("No hay una jornada abierta")
        if current.session_id != session_id:
            raise SessionMismatchError(
                f"La jornada {session_id} no es la jornada abierta ({current.session_id}); recarga e inténtalo de nuevo"
            )
        return current

    def _transition(
        self,
        user_id: int,
        session_id: int,
        event: SessionEvent,
        now: Optional[datetime],
    ) -> WorkSession:
        now = self._now(now)
        user_id = require_positive_id(user_id, "user_id")
        session_id = require_positive_id(session_id, "session_id")

        current = self._load_tracked(user_id, session_id)
        strategy = self._factory.for_event(event=event, status=current.status)
        plan = strategy.plan(session=current, now=now)

        updated = self._apply(current, plan)
        self._audit(updated, now)

        logger.info(
            "session %s -> %s",
            plan.from_status.value,
            plan.status.value,
            extra={"user_id": user_id, "session_id": session_id, "event": event.value},
        )
        return updated

    def _ensure_no_open_break(self, session: WorkSession) -> None:
        stray = self._breaks.find_open_for_session(session.session_id)
        if stray is not None:
            raise ConflictError(
                f"La jornada {session.session_id} ya tiene una pausa abierta ({stray.break_id}); recarga e inténtalo de nuevo"
            )

    def _apply(self, current: WorkSession, plan: TransitionPlan) -> WorkSession:
        if plan.open_break_at is not None:
            self._ensure_no_open_break(current)

        # Session row first: its status guard is the conflict check, so nothing
        # else is written when another client got there before us.
        self._sessions.update_session(
            session_id=current.session_id,
            expected_status=plan.from_status,
            status=plan.status,
            check_in=plan.check_in,
            check_out=plan.check_out,
            accumulated_seconds=plan.accumulated_seconds,
            total_minutes=plan.total_minutes,
        )

        try:
            self._write_breaks(current, plan)
        except DomainError:
            self._undo_update(current, plan)
            raise

        refreshed = self._sessions.get_by_id(current.session_id)
        if refreshed is None:
            raise SessionMismatchError(f"La jornada {current.session_id} ya no existe")
        return refreshed

    def _write_breaks(self, current: WorkSession, plan: TransitionPlan) -> None:
        if plan.close_break is not None:
            self._breaks.close_break(
                break_id=plan.close_break.break_id,
                break_end=plan.close_break.break_end,
                duration_minutes=plan.close_break.duration_minutes,
            )
        if plan.open_break_at is not None:
            self._breaks.create_break(session_id=current.session_id, break_start=plan.open_break_at)

    def _undo_update(self, current: WorkSession, plan: TransitionPlan) -> None:
        """Put the session row back as it was read; the break error is re-raised by the caller."""
        try:
            self._sessions.restore_session(previous=current, expected_status=plan.status)
        except DomainError:
            logger.exception(
                "could not restore session after a failed break write",
                extra={"user_id": current.user_id, "session_id": current.session_id},
            )
        else:
            logger.warning(
                "break write failed, session restored to %s",
                current.status.value,
                extra={"user_id": current.user_id, "session_id": current.session_id},
            )

    def _audit(self, session: WorkSession, now: datetime) -> None:
        drift = projection_drift(session, now)
        if drift:
            logger.warning(
                "checkpoint and break totals disagree by %ss",
                drift,
                extra={"user_id": session.user_id, "session_id": session.session_id},
            )
