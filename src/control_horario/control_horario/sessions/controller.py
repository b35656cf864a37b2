from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import isoformat_utc, parse_iso_datetime
from ..common.http import current_user_id, error_response, login_required
from ..core.exceptions import DomainError
from ..container import Container
from .model import Break, WorkSession


def break_to_dict(b: Break) -> dict:
    return {
        "break_id": b.break_id,
        "break_start": isoformat_utc(b.break_start),
        "break_end": isoformat_utc(b.break_end),
        "duration_minutes": b.duration_minutes,
    }


def session_to_dict(s: Optional[WorkSession]) -> Optional[dict]:
    if s is None:
        return None
    return {
        "session_id": s.session_id,
        "user_id": s.user_id,
        "company_id": s.company_id,
        "date": s.work_date.isoformat(),
        "started_at": isoformat_utc(s.started_at),
        "check_in": isoformat_utc(s.check_in),
        "check_out": isoformat_utc(s.check_out),
        "accumulated_seconds": s.accumulated_seconds,
        "total_minutes": s.total_minutes,
        "status": s.status.value,
        "breaks": [break_to_dict(b) for b in s.breaks],
    }


def register(app: Flask, container: Container) -> None:
    service = container.session_service

    def _command_result(session: WorkSession, message: str):
        return jsonify(
            {
                "success": True,
                "message": message,
                "session": session_to_dict(session),
                "elapsed_seconds": service.elapsed(session),
            }
        )

    @app.route("/api/session/current", methods=["GET"], endpoint="session_current")
    @login_required
    def session_current():
        try:
            # ?at=<ISO-8601> evaluates the snapshot at a given instant instead of now.
            raw_at = request.args.get("at")
            at = parse_iso_datetime(raw_at) if raw_at else None
            snap = service.snapshot(current_user_id(), now=at)
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "success": True,
                "session": session_to_dict(snap.session),
                "elapsed_seconds": snap.elapsed_seconds,
                "computed_at": isoformat_utc(snap.computed_at),
            }
        )

    @app.route("/api/session/start", methods=["POST"], endpoint="session_start")
    @login_required
    def session_start():
        try:
            created = service.start(current_user_id())
            return _command_result(created, "Jornada iniciada"), 201
        except DomainError as e:
            return error_response(e)

    @app.route("/api/session/<int:session_id>/pause", methods=["POST"], endpoint="session_pause")
    @login_required
    def session_pause(session_id: int):
        try:
            return _command_result(service.pause(current_user_id(), session_id), "Pausa iniciada")
        except DomainError as e:
            return error_response(e)

    @app.route("/api/session/<int:session_id>/resume", methods=["POST"], endpoint="session_resume")
    @login_required
    def session_resume(session_id: int):
        try:
            return _command_result(service.resume(current_user_id(), session_id), "Jornada reanudada")
        except DomainError as e:
            return error_response(e)

    @app.route("/api/session/<int:session_id>/stop", methods=["POST"], endpoint="session_stop")
    @login_required
    def session_stop(session_id: int):
        try:
            return _command_result(service.stop(current_user_id(), session_id), "Jornada finalizada")
        except DomainError as e:
            return error_response(e)
