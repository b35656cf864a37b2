from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_user_id, error_response, login_required, month_year_args
from ..core.exceptions import DomainError
from ..container import Container
from ..sessions.controller import session_to_dict
from .service import ExportFile


def register(app: Flask, container: Container) -> None:
    reports = container.report_service
    users = container.user_service

    def _subject() -> int:
        # ?user_id= lets an admin read a colleague's records.
        return users.resolve_subject(current_user_id(), request.args.get("user_id"))

    def _send(export: ExportFile | None):
        if export is None:
            return "", 204
        return app.response_class(
            export.content,
            mimetype=export.mimetype,
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        try:
            raw_date = request.args.get("date")
            today = parse_iso_date(raw_date) if raw_date else reports.today()
            data = reports.dashboard(user_id=current_user_id(), today=today)
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "success": True,
                "date": today.isoformat(),
                "today_minutes": data.today_minutes,
                "today_hours": round(data.today_minutes / 60, 1),
                "today_breaks": data.today_breaks,
                "status_label": data.status_label,
                "current": session_to_dict(data.current),
                "chart": [asdict(p) for p in data.chart],
            }
        )

    @app.route("/api/history", methods=["GET"], endpoint="history")
    @login_required
    def history():
        try:
            month, year = month_year_args(reports.today())
            rows = reports.history_rows(user_id=_subject(), month=month, year=year)
        except DomainError as e:
            return error_response(e)

        return jsonify({"success": True, "month": month, "year": year, "rows": rows})

    @app.route("/api/reports", methods=["GET"], endpoint="reports")
    @login_required
    def monthly_report():
        try:
            today = reports.today()
            month, year = month_year_args(today)
            data = reports.monthly_report(user_id=_subject(), month=month, year=year, today=today)
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "success": True,
                "month": month,
                "year": year,
                "stats": asdict(data.stats),
                "breakdown": asdict(data.breakdown),
                "daily": [asdict(p) for p in data.daily],
                "weekly": [asdict(p) for p in data.weekly],
                "sessions": [session_to_dict(s) for s in data.sessions],
            }
        )

    @app.route("/api/reports.csv", methods=["GET"], endpoint="reports_csv")
    @login_required
    def reports_csv():
        try:
            month, year = month_year_args(reports.today())
            return _send(reports.export_csv(user_id=_subject(), month=month, year=year))
        except DomainError as e:
            return error_response(e)

    @app.route("/api/reports.xlsx", methods=["GET"], endpoint="reports_xlsx")
    @login_required
    def reports_xlsx():
        try:
            month, year = month_year_args(reports.today())
            return _send(reports.export_xlsx(user_id=_subject(), month=month, year=year))
        except DomainError as e:
            return error_response(e)
