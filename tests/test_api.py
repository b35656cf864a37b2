from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from conftest import InMemoryUsers, completed_session, make_user, utc
from src.control_horario.control_horario.core.enums import Role
from src.control_horario.control_horario.container import wire
from src.control_horario.control_horario.main import create_app


@pytest.fixture
def app(monkeypatch, sessions_repo, breaks_repo, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    users = InMemoryUsers([make_user(password_hash=generate_password_hash("demo1234"))])
    container = wire(users_repo=users, sessions_repo=sessions_repo, breaks_repo=breaks_repo, clock=clock)
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client):
    resp = client.post("/api/auth/login", json={"email": "alex@techsolutions.com", "password": "demo1234"})
    assert resp.status_code == 200
    return client


def test_endpoints_require_login(client):
    assert client.get("/api/session/current").status_code == 401
    assert client.post("/api/session/start").status_code == 401
    assert client.get("/api/reports.csv").status_code == 401


def test_login_with_bad_password(client):
    resp = client.post("/api/auth/login", json={"email": "alex@techsolutions.com", "password": "x"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_register_then_login(client):
    resp = client.post(
        "/api/auth/register",
        json={"full_name": "Sam Ruiz", "email": "sam@techsolutions.com", "password": "secreto1", "company_id": 10},
    )
    assert resp.status_code == 201

    resp = client.post("/api/auth/login", json={"email": "sam@techsolutions.com", "password": "secreto1"})
    assert resp.get_json()["user"]["full_name"] == "Sam Ruiz"
    assert client.get("/api/me").get_json()["user"]["first_name"] == "Sam"


def test_register_duplicate_email_is_400(client):
    resp = client.post(
        "/api/auth/register",
        json={"full_name": "Otro", "email": "alex@techsolutions.com", "password": "secreto1", "company_id": 10},
    )
    assert resp.status_code == 400


def test_session_lifecycle(logged_in, clock):
    resp = logged_in.post("/api/session/start")
    assert resp.status_code == 201
    body = resp.get_json()
    session_id = body["session"]["session_id"]
    assert body["session"]["status"] == "active"
    assert body["session"]["check_in"] == "2025-03-12T09:00:00Z"
    assert body["session"]["date"] == "2025-03-12"

    clock.now = utc(2025, 3, 12, 9, 30)
    assert logged_in.post(f"/api/session/{session_id}/pause").get_json()["session"]["status"] == "paused"

    clock.now = utc(2025, 3, 12, 9, 45)
    current = logged_in.get("/api/session/current").get_json()
    assert current["elapsed_seconds"] == 1800

    logged_in.post(f"/api/session/{session_id}/resume")
    clock.now = utc(2025, 3, 12, 17, 45)
    done = logged_in.post(f"/api/session/{session_id}/stop").get_json()

    assert done["session"]["status"] == "completed"
    assert done["session"]["total_minutes"] == 510
    assert done["elapsed_seconds"] == 510 * 60
    assert done["session"]["breaks"][0]["duration_minutes"] == 15

    assert logged_in.get("/api/session/current").get_json()["session"] is None


def test_error_mapping(logged_in, clock):
    session_id = logged_in.post("/api/session/start").get_json()["session"]["session_id"]

    assert logged_in.post("/api/session/start").status_code == 409
    assert logged_in.post(f"/api/session/{session_id}/resume").status_code == 400

    resp = logged_in.post(f"/api/session/{session_id + 5}/pause")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "SessionMismatchError"


def test_reports_and_exports(logged_in, clock):
    session_id = logged_in.post("/api/session/start").get_json()["session"]["session_id"]
    clock.now = utc(2025, 3, 12, 17, 0)
    logged_in.post(f"/api/session/{session_id}/stop")

    history = logged_in.get("/api/history?month=3&year=2025").get_json()
    assert history["rows"][0]["total"] == "8h 0m 0s"
    assert history["rows"][0]["day"] == "Miércoles"

    report = logged_in.get("/api/reports?month=3&year=2025").get_json()
    assert report["stats"]["total_hours"] == 8.0
    assert report["stats"]["work_days"] == 1

    dashboard = logged_in.get("/api/dashboard").get_json()
    assert dashboard["status_label"] == "Inactivo"
    assert dashboard["today_minutes"] == 480

    csv_resp = logged_in.get("/api/reports.csv?month=3&year=2025")
    assert csv_resp.status_code == 200
    assert "reporte_Marzo_2025.csv" in csv_resp.headers["Content-Disposition"]
    assert csv_resp.data.decode("utf-8-sig").splitlines()[1] == "2025-03-12,miércoles,09:00,17:00,8.00,0,Excelente"

    assert logged_in.get("/api/reports.xlsx?month=3&year=2025").status_code == 200


def test_csv_with_nothing_to_export_is_204(logged_in):
    assert logged_in.get("/api/reports.csv?month=1&year=2025").status_code == 204


def test_bad_month_is_400(logged_in):
    assert logged_in.get("/api/history?month=0&year=2025").status_code == 400
    assert logged_in.get("/api/reports?month=abc").status_code == 400


def test_snapshot_at_given_instant(logged_in):
    logged_in.post("/api/session/start")

    body = logged_in.get("/api/session/current?at=2025-03-12T10:10:00%2B01:00").get_json()
    assert body["elapsed_seconds"] == 600
    assert body["computed_at"] == "2025-03-12T09:10:00Z"


@pytest.mark.parametrize("at", ["ayer", "2025-03-12T09:10:00"])
def test_snapshot_rejects_malformed_or_naive_instant(logged_in, at):
    resp = logged_in.get(f"/api/session/current?at={at}")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "ValidationError"


def test_dashboard_for_given_date(logged_in):
    assert logged_in.get("/api/dashboard?date=2025-03-11").get_json()["date"] == "2025-03-11"
    assert logged_in.get("/api/dashboard").get_json()["date"] == "2025-03-12"
    assert logged_in.get("/api/dashboard?date=2025-13-01").status_code == 400


def test_regular_user_cannot_read_colleague_history(logged_in):
    resp = logged_in.get("/api/history?month=3&year=2025&user_id=2")
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "AuthorizationError"


def test_admin_reads_colleague_report(monkeypatch, sessions_repo, breaks_repo, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    admin = replace(
        make_user(1, email="jefa@techsolutions.com", password_hash=generate_password_hash("demo1234")),
        role=Role.ADMIN,
    )
    users = InMemoryUsers([admin, make_user(2, email="ana@techsolutions.com")])
    sessions_repo.add(completed_session(1, date(2025, 3, 10), 420, user_id=2))
    app = create_app(wire(users_repo=users, sessions_repo=sessions_repo, breaks_repo=breaks_repo, clock=clock))
    client = app.test_client()
    client.post("/api/auth/login", json={"email": "jefa@techsolutions.com", "password": "demo1234"})

    report = client.get("/api/reports?month=3&year=2025&user_id=2").get_json()
    assert report["stats"]["total_hours"] == 7.0
    assert client.get("/api/reports?month=3&year=2025").get_json()["stats"]["work_days"] == 0
