"""Example: drive the service layer directly (no Flask).

Controllers are thin; the session rules and report math live in the services.
"""

import importlib

from config import get_settings_module

from src.control_horario.control_horario.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    snap = container.session_service.snapshot(user_id=1)
    print("open session:", snap.session, "elapsed:", snap.elapsed_seconds)

    today = container.report_service.today()
    report = container.report_service.monthly_report(user_id=1, month=today.month, year=today.year)
    print(report.stats)


if __name__ == "__main__":
    main()
