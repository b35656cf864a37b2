"""Print a user's elapsed work time once per second.

The ticker only recomputes from the last fetched session; the store is re-read
every ``--refresh`` seconds so pauses made from another client show up.
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.control_horario.control_horario.container import build_container
from src.control_horario.control_horario.core.logging import configure_logging
from src.control_horario.control_horario.sessions.accounting import format_hms
from src.control_horario.control_horario.sessions.ticker import ElapsedTicker

logger = logging.getLogger("live_timer")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show the live elapsed time of a user's open work session")
    parser.add_argument("--user-id", type=int, required=True)
    parser.add_argument("--refresh", type=float, default=30.0, help="seconds between store refreshes")
    return parser.parse_args()


def _print_tick(seconds: int) -> None:
    print("\r" + ":".join(format_hms(seconds)), end="", flush=True)


async def run(*, user_id: int, refresh: float) -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        target_hours=settings.TARGET_HOURS,
        session_policy=settings.SESSION_POLICY,
        display_timezone=settings.DISPLAY_TIMEZONE,
        attendance_cutoff=settings.ATTENDANCE_CUTOFF,
    )
    service = container.session_service
    ticker = ElapsedTicker(_print_tick)

    try:
        while True:
            current = await asyncio.to_thread(service.get_current, user_id)
            watched = ticker.session
            if current != watched:
                if current is None:
                    logger.info("no open session", extra={"user_id": user_id})
                else:
                    logger.info(
                        "watching session %s (%s)",
                        current.session_id,
                        current.status.value,
                        extra={"user_id": user_id, "session_id": current.session_id},
                    )
                ticker.watch(current)
            await asyncio.sleep(refresh)
    finally:
        await ticker.close()


def main() -> None:
    args = parse_args()
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    try:
        asyncio.run(run(user_id=args.user_id, refresh=args.refresh))
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()
