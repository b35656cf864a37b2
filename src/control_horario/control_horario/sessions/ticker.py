from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..core.constants import TICK_INTERVAL_SECONDS
from ..core.enums import SessionStatus
from .accounting import elapsed_seconds
from .model import WorkSession

logger = logging.getLogger(__name__)


class ElapsedTicker:
    """Recompute a visible session's elapsed seconds once per tick.

    The tick only does arithmetic over the already-fetched session; it never
    calls the store. ``watch`` replaces whatever was being watched, so at most
    one tick task exists per ticker. Sessions that are not active get a single
    frozen value and no task.
    """

    def __init__(
        self,
        on_tick: Callable[[int], None],
        *,
        interval: float = TICK_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._on_tick = on_tick
        self._interval = float(interval)
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._session: Optional[WorkSession] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def session(self) -> Optional[WorkSession]:
        return self._session

    def watch(self, session: Optional[WorkSession]) -> None:
        """Must be called from inside a running event loop."""
        self.cancel()
        self._session = session

        if session is None:
            self._on_tick(0)
            return
        if session.status != SessionStatus.ACTIVE:
            self._on_tick(elapsed_seconds(session, self._clock()))
            return

        self._task = asyncio.get_running_loop().create_task(self._run(session))
        self._task.add_done_callback(functools.partial(self._report_failure, session.session_id))

    async def _run(self, session: WorkSession) -> None:
        while True:
            self._on_tick(elapsed_seconds(session, self._clock()))
            await asyncio.sleep(self._interval)

    def _report_failure(self, session_id: int, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("elapsed ticker stopped", exc_info=error, extra={"session_id": session_id})

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def close(self) -> None:
        task = self._task
        self.cancel()
        self._session = None
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
