from __future__ import annotations

import logging
import socket
import threading
from datetime import datetime, time
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import now_utc
from ..core.constants import AUTO_CLOCK_OUT_NOTE
from ..records.model import BatchClockOutResult
from ..records.service import RecordService

logger = logging.getLogger(__name__)


def server_ip() -> str:
    """Best-effort address recorded on automatic clock-outs."""

    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError:
        return "server"


class AutoClockOutJob:
    """Clocks out everyone still Working when the local wall clock reads the trigger time.

    ``tick`` is meant to be polled (about once a minute). It fires only on an
    exact hour:minute match, at most once per matching minute, and never
    catches up on a missed minute. Overlapping ticks are dropped.
    """

    def __init__(
        self,
        records: RecordService,
        *,
        tz: ZoneInfo,
        trigger_time: time,
        ip_resolver: Callable[[], str] = server_ip,
    ):
        self._records = records
        self._tz = tz
        self._trigger = trigger_time
        self._ip_resolver = ip_resolver
        self._lock = threading.Lock()
        self._last_run_key: Optional[str] = None

    @property
    def trigger_time(self) -> time:
        return self._trigger

    def due(self, now: datetime) -> bool:
        local = now.astimezone(self._tz)
        return local.hour == self._trigger.hour and local.minute == self._trigger.minute

    def tick(self, now: Optional[datetime] = None) -> Optional[BatchClockOutResult]:
        now = now or now_utc()
        if not self.due(now):
            return None

        run_key = now.astimezone(self._tz).strftime("%Y-%m-%d %H:%M")
        if not self._lock.acquire(blocking=False):
            logger.debug("Auto clock-out already running, skipping tick")
            return None
        try:
            if self._last_run_key == run_key:
                return None
            self._last_run_key = run_key
            return self._run(now)
        finally:
            self._lock.release()

    def _run(self, now: datetime) -> BatchClockOutResult:
        logger.info("Running automatic clock-out for %s", self._trigger.strftime("%H:%M"))
        result = self._records.clock_out_working(now=now, ip=self._ip_resolver(), note=AUTO_CLOCK_OUT_NOTE)
        logger.info(
            "Automatic clock-out finished: %d clocked out, %d failed",
            len(result.clocked_out),
            len(result.failed),
        )
        return result
