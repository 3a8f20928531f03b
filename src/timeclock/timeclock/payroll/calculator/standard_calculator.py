from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from ...common.datetime_utils import as_utc, format_display
from ...core.enums import Action, Activity
from ...records.model import EventRecord
from ...status.engine import sort_events
from ..model import PayrollSummary
from .base import PayrollCalculator


def _minutes_between(start: datetime, end: datetime) -> float:
    return (as_utc(end) - as_utc(start)).total_seconds() / 60


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: paid = clocked time - break - lunch.

    Walks the window in time order with one open ClockIn cursor and one open
    cursor per activity. A second open of the same cursor replaces the first,
    and anything still open at the end of the window earns nothing. Restroom,
    IT issue and meeting time stay inside paid time.
    """

    def __init__(self, tz: ZoneInfo | timezone = timezone.utc):
        self._tz = tz

    def _when(self, event: EventRecord) -> str:
        return format_display(event.time, self._tz)

    def summarize(
        self,
        events: Iterable[EventRecord],
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> PayrollSummary:
        start = as_utc(window_start) if window_start else None
        end = as_utc(window_end) if window_end else None

        in_window = [
            e
            for e in events
            if (start is None or as_utc(e.time) >= start) and (end is None or as_utc(e.time) <= end)
        ]

        work_minutes = 0.0
        activity_minutes = {a: 0.0 for a in Activity}
        shifts = 0
        warnings: list[str] = []

        clock_in: Optional[EventRecord] = None
        open_activity: dict[Activity, EventRecord] = {}

        for event in sort_events(in_window):
            action = event.action

            if action == Action.CLOCK_IN:
                shifts += 1
                if clock_in is not None:
                    warnings.append(f"ClockIn at {self._when(clock_in)} was replaced by a later ClockIn")
                clock_in = event
            elif action == Action.CLOCK_OUT:
                if clock_in is None:
                    warnings.append(f"ClockOut at {self._when(event)} has no matching ClockIn")
                    continue
                work_minutes += _minutes_between(clock_in.time, event.time)
                clock_in = None
            elif action.is_start:
                activity = action.activity
                previous = open_activity.get(activity)
                if previous is not None:
                    warnings.append(f"{previous.action.value} at {self._when(previous)} was replaced by a later one")
                open_activity[activity] = event
            elif action.is_end:
                activity = action.activity
                opened = open_activity.pop(activity, None)
                if opened is None:
                    warnings.append(f"{action.value} at {self._when(event)} has no matching start")
                    continue
                activity_minutes[activity] += _minutes_between(opened.time, event.time)

        if clock_in is not None:
            warnings.append(f"ClockIn at {self._when(clock_in)} has no ClockOut in this period")
        for opened in sorted(open_activity.values(), key=EventRecord.sort_key):
            warnings.append(f"{opened.action.value} at {self._when(opened)} was never ended in this period")

        return PayrollSummary(
            work_minutes=work_minutes,
            activity_minutes=activity_minutes,
            shifts=shifts,
            warnings=tuple(warnings),
        )


def aggregate_hours(
    events: Iterable[EventRecord],
    window_start: Optional[datetime] = None,
    window_end: Optional[datetime] = None,
) -> PayrollSummary:
    return StandardPayrollCalculator().summarize(events, window_start, window_end)
