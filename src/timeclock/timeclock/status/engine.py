"""Status derivation from the append-only record log.

Everything here is a pure function of the records passed in: no database
access, no caching. Callers re-run it on every read.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import as_utc
from ..core.enums import Action, Activity, Status
from ..records.model import EventRecord

_ACTION_STATUS: dict[Action, Status] = {
    Action.CLOCK_IN: Status.WORKING,
    Action.CLOCK_OUT: Status.CLOCKED_OUT,
    Action.ABSENT: Status.ABSENT,
}
for _activity in Activity:
    _ACTION_STATUS[Action.start_of(_activity)] = Status.on(_activity)
    _ACTION_STATUS[Action.end_of(_activity)] = Status.WORKING


def status_for_action(action: Action) -> Status:
    return _ACTION_STATUS[action]


def sort_events(events: Iterable[EventRecord]) -> list[EventRecord]:
    """Chronological order; equal instants fall back to insertion id."""
    return sorted(events, key=EventRecord.sort_key)


def last_event(events: Iterable[EventRecord]) -> Optional[EventRecord]:
    ordered = sort_events(events)
    return ordered[-1] if ordered else None


def current_status(events: Iterable[EventRecord]) -> Status:
    last = last_event(events)
    if last is None:
        return Status.NOT_CLOCKED_IN
    return status_for_action(last.action)


def elapsed_since(last_event_time: datetime, now: datetime) -> timedelta:
    """Whole minutes between the last event and ``now``; never negative."""

    seconds = (as_utc(now) - as_utc(last_event_time)).total_seconds()
    return timedelta(minutes=max(int(seconds // 60), 0))


def group_by_pin(events: Iterable[EventRecord]) -> dict[str, list[EventRecord]]:
    grouped: dict[str, list[EventRecord]] = defaultdict(list)
    for event in events:
        grouped[event.pin].append(event)
    return {pin: sort_events(items) for pin, items in grouped.items()}


def statuses_by_pin(events: Iterable[EventRecord]) -> dict[str, Status]:
    return {pin: current_status(items) for pin, items in group_by_pin(events).items()}


def working_pins(events: Sequence[EventRecord]) -> list[str]:
    """PINs whose last action leaves them on the clock and not in a sub-state."""

    return sorted(pin for pin, status in statuses_by_pin(events).items() if status == Status.WORKING)
