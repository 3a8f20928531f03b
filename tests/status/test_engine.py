from datetime import timedelta

import pytest

from src.timeclock.timeclock.core.enums import Action, Status
from src.timeclock.timeclock.records.model import EventRecord
from src.timeclock.timeclock.status.engine import (
    current_status,
    elapsed_since,
    group_by_pin,
    last_event,
    working_pins,
)
from tests.fakes import local


def ev(action: Action, hour: int, minute: int = 0, pin: str = "1234", record_id=None) -> EventRecord:
    return EventRecord(pin=pin, name="Ana", action=action, time=local(2026, 1, 14, hour, minute), record_id=record_id)


def test_empty_log_is_not_clocked_in():
    assert current_status([]) == Status.NOT_CLOCKED_IN


@pytest.mark.parametrize(
    "action, expected",
    [
        (Action.CLOCK_IN, Status.WORKING),
        (Action.END_BREAK, Status.WORKING),
        (Action.END_RESTROOM, Status.WORKING),
        (Action.END_LUNCH, Status.WORKING),
        (Action.END_IT_ISSUE, Status.WORKING),
        (Action.END_MEETING, Status.WORKING),
        (Action.START_BREAK, Status.ON_BREAK),
        (Action.START_LUNCH, Status.ON_LUNCH),
        (Action.START_RESTROOM, Status.ON_RESTROOM),
        (Action.START_IT_ISSUE, Status.ON_IT_ISSUE),
        (Action.START_MEETING, Status.IN_MEETING),
        (Action.CLOCK_OUT, Status.CLOCKED_OUT),
        (Action.ABSENT, Status.ABSENT),
    ],
)
def test_last_action_maps_to_status(action, expected):
    assert current_status([ev(action, 9)]) == expected


def test_status_depends_only_on_latest_event_not_input_order():
    events = [ev(Action.CLOCK_IN, 8), ev(Action.START_LUNCH, 12), ev(Action.END_LUNCH, 12, 30)]

    assert current_status(events) == Status.WORKING
    assert current_status(list(reversed(events))) == Status.WORKING
    assert current_status([events[2], events[0], events[1]]) == Status.WORKING


def test_history_before_last_event_is_irrelevant():
    nonsense = [ev(Action.END_MEETING, 7), ev(Action.CLOCK_OUT, 8), ev(Action.START_BREAK, 9)]
    clean = [ev(Action.START_BREAK, 9)]

    assert current_status(nonsense) == current_status(clean) == Status.ON_BREAK


def test_same_instant_falls_back_to_insertion_id():
    events = [ev(Action.CLOCK_OUT, 17, record_id=2), ev(Action.CLOCK_IN, 17, record_id=1)]

    assert last_event(events).action == Action.CLOCK_OUT
    assert current_status(events) == Status.CLOCKED_OUT


def test_elapsed_since_floors_to_whole_minutes():
    start = local(2026, 1, 14, 8, 0)
    now = start + timedelta(hours=2, minutes=5, seconds=59)

    assert elapsed_since(start, now) == timedelta(hours=2, minutes=5)


def test_elapsed_since_never_negative():
    start = local(2026, 1, 14, 8, 0)

    assert elapsed_since(start, start - timedelta(minutes=3)) == timedelta(0)


def test_group_by_pin_sorts_each_group():
    events = [
        ev(Action.CLOCK_OUT, 17, pin="1111"),
        ev(Action.CLOCK_IN, 8, pin="2222"),
        ev(Action.CLOCK_IN, 8, pin="1111"),
    ]

    grouped = group_by_pin(events)

    assert [e.action for e in grouped["1111"]] == [Action.CLOCK_IN, Action.CLOCK_OUT]
    assert len(grouped["2222"]) == 1


def test_working_pins_excludes_sub_states():
    events = [
        ev(Action.CLOCK_IN, 8, pin="1111"),
        ev(Action.CLOCK_IN, 8, pin="2222"),
        ev(Action.START_BREAK, 10, pin="2222"),
        ev(Action.CLOCK_IN, 8, pin="3333"),
        ev(Action.CLOCK_OUT, 9, pin="3333"),
    ]

    assert working_pins(events) == ["1111"]
