from src.timeclock.timeclock.core.enums import Action, Activity
from src.timeclock.timeclock.payroll.calculator.standard_calculator import (
    StandardPayrollCalculator,
    aggregate_hours,
)
from src.timeclock.timeclock.records.model import EventRecord
from tests.fakes import PT, local


def ev(action: Action, hour: int, minute: int = 0, day: int = 14) -> EventRecord:
    return EventRecord(pin="1234", name="Ana", action=action, time=local(2026, 1, day, hour, minute))


def full_day():
    return [
        ev(Action.CLOCK_IN, 8),
        ev(Action.START_LUNCH, 12),
        ev(Action.END_LUNCH, 12, 30),
        ev(Action.CLOCK_OUT, 17),
    ]


def test_lunch_is_subtracted_from_paid_time():
    summary = aggregate_hours(full_day())

    assert summary.work_minutes == 540
    assert summary.lunch_minutes == 30
    assert summary.paid_minutes == 510
    assert summary.paid_hours == 8.5
    assert summary.paid_display == "8h 30m"
    assert summary.shifts == 1
    assert summary.warnings == ()


def test_input_order_does_not_matter():
    assert aggregate_hours(list(reversed(full_day()))) == aggregate_hours(full_day())


def test_aggregation_is_idempotent():
    events = full_day()

    assert aggregate_hours(events) == aggregate_hours(events)


def test_paid_plus_unpaid_equals_work_for_terminated_sequences():
    events = full_day() + [
        ev(Action.CLOCK_IN, 8, day=15),
        ev(Action.START_BREAK, 10, day=15),
        ev(Action.END_BREAK, 10, 15, day=15),
        ev(Action.START_RESTROOM, 11, day=15),
        ev(Action.END_RESTROOM, 11, 10, day=15),
        ev(Action.CLOCK_OUT, 16, day=15),
    ]

    s = aggregate_hours(events)

    assert s.paid_minutes + s.break_minutes + s.lunch_minutes == s.work_minutes
    assert s.shifts == 2


def test_restroom_it_issue_and_meeting_are_paid():
    events = [
        ev(Action.CLOCK_IN, 8),
        ev(Action.START_RESTROOM, 9),
        ev(Action.END_RESTROOM, 9, 10),
        ev(Action.START_IT_ISSUE, 10),
        ev(Action.END_IT_ISSUE, 10, 20),
        ev(Action.START_MEETING, 11),
        ev(Action.END_MEETING, 11, 30),
        ev(Action.CLOCK_OUT, 12),
    ]

    s = aggregate_hours(events)

    assert s.paid_minutes == s.work_minutes == 240
    assert s.minutes_for(Activity.RESTROOM) == 10
    assert s.minutes_for(Activity.IT_ISSUE) == 20
    assert s.minutes_for(Activity.MEETING) == 30


def test_unterminated_clock_in_contributes_nothing():
    s = aggregate_hours([ev(Action.CLOCK_IN, 8)])

    assert s.work_minutes == 0
    assert s.shifts == 1
    assert len(s.warnings) == 1
    assert "no ClockOut" in s.warnings[0]


def test_second_clock_in_overwrites_first():
    events = [ev(Action.CLOCK_IN, 8), ev(Action.CLOCK_IN, 9), ev(Action.CLOCK_OUT, 10)]

    s = aggregate_hours(events)

    assert s.work_minutes == 60
    assert s.shifts == 2
    assert any("replaced" in w for w in s.warnings)


def test_unmatched_end_and_trailing_start_are_discarded_with_warnings():
    events = [
        ev(Action.CLOCK_IN, 8),
        ev(Action.END_BREAK, 9),
        ev(Action.START_LUNCH, 12),
        ev(Action.CLOCK_OUT, 17),
    ]

    s = aggregate_hours(events)

    assert s.work_minutes == 540
    assert s.lunch_minutes == 0
    assert s.break_minutes == 0
    assert len(s.warnings) == 2


def test_window_filters_events():
    events = full_day() + [ev(Action.CLOCK_IN, 8, day=15), ev(Action.CLOCK_OUT, 9, day=15)]

    s = aggregate_hours(events, local(2026, 1, 14), local(2026, 1, 14, 23, 59))

    assert s.work_minutes == 540
    assert s.shifts == 1


def test_window_cut_leaves_clock_in_unterminated():
    s = aggregate_hours(full_day(), local(2026, 1, 14), local(2026, 1, 14, 15, 0))

    assert s.work_minutes == 0
    assert s.lunch_minutes == 30


def test_warnings_use_local_display_time():
    calc = StandardPayrollCalculator(PT)

    s = calc.summarize([ev(Action.CLOCK_IN, 8)])

    assert "01/14/2026, 08:00:00 AM" in s.warnings[0]


def test_paid_display_never_shows_sixty_minutes():
    events = [
        EventRecord(pin="1", name="A", action=Action.CLOCK_IN, time=local(2026, 1, 14, 8, 0)),
        EventRecord(
            pin="1",
            name="A",
            action=Action.CLOCK_OUT,
            time=local(2026, 1, 14, 8, 0).replace(hour=16, minute=59, second=45),
        ),
    ]

    assert aggregate_hours(events).paid_display == "9h 0m"
