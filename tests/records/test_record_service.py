from datetime import date

import pytest

from src.timeclock.timeclock.core.enums import Action
from src.timeclock.timeclock.core.exceptions import ConflictError, ExistingRecordsWarning, ValidationError
from src.timeclock.timeclock.records.model import EventRecord
from src.timeclock.timeclock.records.service import RecordService
from tests.fakes import PT, InMemoryRecords, InMemoryUsers, RecordingNotifier, local


@pytest.fixture
def setup():
    users = InMemoryUsers()
    users.add("Ana", "1234")
    users.add("Ben", "5678")
    records = InMemoryRecords()
    notifier = RecordingNotifier()
    svc = RecordService(records, users, notifier, tz=PT)
    return svc, records, notifier


def test_add_record_copies_name_and_notifies(setup):
    svc, records, notifier = setup

    rec = svc.add_record(pin="1234", action="ClockIn", time=local(2026, 1, 14, 8), ip="1.2.3.4")

    assert rec.record_id == 1
    assert rec.name == "Ana"
    assert records.items[0].action == Action.CLOCK_IN
    assert notifier.sent == [rec]


def test_add_record_accepts_legacy_display_time(setup):
    svc, records, _ = setup

    rec = svc.add_record(pin="1234", action="ClockIn", time="01/14/2026, 08:00:00 AM")

    assert rec.time == local(2026, 1, 14, 8)


def test_add_record_unknown_pin(setup):
    svc, _, _ = setup

    with pytest.raises(ValidationError, match="No user with this PIN"):
        svc.add_record(pin="9999", action="ClockIn")


def test_add_record_unknown_action(setup):
    svc, _, _ = setup

    with pytest.raises(ValidationError, match="Unknown action"):
        svc.add_record(pin="1234", action="Teleport")


def test_add_record_rejects_illegal_transition(setup):
    svc, records, _ = setup

    with pytest.raises(ValidationError, match="clock in before you can clock out"):
        svc.add_record(pin="1234", action="ClockOut")
    assert records.items == []


def test_add_record_transition_check_can_be_disabled():
    users = InMemoryUsers()
    users.add("Ana", "1234")
    svc = RecordService(InMemoryRecords(), users, RecordingNotifier(), tz=PT, enforce_transitions=False)

    assert svc.add_record(pin="1234", action="EndLunch").action == Action.END_LUNCH
    with pytest.raises(ValidationError):
        svc.add_record(pin="1234", action="Absent")


def test_notification_failure_does_not_block_write():
    users = InMemoryUsers()
    users.add("Ana", "1234")
    records = InMemoryRecords()
    svc = RecordService(records, users, RecordingNotifier(fail=True), tz=PT)

    rec = svc.add_record(pin="1234", action="ClockIn")

    assert rec.record_id == 1
    assert len(records.items) == 1


def test_manual_clock_out_is_admin_action(setup):
    svc, _, notifier = setup

    rec = svc.manual_clock_out(pin="1234", time=local(2026, 1, 14, 18), note="  forgot to punch  ")

    assert rec.action == Action.CLOCK_OUT
    assert rec.admin_action is True
    assert rec.note == "forgot to punch"
    assert notifier.sent[-1].admin_action


def test_mark_absent_records_local_midnight(setup):
    svc, _, _ = setup

    rec = svc.mark_absent(pin="1234", day="2026-01-14")

    assert rec.action == Action.ABSENT
    assert rec.time == local(2026, 1, 14)
    assert rec.admin_action is True
    assert rec.note == "Marked absent by admin"


def test_mark_absent_twice_is_conflict(setup):
    svc, _, _ = setup
    svc.mark_absent(pin="1234", day=date(2026, 1, 14))

    with pytest.raises(ConflictError):
        svc.mark_absent(pin="1234", day=date(2026, 1, 14))
    with pytest.raises(ConflictError):
        svc.mark_absent(pin="1234", day=date(2026, 1, 14), force=True)


def test_mark_absent_warns_about_existing_records_unless_forced(setup):
    svc, records, _ = setup
    svc.add_record(pin="1234", action="ClockIn", time=local(2026, 1, 14, 8))

    with pytest.raises(ExistingRecordsWarning):
        svc.mark_absent(pin="1234", day="2026-01-14")

    rec = svc.mark_absent(pin="1234", day="2026-01-14", force=True)
    assert rec.action == Action.ABSENT
    assert len(records.items) == 2


def test_mark_absent_other_day_is_independent(setup):
    svc, _, _ = setup
    svc.add_record(pin="1234", action="ClockIn", time=local(2026, 1, 13, 8))

    assert svc.mark_absent(pin="1234", day="2026-01-14").action == Action.ABSENT


def test_list_records_sorted_and_filtered(setup):
    svc, records, _ = setup
    records.append(EventRecord(pin="5678", name="Ben", action=Action.CLOCK_IN, time=local(2026, 1, 14, 9)))
    records.append(EventRecord(pin="1234", name="Ana", action=Action.CLOCK_IN, time=local(2026, 1, 14, 8)))

    assert [r.pin for r in svc.list_records()] == ["1234", "5678"]
    assert [r.pin for r in svc.list_records(pin="5678")] == ["5678"]


def test_clock_out_working_continues_after_failure(setup, fixed_now):
    svc, records, notifier = setup
    svc.add_record(pin="1234", action="ClockIn", time=local(2026, 1, 14, 8))
    svc.add_record(pin="5678", action="ClockIn", time=local(2026, 1, 14, 8))
    records.failing_pins.add("1234")

    result = svc.clock_out_working(now=fixed_now, ip="server", note="Bulk clock-out by admin")

    assert result.failed == ["1234"]
    assert [r.pin for r in result.clocked_out] == ["5678"]
    assert result.clocked_out[0].note == "Bulk clock-out by admin"
    assert result.to_dict(PT)["succeeded_count"] == 1


def test_clock_out_working_rejects_bad_note_before_writing(setup, fixed_now):
    svc, records, _ = setup
    svc.add_record(pin="1234", action="ClockIn", time=local(2026, 1, 14, 8))

    with pytest.raises(ValidationError):
        svc.clock_out_working(now=fixed_now, note=["x"])
    assert len(records.items) == 1


def test_manual_clock_out_note_too_long(setup):
    svc, records, _ = setup

    with pytest.raises(ValidationError, match="at most 500"):
        svc.manual_clock_out(pin="1234", note="n" * 501)
    assert records.items == []
