from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo

from ..common.datetime_utils import local_day_bounds, now_utc, parse_local_date, parse_timestamp
from ..common.validators import optional_text, require_pin
from ..core.constants import ABSENT_NOTE, MAX_NOTE_LENGTH
from ..core.enums import Action, Status
from ..core.exceptions import ConflictError, ExistingRecordsWarning, StoreError, ValidationError
from ..employees.model import User
from ..employees.repository import UserRepository
from ..notifications.notifier import Notifier
from ..status.engine import current_status, group_by_pin, sort_events
from ..status.transitions import ensure_transition
from .model import BatchClockOutResult, EventRecord
from .repository import EventLogStore

logger = logging.getLogger(__name__)

TimeInput = Union[str, datetime, None]


def _clean_note(note: Optional[str]) -> Optional[str]:
    return optional_text(note, "Note", MAX_NOTE_LENGTH)


class RecordService:
    """Use cases that append to the record log.

    Every write goes through ``_append`` so the notifier sees exactly what was
    stored. Notification problems are logged and never undo the write.
    """

    def __init__(
        self,
        records: EventLogStore,
        users: UserRepository,
        notifier: Notifier,
        *,
        tz: ZoneInfo,
        enforce_transitions: bool = True,
    ):
        self._records = records
        self._users = users
        self._notifier = notifier
        self._tz = tz
        self._enforce = enforce_transitions

    def _employee(self, pin: str) -> User:
        user = self._users.get_by_pin(pin)
        if not user or not user.is_employee:
            raise ValidationError("No user with this PIN")
        return user

    def _time(self, value: TimeInput) -> datetime:
        if value is None or (isinstance(value, str) and not value.strip()):
            return now_utc()
        return parse_timestamp(value, self._tz)

    def _append(self, record: EventRecord) -> EventRecord:
        record_id = self._records.append(record)
        stored = replace(record, record_id=record_id)
        logger.debug("Appended record %s: %s %s", record_id, stored.pin, stored.action.value)

        try:
            self._notifier.notify(stored)
        except Exception:
            logger.exception("Notification failed for record %s", record_id)
        return stored

    def add_record(self, *, pin: str, action: str, time: TimeInput = None, ip: str = "") -> EventRecord:
        """Keypad entry: employee records one action against their own PIN."""

        pin = require_pin(pin)
        try:
            act = Action(action)
        except ValueError:
            raise ValidationError(f"Unknown action: {action}")

        user = self._employee(pin)
        when = self._time(time)

        if self._enforce:
            status = current_status(self._records.query_by_pin(pin))
            try:
                ensure_transition(status, act)
            except ValidationError as e:
                logger.info("Rejected %s for %s from %s: %s", act.value, pin, status.value, e)
                raise
        elif act == Action.ABSENT:
            raise ValidationError("Absences can only be recorded by an administrator")

        return self._append(EventRecord(pin=pin, name=user.name or "", action=act, time=when, ip=ip or ""))

    def manual_clock_out(
        self, *, pin: str, time: TimeInput = None, ip: str = "", note: Optional[str] = None
    ) -> EventRecord:
        """Admin override: appends a ClockOut whatever the current status."""

        pin = require_pin(pin)
        user = self._employee(pin)
        record = EventRecord(
            pin=pin,
            name=user.name or "",
            action=Action.CLOCK_OUT,
            time=self._time(time),
            ip=ip or "",
            admin_action=True,
            note=_clean_note(note),
        )
        return self._append(record)

    def mark_absent(
        self,
        *,
        pin: str,
        day: Union[str, date, None],
        ip: str = "",
        force: bool = False,
        note: Optional[str] = None,
    ) -> EventRecord:
        pin = require_pin(pin)
        user = self._employee(pin)
        local_day = parse_local_date(day, self._tz)

        start, end = local_day_bounds(local_day, self._tz)
        that_day = self._records.query_by_time_range(start, end, pin=pin)

        if any(r.action == Action.ABSENT for r in that_day):
            raise ConflictError(f"{user.name} is already marked absent on {local_day.isoformat()}")
        if that_day and not force:
            raise ExistingRecordsWarning(
                f"{user.name} already has {len(that_day)} record(s) on {local_day.isoformat()}"
            )

        record = EventRecord(
            pin=pin,
            name=user.name or "",
            action=Action.ABSENT,
            time=start,
            ip=ip or "",
            admin_action=True,
            note=_clean_note(note) or ABSENT_NOTE,
        )
        return self._append(record)

    def list_records(self, *, pin: Optional[str] = None) -> list[EventRecord]:
        if pin:
            return sort_events(self._records.query_by_pin(require_pin(pin)))
        return sort_events(self._records.query_all())

    def records_between(
        self, start: Optional[datetime], end: Optional[datetime], *, pin: Optional[str] = None
    ) -> list[EventRecord]:
        return sort_events(self._records.query_by_time_range(start, end, pin=pin))

    def clock_out_working(
        self, *, now: Optional[datetime] = None, ip: str = "", note: Optional[str] = None
    ) -> BatchClockOutResult:
        """Append a ClockOut for every employee whose derived status is Working.

        Used by the bulk clock-out route and the scheduled pass. One failed
        append is logged and the pass moves on to the next employee.
        """

        now = now or now_utc()
        note = _clean_note(note)
        result = BatchClockOutResult(clocked_out=[], failed=[])

        for pin, events in group_by_pin(self._records.query_all()).items():
            if current_status(events) != Status.WORKING:
                continue

            last = events[-1]
            record = EventRecord(
                pin=pin,
                name=last.name,
                action=Action.CLOCK_OUT,
                time=now,
                ip=ip or "",
                admin_action=True,
                note=note,
            )
            try:
                result.clocked_out.append(self._append(record))
            except StoreError:
                logger.exception("Clock-out failed for %s (%s)", last.name, pin)
                result.failed.append(pin)

        return result
