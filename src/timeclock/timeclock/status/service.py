from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import format_display, format_duration, local_day_bounds, now_utc
from ..core.enums import Action, Activity, Status
from ..employees.repository import UserRepository
from ..records.model import EventRecord
from ..records.repository import EventLogStore
from .engine import current_status, elapsed_since, group_by_pin

CATEGORIES = ("notClockedIn", "working", "onBreak", "absent")

_BREAK_ACTIVITIES = (Activity.BREAK, Activity.LUNCH, Activity.RESTROOM)


def categorize(status: Status, absent_today: bool) -> str:
    """Dashboard bucket. IT issue and meeting time count as working."""

    if absent_today:
        return "absent"
    if status in (Status.NOT_CLOCKED_IN, Status.CLOCKED_OUT, Status.ABSENT):
        return "notClockedIn"
    if status.activity in _BREAK_ACTIVITIES:
        return "onBreak"
    return "working"


@dataclass(frozen=True)
class EmployeeStatus:
    pin: str
    name: str
    tags: tuple[str, ...]
    status: Status
    category: str
    last_event: Optional[EventRecord]
    elapsed: Optional[str]

    def to_dict(self, tz: ZoneInfo) -> dict:
        return {
            "pin": self.pin,
            "name": self.name,
            "tags": list(self.tags),
            "status": self.status.value,
            "category": self.category,
            "last_action": self.last_event.action.value if self.last_event else None,
            "last_action_time": format_display(self.last_event.time, tz) if self.last_event else None,
            "duration": self.elapsed,
        }


class StatusService:
    """Read side of the live dashboard. Derives everything from the log on each call."""

    def __init__(self, records: EventLogStore, users: UserRepository, *, tz: ZoneInfo):
        self._records = records
        self._users = users
        self._tz = tz

    def live_board(self, *, now: Optional[datetime] = None) -> list[EmployeeStatus]:
        now = now or now_utc()
        today_start, today_end = local_day_bounds(now.astimezone(self._tz).date(), self._tz)
        by_pin = group_by_pin(self._records.query_all())

        board: list[EmployeeStatus] = []
        for user in self._users.list_all():
            if not user.is_employee:
                continue

            events = by_pin.get(user.pin, [])
            status = current_status(events)
            last = events[-1] if events else None
            absent_today = any(
                e.action == Action.ABSENT and today_start <= e.time <= today_end for e in events
            )
            board.append(
                EmployeeStatus(
                    pin=user.pin,
                    name=user.name or "",
                    tags=user.tags,
                    status=status,
                    category=categorize(status, absent_today),
                    last_event=last,
                    elapsed=format_duration(elapsed_since(last.time, now)) if last else None,
                )
            )

        board.sort(key=lambda s: s.name.lower())
        return board

    @staticmethod
    def counts(board: list[EmployeeStatus]) -> dict[str, int]:
        out = {c: 0 for c in CATEGORIES}
        for item in board:
            out[item.category] += 1
        return out
