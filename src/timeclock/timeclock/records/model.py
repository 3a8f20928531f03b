from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import as_utc, format_display
from ..core.enums import Action


@dataclass(frozen=True)
class EventRecord:
    """Domain entity: one immutable fact in the append-only record log.

    ``time`` is always timezone-aware. ``name`` is copied from the employee at
    write time so history survives employee deletion.
    """

    pin: str
    name: str
    action: Action
    time: datetime
    ip: str = ""
    admin_action: bool = False
    note: Optional[str] = None
    record_id: Optional[int] = None

    def sort_key(self) -> tuple:
        return (as_utc(self.time), self.record_id or 0)

    def to_dict(self, tz: ZoneInfo) -> dict:
        out = {
            "id": self.record_id,
            "name": self.name,
            "pin": self.pin,
            "action": self.action.value,
            "time": format_display(self.time, tz),
            "timestamp": as_utc(self.time).isoformat(),
            "ip": self.ip,
            "admin_action": self.admin_action,
        }
        if self.note:
            out["note"] = self.note
        return out


@dataclass
class BatchClockOutResult:
    """Outcome of clocking out every working employee in one pass."""

    clocked_out: list[EventRecord]
    failed: list[str]

    def to_dict(self, tz: ZoneInfo) -> dict:
        return {
            "clocked_out": [r.to_dict(tz) for r in self.clocked_out],
            "failed": list(self.failed),
            "succeeded_count": len(self.clocked_out),
            "failed_count": len(self.failed),
        }
