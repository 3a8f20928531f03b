"""CSV writers for the record export and the hours summary.

Both return bytes encoded as utf-8-sig so spreadsheet tools pick up the
encoding without an import dialog.
"""

from __future__ import annotations

import csv
import io
from typing import Iterable
from zoneinfo import ZoneInfo

from ..common.datetime_utils import format_display
from ..core.enums import Activity
from ..records.model import EventRecord
from .model import EmployeeHours

RECORD_FIELDS = ["name", "pin", "action", "time", "ip", "admin_action", "note"]

HOURS_FIELDS = [
    "Employee",
    "Paid Hours (Decimal)",
    "Paid Hours (H:M)",
    "Total Work Hours",
    "Break Time (hrs)",
    "Lunch Time (hrs)",
    "Restroom Time (hrs)",
    "IT Issue Time (hrs)",
    "Meeting Time (hrs)",
    "Number of Shifts",
]

_ACTIVITY_COLUMNS = {
    Activity.BREAK: "Break Time (hrs)",
    Activity.LUNCH: "Lunch Time (hrs)",
    Activity.RESTROOM: "Restroom Time (hrs)",
    Activity.IT_ISSUE: "IT Issue Time (hrs)",
    Activity.MEETING: "Meeting Time (hrs)",
}


def _encode(out: io.StringIO) -> bytes:
    return out.getvalue().encode("utf-8-sig")


def write_records_csv(records: Iterable[EventRecord], tz: ZoneInfo) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=RECORD_FIELDS)
    writer.writeheader()
    for r in records:
        writer.writerow(
            {
                "name": r.name,
                "pin": r.pin,
                "action": r.action.value,
                "time": format_display(r.time, tz),
                "ip": r.ip,
                "admin_action": "true" if r.admin_action else "",
                "note": r.note or "",
            }
        )
    return _encode(out)


def write_hours_csv(rows: Iterable[EmployeeHours]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=HOURS_FIELDS)
    writer.writeheader()
    for row in rows:
        s = row.summary
        line = {
            "Employee": row.name,
            "Paid Hours (Decimal)": f"{s.paid_hours:.2f}",
            "Paid Hours (H:M)": s.paid_display,
            "Total Work Hours": f"{s.work_hours:.2f}",
            "Number of Shifts": s.shifts,
        }
        for activity, column in _ACTIVITY_COLUMNS.items():
            line[column] = f"{s.minutes_for(activity) / 60:.2f}"
        writer.writerow(line)
    return _encode(out)
