from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from ..core.enums import Activity


def _hours(minutes: float) -> float:
    return round(minutes / 60, 2)


@dataclass(frozen=True)
class PayrollSummary:
    """Totals for one employee over one window.

    Minutes are fractional (second precision). ``warnings`` lists the events
    the walk had to discard; the totals themselves are never adjusted for them.
    """

    work_minutes: float = 0.0
    activity_minutes: Mapping[Activity, float] = field(default_factory=dict)
    shifts: int = 0
    warnings: tuple[str, ...] = ()

    def minutes_for(self, activity: Activity) -> float:
        return float(self.activity_minutes.get(activity, 0.0))

    @property
    def break_minutes(self) -> float:
        return self.minutes_for(Activity.BREAK)

    @property
    def lunch_minutes(self) -> float:
        return self.minutes_for(Activity.LUNCH)

    @property
    def unpaid_minutes(self) -> float:
        return sum(self.minutes_for(a) for a in Activity if not a.is_paid)

    @property
    def paid_minutes(self) -> float:
        return self.work_minutes - self.unpaid_minutes

    @property
    def paid_hours(self) -> float:
        return _hours(self.paid_minutes)

    @property
    def work_hours(self) -> float:
        return _hours(self.work_minutes)

    @property
    def paid_display(self) -> str:
        hours, minutes = divmod(int(round(self.paid_minutes)), 60)
        return f"{hours}h {minutes}m"

    def to_dict(self) -> dict:
        return {
            "paid_hours": self.paid_hours,
            "paid_hours_display": self.paid_display,
            "paid_minutes": round(self.paid_minutes, 2),
            "work_hours": self.work_hours,
            "work_minutes": round(self.work_minutes, 2),
            "activity_hours": {a.value: _hours(self.minutes_for(a)) for a in Activity},
            "shifts": self.shifts,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class EmployeeHours:
    """Read-model row for the hours calculator."""

    pin: str
    name: str
    summary: PayrollSummary

    def to_dict(self) -> dict:
        return {"pin": self.pin, "name": self.name, **self.summary.to_dict()}
