from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import local_day_bounds, local_range_bounds, now_utc, work_week_bounds
from ..core.enums import Action
from ..employees.repository import UserRepository
from ..records.repository import EventLogStore
from ..status.engine import group_by_pin, working_pins
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import EmployeeHours


@dataclass(frozen=True)
class DashboardStats:
    working_now: int
    absent_today: int
    week_hours: int
    employees: int

    def to_dict(self) -> dict:
        return {
            "working_now": self.working_now,
            "absent_today": self.absent_today,
            "week_hours": self.week_hours,
            "employees": self.employees,
        }


class PayrollReportService:
    def __init__(
        self,
        records: EventLogStore,
        users: UserRepository,
        *,
        tz: ZoneInfo,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._records = records
        self._users = users
        self._tz = tz
        self._calculator = calculator or StandardPayrollCalculator(tz)

    def hours_report(self, *, start: Optional[date] = None, end: Optional[date] = None) -> list[EmployeeHours]:
        """Per-employee totals for the local calendar days ``start``..``end`` (inclusive)."""

        window_start, window_end = local_range_bounds(start, end, self._tz)
        events = self._records.query_by_time_range(window_start, window_end)

        rows = []
        for pin, items in group_by_pin(events).items():
            summary = self._calculator.summarize(items, window_start, window_end)
            rows.append(EmployeeHours(pin=pin, name=items[-1].name, summary=summary))

        rows.sort(key=lambda r: (r.name.lower(), r.pin))
        return rows

    def dashboard_stats(self, *, now: Optional[datetime] = None) -> DashboardStats:
        now = now or now_utc()
        today = now.astimezone(self._tz).date()
        all_events = self._records.query_all()

        working_now = len(working_pins(all_events))

        day_start, day_end = local_day_bounds(today, self._tz)
        absent_today = sum(
            1 for e in all_events if e.action == Action.ABSENT and day_start <= e.time <= day_end
        )

        week_start, week_end = work_week_bounds(today, self._tz)
        week_minutes = 0.0
        for items in group_by_pin(all_events).values():
            week_minutes += self._calculator.summarize(items, week_start, week_end).work_minutes

        employees = sum(1 for u in self._users.list_all() if u.is_employee)

        return DashboardStats(
            working_now=working_now,
            absent_today=absent_today,
            week_hours=int(round(week_minutes / 60)),
            employees=employees,
        )
