from __future__ import annotations

from enum import Enum
from typing import Optional


class Activity(str, Enum):
    """Sub-states an employee can enter while on the clock."""

    BREAK = "Break"
    LUNCH = "Lunch"
    RESTROOM = "Restroom"
    IT_ISSUE = "ItIssue"
    MEETING = "Meeting"

    @property
    def is_paid(self) -> bool:
        return self not in (Activity.BREAK, Activity.LUNCH)

    @property
    def label(self) -> str:
        return {
            Activity.BREAK: "break",
            Activity.LUNCH: "lunch",
            Activity.RESTROOM: "restroom",
            Activity.IT_ISSUE: "IT issue",
            Activity.MEETING: "meeting",
        }[self]


class Action(str, Enum):
    """Fixed vocabulary of events appended to the record log."""

    CLOCK_IN = "ClockIn"
    CLOCK_OUT = "ClockOut"
    START_BREAK = "StartBreak"
    END_BREAK = "EndBreak"
    START_RESTROOM = "StartRestroom"
    END_RESTROOM = "EndRestroom"
    START_LUNCH = "StartLunch"
    END_LUNCH = "EndLunch"
    START_IT_ISSUE = "StartItIssue"
    END_IT_ISSUE = "EndItIssue"
    START_MEETING = "StartMeeting"
    END_MEETING = "EndMeeting"
    ABSENT = "Absent"

    @property
    def is_start(self) -> bool:
        return self.value.startswith("Start")

    @property
    def is_end(self) -> bool:
        return self.value.startswith("End")

    @property
    def activity(self) -> Optional[Activity]:
        if self.is_start:
            return Activity(self.value[len("Start"):])
        if self.is_end:
            return Activity(self.value[len("End"):])
        return None

    @classmethod
    def start_of(cls, activity: Activity) -> "Action":
        return cls(f"Start{activity.value}")

    @classmethod
    def end_of(cls, activity: Activity) -> "Action":
        return cls(f"End{activity.value}")


class Status(str, Enum):
    """Derived employee status. Never persisted."""

    NOT_CLOCKED_IN = "NotClockedIn"
    WORKING = "Working"
    ON_BREAK = "OnBreak:Break"
    ON_LUNCH = "OnBreak:Lunch"
    ON_RESTROOM = "OnBreak:Restroom"
    ON_IT_ISSUE = "OnBreak:ItIssue"
    IN_MEETING = "OnBreak:Meeting"
    CLOCKED_OUT = "ClockedOut"
    ABSENT = "Absent"

    @property
    def activity(self) -> Optional[Activity]:
        if self.value.startswith("OnBreak:"):
            return Activity(self.value.split(":", 1)[1])
        return None

    @classmethod
    def on(cls, activity: Activity) -> "Status":
        return cls(f"OnBreak:{activity.value}")
