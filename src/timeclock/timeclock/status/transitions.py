from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Action, Status
from ..core.exceptions import ValidationError

_CAN_CLOCK_IN = frozenset({Status.NOT_CLOCKED_IN, Status.CLOCKED_OUT, Status.ABSENT})


@dataclass(frozen=True)
class TransitionResult:
    allowed: bool
    reason: Optional[str] = None


_ALLOWED = TransitionResult(allowed=True)


def _rejected(reason: str) -> TransitionResult:
    return TransitionResult(allowed=False, reason=reason)


def validate_transition(status: Status, action: Action) -> TransitionResult:
    """Check a keypad action against the employee's derived status.

    ClockIn needs the employee off the clock; ClockOut and every Start* need
    plain Working; every End* needs the matching Start* to be open. Absent is
    an admin-only fact and never a keypad transition.
    """

    if action == Action.ABSENT:
        return _rejected("Absences can only be recorded by an administrator")

    if action == Action.CLOCK_IN:
        if status in _CAN_CLOCK_IN:
            return _ALLOWED
        if status == Status.WORKING:
            return _rejected("You are already clocked in")
        return _rejected(f"You must end your {status.activity.label} before clocking in again")

    if status in _CAN_CLOCK_IN:
        if action == Action.CLOCK_OUT:
            return _rejected("You must clock in before you can clock out")
        if action.is_end:
            return _rejected(f"You must start {action.activity.label} before you can end it")
        return _rejected("You must clock in first")

    if action == Action.CLOCK_OUT or action.is_start:
        if status == Status.WORKING:
            return _ALLOWED
        verb = "clocking out" if action == Action.CLOCK_OUT else f"starting {action.activity.label}"
        return _rejected(f"You must end your {status.activity.label} before {verb}")

    # action.is_end
    if status == Status.on(action.activity):
        return _ALLOWED
    return _rejected(f"You must start {action.activity.label} before you can end it")


def ensure_transition(status: Status, action: Action) -> None:
    result = validate_transition(status, action)
    if not result.allowed:
        raise ValidationError(result.reason or f"Invalid action: {action.value}")
