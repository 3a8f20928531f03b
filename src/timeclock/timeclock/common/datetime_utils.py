from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DISPLAY_TIME_FORMAT
from ..core.exceptions import ValidationError

# Formats the browser produces with toLocaleString('en-US', ...).
_LEGACY_FORMATS = (
    "%m/%d/%Y, %I:%M:%S %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y, %H:%M:%S",
    "%m/%d/%Y",
)


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError as exc:
        raise ValueError(f"Unknown timezone: {name!r}") from exc


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current instant, timezone-aware.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive values read back from the database."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, datetime, None], tz: ZoneInfo) -> datetime:
    """Parse an ISO-8601 or legacy display timestamp into an aware UTC datetime.

    Values without an offset are read as wall-clock time in ``tz``.
    """

    if isinstance(value, datetime):
        parsed: Optional[datetime] = value
    elif value is not None and not isinstance(value, str):
        raise ValidationError("Timestamp must be a string")
    else:
        text = (value or "").strip()
        if not text:
            raise ValidationError("Timestamp is required")
        parsed = None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            for fmt in _LEGACY_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            raise ValidationError(f"Unrecognized timestamp: {text!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.astimezone(timezone.utc)


def parse_local_date(value: Union[str, date, None], tz: ZoneInfo) -> date:
    """Accept YYYY-MM-DD or any timestamp format and return the local calendar day."""

    if isinstance(value, datetime):
        return value.astimezone(tz).date() if value.tzinfo else value.date()
    if isinstance(value, date):
        return value
    if value is not None and not isinstance(value, str):
        raise ValidationError("Date must be a string")
    text = (value or "").strip()
    if not text:
        raise ValidationError("Date is required")
    try:
        return parse_iso_date(text)
    except ValueError:
        return parse_timestamp(text, tz).astimezone(tz).date()


def format_display(value: datetime, tz: ZoneInfo) -> str:
    return as_utc(value).astimezone(tz).strftime(DISPLAY_TIME_FORMAT)


def local_day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """First and last instant of a local calendar day, in UTC."""

    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def local_range_bounds(
    start_day: Optional[date], end_day: Optional[date], tz: ZoneInfo
) -> tuple[Optional[datetime], Optional[datetime]]:
    start = local_day_bounds(start_day, tz)[0] if start_day else None
    end = local_day_bounds(end_day, tz)[1] if end_day else None
    return start, end


def work_week_bounds(today: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Monday 00:00 through Friday 23:59:59.999999 of the week containing ``today``."""

    monday = today - timedelta(days=today.weekday())
    friday = monday + timedelta(days=4)
    return local_day_bounds(monday, tz)[0], local_day_bounds(friday, tz)[1]


def format_duration(delta: timedelta) -> str:
    total_minutes = max(int(delta.total_seconds() // 60), 0)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


def parse_clock_time(value: str) -> time:
    """Parse HH:MM (24h) used by the auto clock-out trigger setting."""

    try:
        hour_s, minute_s = value.strip().split(":")
        return time(hour=int(hour_s), minute=int(minute_s))
    except ValueError as exc:
        raise ValueError(f"Invalid HH:MM time: {value!r}") from exc
