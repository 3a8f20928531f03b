"""In-memory stand-ins for the MySQL repositories and the webhook notifier."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from src.timeclock.timeclock.core.exceptions import ConflictError, StoreError
from src.timeclock.timeclock.employees.model import User
from src.timeclock.timeclock.records.model import EventRecord

PT = ZoneInfo("America/Los_Angeles")


class InMemoryUsers:
    def __init__(self):
        self._users: dict[int, User] = {}
        self._id = 0

    def add(self, name: str, pin: str, tags=()) -> User:
        self.create_employee(name=name, pin=pin, tags=tags)
        return self.get_by_pin(pin)

    def get_by_pin(self, pin: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.pin == pin), None)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    def list_all(self):
        return list(self._users.values())

    def count_admins(self) -> int:
        return sum(1 for u in self._users.values() if u.is_admin_account)

    def create_employee(self, *, name: str, pin: str, tags) -> int:
        if self.get_by_pin(pin):
            raise ConflictError("PIN already exists")
        self._id += 1
        self._users[self._id] = User(user_id=self._id, name=name, pin=pin, tags=tuple(tags))
        return self._id

    def create_admin(self, *, username: str, password_hash: str) -> int:
        if self.get_by_username(username):
            raise ConflictError("Username already exists")
        self._id += 1
        self._users[self._id] = User(user_id=self._id, username=username, password_hash=password_hash)
        return self._id

    def update_tags(self, pin: str, tags) -> bool:
        user = self.get_by_pin(pin)
        if not user:
            return False
        self._users[user.user_id] = replace(user, tags=tuple(tags))
        return True

    def delete_by_pin(self, pin: str) -> bool:
        user = self.get_by_pin(pin)
        if not user or user.is_admin_account:
            return False
        del self._users[user.user_id]
        return True


class InMemoryRecords:
    """Append-only list. PINs in ``failing_pins`` make ``append`` raise StoreError."""

    def __init__(self):
        self.items: list[EventRecord] = []
        self.failing_pins: set[str] = set()
        self._id = 0

    def append(self, record: EventRecord) -> int:
        if record.pin in self.failing_pins:
            raise StoreError(f"write rejected for {record.pin}")
        self._id += 1
        self.items.append(replace(record, record_id=self._id))
        return self._id

    def query_all(self):
        return list(self.items)

    def query_by_pin(self, pin: str):
        return [r for r in self.items if r.pin == pin]

    def query_by_time_range(self, start, end, *, pin=None):
        return [
            r
            for r in self.items
            if (start is None or r.time >= start)
            and (end is None or r.time <= end)
            and (pin is None or r.pin == pin)
        ]


class InMemorySessions:
    def __init__(self):
        self.items = {}

    def create(self, session) -> None:
        self.items[session.token] = session

    def get(self, token: str):
        return self.items.get(token)

    def delete(self, token: str) -> bool:
        return self.items.pop(token, None) is not None

    def delete_expired(self, now) -> int:
        expired = [t for t, s in self.items.items() if s.is_expired(now)]
        for t in expired:
            del self.items[t]
        return len(expired)


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.sent: list[EventRecord] = []
        self.fail = fail

    def notify(self, record: EventRecord) -> None:
        if self.fail:
            raise RuntimeError("webhook down")
        self.sent.append(record)


def local(year, month, day, hour=0, minute=0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=PT)

