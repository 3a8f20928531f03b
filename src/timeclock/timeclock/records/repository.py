from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import EventRecord


class EventLogStore(Protocol):
    """Narrow interface the status/payroll logic reads and appends through.

    No ordering, uniqueness or transition checks are implied: callers sort and
    validate themselves.
    """

    def append(self, record: EventRecord) -> int:
        """Persist ``record`` and return its id. Raises StoreError on failure."""

        raise NotImplementedError

    def query_all(self) -> Sequence[EventRecord]:
        raise NotImplementedError

    def query_by_pin(self, pin: str) -> Sequence[EventRecord]:
        raise NotImplementedError

    def query_by_time_range(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
        *,
        pin: Optional[str] = None,
    ) -> Sequence[EventRecord]:
        """Inclusive on both ends; ``None`` leaves that side open."""

        raise NotImplementedError
