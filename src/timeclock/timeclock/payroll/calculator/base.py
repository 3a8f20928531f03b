from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from ...records.model import EventRecord
from ..model import PayrollSummary


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def summarize(
        self,
        events: Iterable[EventRecord],
        window_start: Optional[datetime] = None,
        window_end: Optional[datetime] = None,
    ) -> PayrollSummary:
        raise NotImplementedError
