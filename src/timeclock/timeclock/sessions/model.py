from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AdminSession:
    """Server-side session row. The cookie only carries ``token``."""

    token: str
    created_at: datetime
    expires_at: datetime
    admin: bool = True

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
