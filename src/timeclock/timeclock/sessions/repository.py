from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import AdminSession


class SessionRepository(Protocol):
    def create(self, session: AdminSession) -> None:
        raise NotImplementedError

    def get(self, token: str) -> Optional[AdminSession]:
        raise NotImplementedError

    def delete(self, token: str) -> bool:
        raise NotImplementedError

    def delete_expired(self, now: datetime) -> int:
        raise NotImplementedError
