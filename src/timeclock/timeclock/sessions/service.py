from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_SESSION_TTL_MINUTES
from .model import AdminSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: open, check and close admin sessions with a server-side TTL."""

    def __init__(self, sessions: SessionRepository, *, ttl_minutes: int = DEFAULT_SESSION_TTL_MINUTES):
        self._sessions = sessions
        self._ttl = timedelta(minutes=int(ttl_minutes))

    def open(self, *, now: Optional[datetime] = None) -> AdminSession:
        now = now or now_utc()
        purged = self._sessions.delete_expired(now)
        if purged:
            logger.debug("Purged %d expired sessions", purged)

        session = AdminSession(token=secrets.token_hex(32), created_at=now, expires_at=now + self._ttl)
        self._sessions.create(session)
        return session

    def is_admin(self, token: Optional[str], *, now: Optional[datetime] = None) -> bool:
        if not token:
            return False
        now = now or now_utc()

        session = self._sessions.get(token)
        if not session:
            return False
        if session.is_expired(now):
            self._sessions.delete(token)
            return False
        return session.admin

    def close(self, token: Optional[str]) -> None:
        if token:
            self._sessions.delete(token)
