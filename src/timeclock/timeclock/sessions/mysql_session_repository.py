from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import as_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AdminSession
from .repository import SessionRepository


def _naive_utc(value: datetime) -> datetime:
    return as_utc(value).replace(tzinfo=None)


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, session: AdminSession) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO sessions(token, admin, created_at, expires_at) VALUES(%s,%s,%s,%s)",
                (session.token, int(session.admin), _naive_utc(session.created_at), _naive_utc(session.expires_at)),
            )

    def get(self, token: str) -> Optional[AdminSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT token, admin, created_at, expires_at FROM sessions WHERE token=%s",
                (token,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return AdminSession(
                token=row["token"],
                admin=bool(row["admin"]),
                created_at=as_utc(row["created_at"]),
                expires_at=as_utc(row["expires_at"]),
            )

    def delete(self, token: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sessions WHERE token=%s", (token,))
            return cur.rowcount > 0

    def delete_expired(self, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sessions WHERE expires_at <= %s", (_naive_utc(now),))
            return int(cur.rowcount)
