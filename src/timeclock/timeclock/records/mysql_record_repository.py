from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import as_utc
from ..core.enums import Action
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import EventRecord
from .repository import EventLogStore

_COLUMNS = "record_id, pin, name, action, time, ip, admin_action, note"


def _to_record(row: dict) -> EventRecord:
    return EventRecord(
        record_id=int(row["record_id"]),
        pin=row["pin"],
        name=row["name"],
        action=Action(row["action"]),
        time=as_utc(row["time"]),
        ip=row.get("ip") or "",
        admin_action=bool(row.get("admin_action")),
        note=row.get("note"),
    )


def _db_time(value: datetime) -> datetime:
    return as_utc(value).replace(tzinfo=None)


class MySQLEventLogStore(EventLogStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, record: EventRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO records(pin, name, action, time, ip, admin_action, note)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.pin,
                        record.name,
                        record.action.value,
                        _db_time(record.time),
                        record.ip or "",
                        int(record.admin_action),
                        record.note,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            raise StoreError(f"Record rejected: {exc}") from exc

    def query_all(self) -> Sequence[EventRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM records ORDER BY time ASC, record_id ASC")
            return [_to_record(r) for r in fetchall(cur)]

    def query_by_pin(self, pin: str) -> Sequence[EventRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM records WHERE pin=%s ORDER BY time ASC, record_id ASC",
                (pin,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def query_by_time_range(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
        *,
        pin: Optional[str] = None,
    ) -> Sequence[EventRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if start is not None:
            clauses.append("time >= %s")
            params.append(_db_time(start))
        if end is not None:
            clauses.append("time <= %s")
            params.append(_db_time(end))
        if pin is not None:
            clauses.append("pin = %s")
            params.append(pin)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM records {where} ORDER BY time ASC, record_id ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
