from __future__ import annotations

import json
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, pin, username, password_hash, tags"


def _decode_tags(raw) -> tuple[str, ...]:
    if not raw:
        return ()
    try:
        values = json.loads(raw)
    except ValueError:
        return ()
    return tuple(str(v) for v in values)


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row.get("name"),
        pin=row.get("pin"),
        tags=_decode_tags(row.get("tags")),
        username=row.get("username"),
        password_hash=row.get("password_hash"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_pin(self, pin: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE pin=%s", (pin,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY user_id ASC")
            return [_to_user(r) for r in fetchall(cur)]

    def count_admins(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users WHERE username IS NOT NULL")
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create_employee(self, *, name: str, pin: str, tags: Sequence[str]) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users(name, pin, tags) VALUES(%s,%s,%s)",
                    (name, pin, json.dumps(list(tags))),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ConflictError("PIN already exists") from exc
            raise

    def create_admin(self, *, username: str, password_hash: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users(username, password_hash, tags) VALUES(%s,%s,%s)",
                    (username, password_hash, "[]"),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ConflictError("Username already exists") from exc
            raise

    def update_tags(self, pin: str, tags: Sequence[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET tags=%s WHERE pin=%s", (json.dumps(list(tags)), pin))
            # rowcount is 0 when the tags did not change, so check existence separately.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM users WHERE pin=%s", (pin,))
            return fetchone(cur) is not None

    def delete_by_pin(self, pin: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE pin=%s AND username IS NULL", (pin,))
            return cur.rowcount > 0
