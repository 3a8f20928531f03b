from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class User:
    """A row of the users table: an employee, an admin account, or both.

    Employees carry ``name`` + ``pin``; admin accounts carry ``username`` +
    ``password_hash``.
    """

    user_id: int
    name: Optional[str] = None
    pin: Optional[str] = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    username: Optional[str] = None
    password_hash: Optional[str] = None

    @property
    def is_admin_account(self) -> bool:
        return self.username is not None

    @property
    def is_employee(self) -> bool:
        return self.pin is not None

    def to_dict(self) -> dict:
        out: dict = {"id": self.user_id, "tags": list(self.tags)}
        if self.name is not None:
            out["name"] = self.name
        if self.pin is not None:
            out["pin"] = self.pin
        if self.username is not None:
            out["username"] = self.username
        return out
