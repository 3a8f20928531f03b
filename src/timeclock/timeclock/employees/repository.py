from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for employees and admin accounts.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_pin(self, pin: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def count_admins(self) -> int:
        raise NotImplementedError

    def create_employee(self, *, name: str, pin: str, tags: Sequence[str]) -> int:
        """Raises ConflictError when the PIN is taken."""

        raise NotImplementedError

    def create_admin(self, *, username: str, password_hash: str) -> int:
        """Raises ConflictError when the username is taken."""

        raise NotImplementedError

    def update_tags(self, pin: str, tags: Sequence[str]) -> bool:
        raise NotImplementedError

    def delete_by_pin(self, pin: str) -> bool:
        raise NotImplementedError
