from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    require_max_length,
    require_min_length,
    require_non_empty,
    require_pin,
    require_text,
)
from ..core.constants import (
    ADMIN_TAG,
    DEFAULT_EMPLOYEE_TAGS,
    MAX_NAME_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..sessions.model import AdminSession
from ..sessions.service import SessionService
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage employees (admin)."""

    def __init__(self, users: UserRepository, *, allowed_tags: Sequence[str] = DEFAULT_EMPLOYEE_TAGS):
        self._users = users
        self._allowed_tags = tuple(allowed_tags)

    @property
    def allowed_tags(self) -> tuple[str, ...]:
        return self._allowed_tags

    def _clean_tags(self, tags: Optional[Iterable[str]]) -> tuple[str, ...]:
        if tags is None:
            return ()
        if not isinstance(tags, (list, tuple)):
            raise ValidationError("Tags must be a list")

        out: list[str] = []
        for tag in tags:
            if not isinstance(tag, str):
                raise ValidationError("Tags must be strings")
            tag = tag.strip()
            if tag not in self._allowed_tags:
                raise ValidationError(f"Unknown tag: {tag}")
            if tag not in out:
                out.append(tag)
        return tuple(out)

    def list_users(self) -> list[User]:
        return [u for u in self._users.list_all() if u.is_employee]

    def add_employee(self, *, name: str, pin: str, tags: Optional[Iterable[str]] = None) -> int:
        name = require_non_empty(name, "Name")
        require_min_length(name, "Name", MIN_NAME_LENGTH)
        require_max_length(name, "Name", MAX_NAME_LENGTH)
        pin = require_pin(pin)
        clean_tags = self._clean_tags(tags)

        if self._users.get_by_pin(pin):
            raise ConflictError("PIN already exists")

        user_id = self._users.create_employee(name=name, pin=pin, tags=clean_tags)
        logger.info("Added employee %s (%s)", name, pin)
        return user_id

    def delete_employee(self, *, pin: str) -> User:
        pin = require_pin(pin)
        user = self._users.get_by_pin(pin)
        if not user:
            raise NotFoundError("Employee not found")
        if user.is_admin_account:
            raise ValidationError("Admin accounts cannot be deleted here")

        if not self._users.delete_by_pin(pin):
            raise NotFoundError("Employee not found")
        logger.info("Deleted employee %s (%s)", user.name, pin)
        return user

    def update_tags(self, *, pin: str, tags: Optional[Iterable[str]]) -> tuple[str, ...]:
        pin = require_pin(pin)
        clean_tags = self._clean_tags(tags)
        if not self._users.update_tags(pin, clean_tags):
            raise NotFoundError("Employee not found")
        return clean_tags


class AuthService:
    """Use case: admin login/logout on top of server-side sessions."""

    def __init__(self, users: UserRepository, sessions: SessionService):
        self._users = users
        self._sessions = sessions

    def login(self, username: str, password: str) -> AdminSession:
        username = require_text(username, "Username").strip()
        password = require_text(password, "Password")
        user = self._users.get_by_username(username) if username else None
        if not user or not user.password_hash:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # unknown hash method stored in the row
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        logger.info("Admin %s logged in", username)
        return self._sessions.open()

    def quick_login(self, pin: str) -> AdminSession:
        pin = require_pin(pin)
        user = self._users.get_by_pin(pin)
        if not user:
            raise AuthenticationError("Invalid PIN")
        if ADMIN_TAG not in user.tags:
            raise AuthorizationError("Not authorized for admin access")

        logger.info("Quick admin login by %s (%s)", user.name, pin)
        return self._sessions.open()

    def needs_bootstrap(self) -> bool:
        """True while no admin account exists, so the first one can be created without a session."""

        return self._users.count_admins() == 0

    def create_admin(self, *, username: str, password: str) -> int:
        username = require_non_empty(username, "Username")
        require_max_length(username, "Username", MAX_USERNAME_LENGTH)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_username(username):
            raise ConflictError("Username already exists")

        user_id = self._users.create_admin(username=username, password_hash=generate_password_hash(password))
        logger.info("Created admin account %s", username)
        return user_id

    def is_admin(self, token: Optional[str]) -> bool:
        return self._sessions.is_admin(token)

    def logout(self, token: Optional[str]) -> None:
        self._sessions.close(token)
