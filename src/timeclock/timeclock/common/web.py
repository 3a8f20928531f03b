"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable

from flask import jsonify, request, session

from ..core.constants import MAX_IP_LENGTH
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    ExistingRecordsWarning,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "admin_token"

_STATUS_BY_ERROR = (
    (ConflictError, 409),
    (NotFoundError, 404),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ValidationError, 400),
)


def error_response(e: DomainError):
    if isinstance(e, ExistingRecordsWarning):
        return jsonify({"warning": str(e)}), 400
    for exc_type, status in _STATUS_BY_ERROR:
        if isinstance(e, exc_type):
            return jsonify({"error": str(e)}), status
    return jsonify({"error": str(e)}), 400


def internal_error():
    return jsonify({"error": "Internal server error"}), 500


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    # the keypad UI occasionally posts form-encoded bodies
    return request.form.to_dict()


def client_ip(data: dict[str, Any]) -> str:
    """IP reported by the client, else the remote address. Informational only."""

    ip = str(data.get("ip") or "").strip()
    return (ip or request.remote_addr or "")[:MAX_IP_LENGTH]


def as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def current_token():
    return session.get(SESSION_TOKEN_KEY)


def make_admin_required(is_admin: Callable[[Any], bool]):
    """Build the ``admin_required`` decorator around a session check."""

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not is_admin(current_token()):
                return jsonify({"error": "Unauthorized"}), 401
            return view(*args, **kwargs)

        return wrapper

    return admin_required
