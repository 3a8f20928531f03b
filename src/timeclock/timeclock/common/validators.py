from __future__ import annotations

from typing import Any, Optional

from ..core.constants import PIN_LENGTH
from ..core.exceptions import ValidationError


def require_text(value: Any, field_name: str) -> str:
    """Reject non-string JSON values (numbers, lists, objects) with a 400-style error."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def require_non_empty(value: Any, field_name: str) -> str:
    value = require_text(value, field_name)
    if not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    value = require_text(value, field_name)
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_max_length(value: Any, field_name: str, max_len: int) -> str:
    value = require_text(value, field_name)
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters long")
    return value


def optional_text(value: Any, field_name: str, max_len: int) -> Optional[str]:
    """Trimmed free text, ``None`` when blank."""
    value = require_max_length(require_text(value, field_name).strip(), field_name, max_len)
    return value or None


def require_pin(value: Any) -> str:
    pin = value.strip() if isinstance(value, str) else ""
    if len(pin) != PIN_LENGTH or not (pin.isascii() and pin.isdigit()):
        raise ValidationError(f"PIN must be exactly {PIN_LENGTH} digits")
    return pin
