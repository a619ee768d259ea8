"""Small validators shared by entities and use-cases."""

import math
import re

from fitness_journal.domain.errors import ValidationError

MAX_NAME_LENGTH = 100
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_id(value: object, field_name: str = "id") -> str:
    """Return a stripped id, rejecting non-strings and blank values."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must be a non-empty string")
    return value.strip()


def require_name(value: object, field_name: str = "name") -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} must be a non-empty string")
    cleaned = value.strip()
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"{field_name} must be at most {MAX_NAME_LENGTH} characters"
        )
    return cleaned


def require_positive(value: object, field_name: str) -> float:
    """Return a finite number strictly greater than zero."""
    number = _as_number(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return number


def require_non_negative(value: object, field_name: str) -> float:
    """Return a finite number greater than or equal to zero."""
    number = _as_number(value, field_name)
    if number < 0:
        raise ValidationError(f"{field_name} must be 0 or greater")
    return number


def require_positive_int(value: object, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field_name} must be a positive integer")
    return value


def require_email(value: object) -> str:
    if not isinstance(value, str) or not _EMAIL_PATTERN.match(value.strip()):
        raise ValidationError("email must be a valid email address")
    return value.strip().lower()


def _as_number(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(value):
        raise ValidationError(f"{field_name} must be finite")
    return float(value)
