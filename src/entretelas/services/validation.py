from __future__ import annotations

from typing import Optional

from entretelas.domain.errors import ValidationError

MAX_NAME_LENGTH = 255


def positive_id(value: object, field: str = "id") -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a positive integer")
    return value


def optional_id(value: object, field: str) -> Optional[int]:
    if value is None:
        return None
    return positive_id(value, field)


def required_text(value: object, field: str = "nombre", max_length: int = MAX_NAME_LENGTH) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    if len(value) > max_length:
        raise ValidationError(f"{field} must be {max_length} characters or less")
    return value.strip()


def optional_text(value: object, field: str, max_length: int | None = None) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} must be {max_length} characters or less")
    return value.strip() or None
