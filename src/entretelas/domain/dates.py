from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional

ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")

MONTH_NAMES = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)


def strict_month(value: object) -> Optional[tuple[str, int]]:
    """(year, month) for a plain YYYY-MM-DD string, None for anything else."""
    if not isinstance(value, str):
        return None
    m = ISO_DATE.fullmatch(value)
    if not m:
        return None
    month = int(m.group(2))
    if not 1 <= month <= 12:
        return None
    return m.group(1), month


def month_index_from_date(value: object) -> Optional[int]:
    """0-based month for a date, or None when it cannot be resolved.

    Plain dates are read from their digits; date-times go through
    ``datetime.fromisoformat`` and keep their wall-clock month.
    """
    if isinstance(value, (date, datetime)):
        return value.month - 1
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    fast = strict_month(text)
    if fast is not None:
        return fast[1] - 1

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).month - 1
    except ValueError:
        return None
