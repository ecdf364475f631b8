"""Euro amounts as they show up in forms and stored columns.

Values arrive either as numbers or as Spanish-formatted strings such as
``"1.234,56 €"``; both the comma and the dot decimal conventions are accepted.
"""
from __future__ import annotations

import math
import re

_WHITESPACE = re.compile(r"\s+")
_DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _normalize_separators(text: str) -> str:
    comma = text.rfind(",")
    dot = text.rfind(".")
    if comma >= 0 and dot >= 0:
        if comma > dot:
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")
    if comma >= 0:
        return text.replace(",", ".")
    return text


def try_parse_amount(value: object) -> float | None:
    """Parse ``value`` or return None when it is absent or not an amount."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    cleaned = _WHITESPACE.sub("", value.replace("€", ""))
    if not cleaned:
        return None

    normalized = _normalize_separators(cleaned)
    if not _DECIMAL_LITERAL.fullmatch(normalized):
        return None
    number = float(normalized)
    return number if math.isfinite(number) else None


def parse_amount(value: object) -> float:
    parsed = try_parse_amount(value)
    return 0.0 if parsed is None else parsed


def format_amount(value: object) -> str:
    """Render ``value`` as ``1.234,50 €``."""
    number = round(parse_amount(value), 2)
    sign = "-" if number < 0 else ""
    grouped = f"{abs(number):,.2f}"
    # 1,234.50 -> 1.234,50
    spanish = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{spanish} €"
