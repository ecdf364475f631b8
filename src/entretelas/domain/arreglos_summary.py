from __future__ import annotations

from typing import Iterable, Optional

from entretelas.config import DEFAULT_RULES, BusinessRules
from entretelas.domain.amounts import parse_amount
from entretelas.domain.dates import MONTH_NAMES, month_index_from_date, strict_month
from entretelas.domain.invoice_summary import build_quarters
from entretelas.domain.models import ArreglosSplit, FolderTotals, MonthlyBucket, QuarterReport
from entretelas.domain.records import field_value

ALBARAN_OPTIONS = ("Entretelas", "Isa", "Loli")

_FOLDER_FIELDS = {"Entretelas": "entretelas", "Isa": "isa", "Loli": "loli"}


def normalize_folder_value(value: object) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    wanted = value.strip().casefold()
    for option in ALBARAN_OPTIONS:
        if option.casefold() == wanted:
            return option
    return None


def month_key_from_fecha(fecha: object) -> Optional[str]:
    parsed = strict_month(fecha)
    if parsed is None:
        return None
    year, month = parsed
    return f"{year}-{month:02d}"


def month_label_from_key(month_key: str) -> str:
    """'2026-03' -> 'Marzo de 2026'."""
    parts = month_key.split("-") if isinstance(month_key, str) else []
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        return month_key
    month = int(parts[1])
    if not 1 <= month <= 12:
        return month_key
    return f"{MONTH_NAMES[month - 1]} de {int(parts[0])}"


def _folder_totals(importe: float, folder: Optional[str]) -> FolderTotals:
    if folder is None:
        return FolderTotals(total=importe)
    return FolderTotals(total=importe, **{_FOLDER_FIELDS[folder]: importe})


def build_monthly_summary(entries: Iterable[object]) -> list[MonthlyBucket]:
    """One bucket per calendar month, most recent month first.

    Only strict YYYY-MM-DD fechas are grouped; anything else is left out
    of every total.
    """
    months: dict[str, FolderTotals] = {}
    counts: dict[str, int] = {}

    for entry in entries:
        key = month_key_from_fecha(field_value(entry, "fecha"))
        if key is None:
            continue
        importe = parse_amount(field_value(entry, "importe"))
        folder = normalize_folder_value(field_value(entry, "albaran"))
        months[key] = months.get(key, FolderTotals()) + _folder_totals(importe, folder)
        counts[key] = counts.get(key, 0) + 1

    return [
        MonthlyBucket(
            month_key=key,
            month_label=month_label_from_key(key),
            count=counts[key],
            total_importe=totals.total,
            entretelas=totals.entretelas,
            isa=totals.isa,
            loli=totals.loli,
        )
        for key, totals in sorted(months.items(), reverse=True)
    ]


def build_arreglos_quarter_summary(entries: Iterable[object]) -> QuarterReport[FolderTotals]:
    # Unlike the monthly summary, date-times and other ISO shapes are accepted here.
    month_totals = [FolderTotals() for _ in range(12)]

    for entry in entries:
        month = month_index_from_date(field_value(entry, "fecha"))
        if month is None:
            continue
        importe = parse_amount(field_value(entry, "importe"))
        folder = normalize_folder_value(field_value(entry, "albaran"))
        month_totals[month] = month_totals[month] + _folder_totals(importe, folder)

    return build_quarters(month_totals, FolderTotals())


def split_arreglos_total(total_importe: object, rules: BusinessRules = DEFAULT_RULES) -> ArreglosSplit:
    total = parse_amount(total_importe)
    ratio = rules.folder_share_ratio
    # The larger share is the product and the smaller one the remainder; the
    # subtraction is then exact, so folder_share + tienda_share == total bit for bit.
    if ratio >= 0.5:
        folder_share = total * ratio
        tienda_share = total - folder_share
    else:
        tienda_share = total * (1 - ratio)
        folder_share = total - tienda_share
    return ArreglosSplit(total=total, folder_share=folder_share, tienda_share=tienda_share)
