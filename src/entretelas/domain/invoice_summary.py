from __future__ import annotations

from typing import Iterable, Optional, Sequence, TypeVar

from entretelas.config import DEFAULT_RULES, BusinessRules
from entretelas.domain.amounts import parse_amount, try_parse_amount
from entretelas.domain.dates import MONTH_NAMES, month_index_from_date
from entretelas.domain.models import (
    AmountTotals,
    FolderTotals,
    MonthTotal,
    QuarterReport,
    QuarterSummary,
)
from entretelas.domain.records import field_value

QUARTERS = (
    ("T1", (0, 1, 2)),
    ("T2", (3, 4, 5)),
    ("T3", (6, 7, 8)),
    ("T4", (9, 10, 11)),
)

T = TypeVar("T", AmountTotals, FolderTotals)


def build_quarters(month_totals: Sequence[T], zero: T) -> QuarterReport[T]:
    """Fold twelve monthly totals into T1..T4 and the annual total."""
    quarters = []
    for key, month_indexes in QUARTERS:
        months = tuple(
            MonthTotal(month_index=i, label=MONTH_NAMES[i], total=month_totals[i])
            for i in month_indexes
        )
        total = zero
        for m in months:
            total = total + m.total
        quarters.append(QuarterSummary(key=key, total=total, months=months))

    annual = zero
    for q in quarters:
        annual = annual + q.total
    return QuarterReport(quarters=tuple(quarters), annual_total=annual)


def invoice_month_index(row: object) -> Optional[int]:
    fecha = field_value(row, "fecha")
    fecha_subida = field_value(row, "fecha_subida")

    month = month_index_from_date(fecha or fecha_subida)
    if month is None and fecha and fecha_subida:
        month = month_index_from_date(fecha_subida)
    return month


def amount_with_taxes(row: object, tipo: str, rules: BusinessRules = DEFAULT_RULES) -> float:
    stored = try_parse_amount(field_value(row, "importe_iva_re"))
    if stored is not None:
        return stored
    row_tipo = field_value(row, "tipo")
    multiplier = rules.tax_multiplier(row_tipo if row_tipo is not None else tipo)
    return parse_amount(field_value(row, "importe")) * multiplier


def build_quarter_summary(
    rows: Iterable[object] = (),
    tipo: str = "compra",
    rules: BusinessRules = DEFAULT_RULES,
) -> QuarterReport[AmountTotals]:
    """Quarter totals of importe and importe+IVA(+RE) for compra/venta invoices.

    Rows whose date cannot be resolved are skipped.
    """
    month_totals = [AmountTotals() for _ in range(12)]

    for row in rows:
        month = invoice_month_index(row)
        if month is None:
            continue
        month_totals[month] = month_totals[month] + AmountTotals(
            importe=parse_amount(field_value(row, "importe")),
            amount_with_taxes=amount_with_taxes(row, tipo, rules),
        )

    return build_quarters(month_totals, AmountTotals())
