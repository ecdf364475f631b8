import copy
from datetime import date

import pytest

from entretelas.config import BusinessRules
from entretelas.domain.dates import month_index_from_date
from entretelas.domain.invoice_summary import amount_with_taxes, build_quarter_summary
from entretelas.domain.models import Invoice


def test_tax_fallback_depends_on_tipo():
    venta = build_quarter_summary([{"fecha": "2026-01-10", "importe": 100, "tipo": "venta"}], "venta")
    compra = build_quarter_summary([{"fecha": "2026-01-10", "importe": 100, "tipo": "compra"}], "compra")

    assert venta.quarters[0].total.amount_with_taxes == pytest.approx(121.0)
    assert compra.quarters[0].total.amount_with_taxes == pytest.approx(126.2)
    assert venta.quarters[0].total.importe == pytest.approx(100.0)


def test_row_without_tipo_uses_requested_tipo():
    assert amount_with_taxes({"importe": 100}, "venta") == pytest.approx(121.0)
    assert amount_with_taxes({"importe": 100}, "compra") == pytest.approx(126.2)


def test_stored_amount_with_taxes_wins_over_fallback():
    rows = [{"fecha": "2026-04-01", "importe": 100, "importe_iva_re": "130,00", "tipo": "compra"}]
    report = build_quarter_summary(rows, "compra")
    assert report.quarters[1].total.amount_with_taxes == pytest.approx(130.0)


def test_unparseable_stored_amount_falls_back_to_multiplier():
    row = {"importe": "50", "importe_iva_re": "n/a", "tipo": "compra"}
    assert amount_with_taxes(row, "compra") == pytest.approx(63.1)


def test_custom_rules_change_the_multiplier():
    rules = BusinessRules(venta_multiplier=1.10)
    assert amount_with_taxes({"importe": 100, "tipo": "venta"}, "venta", rules) == pytest.approx(110.0)


def test_empty_input_gives_four_zero_quarters():
    report = build_quarter_summary()
    assert [q.key for q in report.quarters] == ["T1", "T2", "T3", "T4"]
    assert all(len(q.months) == 3 for q in report.quarters)
    assert report.annual_total.importe == 0.0
    assert report.annual_total.amount_with_taxes == 0.0


def test_fecha_subida_is_used_when_fecha_is_missing_or_unreadable():
    rows = [
        {"fecha": None, "fecha_subida": "2026-05-02 10:11:12", "importe": 10, "tipo": "venta"},
        {"fecha": "not a date", "fecha_subida": "2026-08-01", "importe": 20, "tipo": "venta"},
        {"fecha": "garbage", "fecha_subida": "also garbage", "importe": 1000, "tipo": "venta"},
    ]
    report = build_quarter_summary(rows, "venta")

    assert report.quarters[1].total.importe == pytest.approx(10.0)
    assert report.quarters[2].total.importe == pytest.approx(20.0)
    assert report.annual_total.importe == pytest.approx(30.0)


def test_quarter_summary_works_on_invoice_records():
    invoices = [
        Invoice(id=1, entidad_id=1, tipo="compra", fecha="2026-11-15", fecha_subida=None, importe=200.0),
        Invoice(id=2, entidad_id=1, tipo="compra", fecha="2026-12-01", fecha_subida=None, importe=None),
    ]
    report = build_quarter_summary(invoices, "compra")
    t4 = report.quarters[3]
    assert t4.total.importe == pytest.approx(200.0)
    assert t4.total.amount_with_taxes == pytest.approx(252.4)
    assert t4.months[1].label == "Noviembre"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-03-05", 2),
        ("2026-02-10T10:00:00Z", 1),
        ("2026-12-31T23:30:00+02:00", 11),
        (date(2026, 7, 1), 6),
        ("", None),
        (None, None),
        ("31/12/2026", None),
    ],
)
def test_month_index_from_date(value, expected):
    assert month_index_from_date(value) == expected


def test_quarter_summary_does_not_touch_its_input():
    rows = [
        {"fecha": "2026-01-10", "importe": "100,00", "tipo": "compra"},
        {"fecha": None, "fecha_subida": "2026-05-02 10:11:12", "importe": 10, "importe_iva_re": "12,10"},
    ]
    snapshot = copy.deepcopy(rows)
    build_quarter_summary(rows, "compra")
    assert rows == snapshot
