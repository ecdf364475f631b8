import copy

import pytest

from entretelas.config import BusinessRules
from entretelas.domain.arreglos_summary import (
    build_arreglos_quarter_summary,
    build_monthly_summary,
    month_key_from_fecha,
    month_label_from_key,
    normalize_folder_value,
    split_arreglos_total,
)
from entretelas.domain.models import Arreglo


def _entries():
    return [
        {"fecha": "2026-03-05", "importe": "10,50", "albaran": "Isa"},
        {"fecha": "2026-03-20", "importe": 20, "albaran": " entretelas "},
        {"fecha": "2026-02-01", "importe": 5, "albaran": "Otro"},
        {"fecha": "2026-03-05T10:00:00", "importe": 100, "albaran": "Loli"},
        {"fecha": "2026-13-01", "importe": 999, "albaran": "Loli"},
    ]


def test_split_is_exact_for_round_totals():
    split = split_arreglos_total(200)
    assert (split.total, split.folder_share, split.tienda_share) == (200.0, 130.0, 70.0)


@pytest.mark.parametrize("total", [0, 1, 10.1, 33.33, 1234.56, 99999.99])
def test_split_shares_add_back_to_total(total):
    split = split_arreglos_total(total)
    assert split.folder_share + split.tienda_share == split.total
    assert split.folder_share == pytest.approx(total * 0.65)


def test_split_accepts_formatted_strings_and_custom_ratio():
    assert split_arreglos_total("1.000,00 €").folder_share == pytest.approx(650.0)
    assert split_arreglos_total("abc").total == 0.0
    rules = BusinessRules(folder_share_ratio=0.5)
    assert split_arreglos_total(90, rules).tienda_share == pytest.approx(45.0)


@pytest.mark.parametrize(
    "raw, expected",
    [("ISA", "Isa"), ("  loli ", "Loli"), ("Entretelas", "Entretelas"), ("", None), (None, None), ("Otro", None), (5, None)],
)
def test_normalize_folder_value(raw, expected):
    assert normalize_folder_value(raw) == expected


@pytest.mark.parametrize(
    "fecha",
    ["2026-3-05", "05/03/2026", "2026-03-05T10:00", "2026-00-10", "2026-13-01", "", None, 20260305],
)
def test_month_key_rejects_anything_but_plain_dates(fecha):
    assert month_key_from_fecha(fecha) is None


def test_month_key_and_label():
    assert month_key_from_fecha("2026-03-05") == "2026-03"
    assert month_label_from_key("2026-03") == "Marzo de 2026"
    assert month_label_from_key("2025-12") == "Diciembre de 2025"
    assert month_label_from_key("garbage") == "garbage"


def test_monthly_summary_groups_by_month_and_folder():
    buckets = build_monthly_summary(_entries())

    assert [b.month_key for b in buckets] == ["2026-03", "2026-02"]

    march, february = buckets
    assert march.month_label == "Marzo de 2026"
    assert march.count == 2
    assert march.total_importe == pytest.approx(30.5)
    assert march.isa == pytest.approx(10.5)
    assert march.entretelas == pytest.approx(20.0)
    assert march.loli == 0.0

    # unknown albaran still counts towards the month total
    assert february.count == 1
    assert february.total_importe == pytest.approx(5.0)
    assert (february.entretelas, february.isa, february.loli) == (0.0, 0.0, 0.0)


def test_monthly_summary_does_not_touch_its_input():
    entries = _entries()
    snapshot = copy.deepcopy(entries)
    build_monthly_summary(entries)
    assert entries == snapshot


def test_monthly_summary_accepts_model_instances():
    arreglos = [
        Arreglo(id=1, albaran="Loli", fecha="2025-11-02", numero="A1", cliente=None, arreglo=None, importe=12.0),
        Arreglo(id=2, albaran="Loli", fecha="2025-11-30", numero="A2", cliente="Ana", arreglo="Bajo", importe=8.0),
    ]
    [bucket] = build_monthly_summary(arreglos)
    assert bucket.month_key == "2025-11"
    assert bucket.loli == pytest.approx(20.0)


def test_monthly_summary_of_nothing_is_empty():
    assert build_monthly_summary([]) == []


def test_quarter_summary_accepts_datetimes():
    report = build_arreglos_quarter_summary(_entries())

    t1 = report.quarters[0]
    assert t1.key == "T1"
    assert t1.total.total == pytest.approx(135.5)
    assert t1.total.loli == pytest.approx(100.0)
    assert [m.label for m in t1.months] == ["Enero", "Febrero", "Marzo"]
    assert t1.months[2].total.total == pytest.approx(130.5)
    assert report.annual_total.total == pytest.approx(135.5)
    assert all(q.total.total == 0.0 for q in report.quarters[1:])


@pytest.mark.parametrize("ratio", [0.1, 0.35, 0.5, 0.65, 0.9])
def test_split_is_exact_for_every_cent_with_any_ratio(ratio):
    rules = BusinessRules(folder_share_ratio=ratio)
    for cents in range(1, 200000):
        total = cents / 100
        split = split_arreglos_total(total, rules)
        assert split.folder_share + split.tienda_share == total, total
        assert split.folder_share == pytest.approx(total * ratio)


def test_quarter_summary_reads_formatted_importes_and_any_case_albaran():
    report = build_arreglos_quarter_summary([{"fecha": "2026-03-05", "importe": "12.5 €", "albaran": "isa"}])

    march = report.quarters[0].months[2]
    assert march.total.total == 12.5
    assert march.total.isa == 12.5
    assert report.annual_total.isa == 12.5


def test_quarter_summary_does_not_touch_its_input():
    entries = _entries()
    snapshot = copy.deepcopy(entries)
    build_arreglos_quarter_summary(entries)
    assert entries == snapshot
