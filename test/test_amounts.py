import pytest

from entretelas.domain.amounts import format_amount, parse_amount, try_parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.234,56 €", 1234.56),
        ("1,234.56", 1234.56),
        ("5,5", 5.5),
        ("  12 €", 12.0),
        ("-3,10", -3.10),
        (42, 42.0),
        (7.25, 7.25),
    ],
)
def test_parse_amount_accepts_both_decimal_conventions(raw, expected):
    assert parse_amount(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [None, "", "abc", {}, [], True, "1,2,3", "1.2.3", float("nan"), float("inf")])
def test_parse_amount_defaults_to_zero_for_garbage(raw):
    assert parse_amount(raw) == 0.0
    assert try_parse_amount(raw) is None


def test_try_parse_amount_handles_huge_ints():
    assert try_parse_amount(10**400) is None


def test_format_amount_uses_spanish_grouping():
    assert format_amount(1234.5) == "1.234,50 €"
    assert format_amount(0) == "0,00 €"
    assert format_amount("1.000.000,00") == "1.000.000,00 €"
    assert format_amount(-12.5) == "-12,50 €"
    assert format_amount("abc") == "0,00 €"


def test_format_amount_never_prints_negative_zero():
    assert format_amount(-0.001) == "0,00 €"


@pytest.mark.parametrize("value", [0.0, 1.5, 12.34, 1234.56, 98765.43])
def test_formatted_amount_parses_back(value):
    assert parse_amount(format_amount(value)) == pytest.approx(value)
