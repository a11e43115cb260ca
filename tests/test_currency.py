import pytest

from clearbudget.utils.currency import format_inr, format_inr_compact, format_inr_with_units, parse_inr


@pytest.mark.parametrize(
    "amount, expected",
    [(0, "₹0.00"), (999.5, "₹999.50"), (125000.5, "₹1,25,000.50"), (12345678, "₹1,23,45,678.00"), (-1500, "₹-1,500.00")],
)
def test_format_inr_uses_indian_grouping(amount, expected):
    assert format_inr(amount) == expected


def test_format_inr_without_symbol():
    assert format_inr(2500, show_symbol=False) == "2,500.00"


def test_format_inr_compact():
    assert format_inr_compact(5000) == "₹5,000"
    assert format_inr_compact(10000 * 0.2) == "₹2,000"
    assert format_inr_compact(1250.5) == "₹1,250.50"
    assert format_inr_compact(-500) == "₹-500"


@pytest.mark.parametrize(
    "amount, expected",
    [(15_000_000, "₹1.50 Cr"), (2_500_000, "₹25.00 L"), (1500, "₹1.5K"), (250, "₹250.00")],
)
def test_format_inr_with_units(amount, expected):
    assert format_inr_with_units(amount) == expected


@pytest.mark.parametrize(
    "text, expected",
    [("₹1,25,000.50", 125000.5), ("$1,250", 1250), ("42", 42), ("abc", None), ("", None), ("inf", None)],
)
def test_parse_inr(text, expected):
    assert parse_inr(text) == expected
