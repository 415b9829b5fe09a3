from __future__ import annotations

import math

import pytest

from billing.core.currency import (
    convert_currency,
    currency_symbol,
    fmt_money,
    format_amount,
    round_money,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.125, 0.12),
        (0.135, 0.14),
        (2.675, 2.68),
        (-1.005, -1.0),
    ],
)
def test_round_money_is_bankers_rounding(value, expected) -> None:
    assert round_money(value) == expected


def test_fmt_money_groups_thousands_and_rounds_half_up() -> None:
    assert fmt_money(1234.5) == "1,234.50"
    assert fmt_money(0.125) == "0.13"
    assert fmt_money(1000000) == "1,000,000.00"
    assert fmt_money(1234.5, grouping=False) == "1234.50"
    assert fmt_money(5, width=8) == "    5.00"


@pytest.mark.parametrize(
    "code, symbol",
    [("GBP", "£"), ("usd", "$"), ("EUR", "€"), ("BDT", "BDT "), ("CHF", "CHF"), ("", "")],
)
def test_currency_symbol(code, symbol) -> None:
    assert currency_symbol(code) == symbol


def test_format_amount() -> None:
    assert format_amount(100, "GBP") == "£100.00"
    assert format_amount(-25, "GBP") == "-£25.00"
    assert format_amount(20, "GBP", negative=True) == "-£20.00"
    assert format_amount(1500, "JPY") == "JPY1,500.00"


def test_convert_currency() -> None:
    assert convert_currency(100, 140.5) == 14050.0
    assert convert_currency(0.333, 3) == 1.0


@pytest.mark.parametrize("rate", [0, -1])
def test_convert_currency_rejects_bad_rate(rate) -> None:
    with pytest.raises(ValueError):
        convert_currency(10, rate)


def test_convert_currency_rejects_non_finite_amount() -> None:
    with pytest.raises(ValueError):
        convert_currency(math.inf, 1.5)
