"""Tests for the derived bookkeeping columns."""
from __future__ import annotations

from decimal import Decimal

import pytest

from bizbooks.domain import derived
from bizbooks.models import CharityStatus, LoanStatus


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (Decimal("1000.00"), Decimal("60.00")),
        (Decimal("0.01"), Decimal("0.00")),
        (Decimal("0.25"), Decimal("0.02")),  # 0.015 rounds half up
        (Decimal("123.45"), Decimal("7.41")),
    ],
)
def test_charity_required_is_six_percent_rounded_half_up(amount, expected) -> None:
    assert derived.charity_required(amount) == expected


def test_round_money_accepts_floats_and_strings() -> None:
    assert derived.round_money(2.675) == Decimal("2.68")
    assert derived.round_money("10") == Decimal("10.00")


def test_profit_and_percentage() -> None:
    assert derived.profit(Decimal("50.00"), Decimal("80.00")) == Decimal("30.00")
    assert derived.profit_percentage(Decimal("50.00"), Decimal("80.00")) == Decimal("60.00")
    assert derived.profit(Decimal("80.00"), Decimal("50.00")) == Decimal("-30.00")


def test_profit_percentage_is_none_for_zero_cost() -> None:
    assert derived.profit_percentage(Decimal("0"), Decimal("10.00")) is None


def test_charity_status_transitions() -> None:
    required = Decimal("60.00")
    assert derived.charity_status(required, Decimal("0")) is CharityStatus.PENDING
    assert derived.charity_status(required, Decimal("20.00")) is CharityStatus.PARTIAL
    assert derived.charity_status(required, Decimal("60.00")) is CharityStatus.PAID
    assert derived.charity_remaining(required, Decimal("20.00")) == Decimal("40.00")


def test_loan_status_after_payment() -> None:
    assert derived.loan_status_after_payment(Decimal("0.00")) is LoanStatus.PAID
    assert derived.loan_status_after_payment(Decimal("0.01")) is LoanStatus.ACTIVE


def test_percentage_handles_zero_whole() -> None:
    assert derived.percentage(Decimal("5"), Decimal("0")) == Decimal("0.00")
    assert derived.percentage(Decimal("25"), Decimal("200")) == Decimal("12.50")
