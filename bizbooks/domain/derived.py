"""Pure functions computing derived bookkeeping columns.

Every write that touches an input column recomputes the dependent stored
value through these helpers; request payloads never set them directly.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from bizbooks.models import CharityStatus, LoanStatus

CHARITY_RATE = Decimal("0.06")
_CENT = Decimal("0.01")
_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def round_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize ``value`` to two decimal places, rounding half up."""

    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def charity_required(amount: Decimal) -> Decimal:
    return round_money(Decimal(amount) * CHARITY_RATE)


def profit(cost: Decimal, selling_price: Decimal) -> Decimal:
    return round_money(Decimal(selling_price) - Decimal(cost))


def profit_percentage(cost: Decimal, selling_price: Decimal) -> Decimal | None:
    """Return profit as a percentage of cost, or ``None`` for a zero cost basis."""

    cost = Decimal(cost)
    if cost == _ZERO:
        return None
    return round_money((Decimal(selling_price) - cost) / cost * _HUNDRED)


def charity_remaining(required: Decimal, paid: Decimal) -> Decimal:
    return round_money(Decimal(required) - Decimal(paid))


def charity_status(required: Decimal, paid: Decimal) -> CharityStatus:
    if charity_remaining(required, paid) <= _ZERO:
        return CharityStatus.PAID
    if Decimal(paid) == _ZERO:
        return CharityStatus.PENDING
    return CharityStatus.PARTIAL


def loan_status_after_payment(balance: Decimal) -> LoanStatus:
    return LoanStatus.PAID if Decimal(balance) <= _ZERO else LoanStatus.ACTIVE


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """Share of ``part`` in ``whole`` as a percentage; 0 when ``whole`` is 0."""

    whole = Decimal(whole)
    if whole == _ZERO:
        return round_money(_ZERO)
    return round_money(Decimal(part) / whole * _HUNDRED)


__all__ = [
    "CHARITY_RATE",
    "charity_remaining",
    "charity_required",
    "charity_status",
    "loan_status_after_payment",
    "percentage",
    "profit",
    "profit_percentage",
    "round_money",
]
