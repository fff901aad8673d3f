"""Core mortgage calculation functions.

All monetary values use decimal.Decimal — float is forbidden.
Rounding: ROUND_HALF_UP to 2 decimal places for final outputs,
full precision for all intermediate steps.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .config import CENT, CURRENCY_SYMBOL, HUNDRED, MONTHS_PER_YEAR, MORTGAGE_TYPES, ZERO, MortgageType


def _round(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(value: Decimal) -> str:
    """Render *value* as pounds with UK grouping and exactly two decimals."""
    rounded = _round(value)
    sign = "-" if rounded < ZERO else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(rounded):,.2f}"


@dataclass(frozen=True)
class MortgageResult:
    # Inputs echoed back
    principal: Decimal
    years: int
    annual_rate_percent: Decimal
    mortgage_type: MortgageType
    # Outputs
    monthly_payment: Decimal
    total_repayment: Decimal

    @property
    def number_of_payments(self) -> int:
        return self.years * MONTHS_PER_YEAR

    @property
    def monthly_payment_display(self) -> str:
        return format_currency(self.monthly_payment)

    @property
    def total_repayment_display(self) -> str:
        return format_currency(self.total_repayment)


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """Convert a yearly percentage (e.g. 5 for 5 %) to a monthly fraction."""
    return annual_rate_percent / HUNDRED / Decimal(MONTHS_PER_YEAR)


def compute_repayment_payment(
    principal: Decimal,
    annual_rate_percent: Decimal,
    number_of_payments: int,
) -> Decimal:
    """Return the unrounded capital-and-interest monthly payment.

    Uses the standard annuity formula:
        M = P * r * (1 + r)^n / ((1 + r)^n - 1)

    Special case: if the rate is zero, M = P / n (flat amortization).
    """
    if number_of_payments <= 0:
        raise ValueError("number_of_payments must be > 0")

    r = monthly_rate(annual_rate_percent)
    if r == ZERO:
        return principal / Decimal(number_of_payments)

    factor = (1 + r) ** number_of_payments
    if factor == 1:
        # Rate too small to register at the context precision
        return principal / Decimal(number_of_payments)
    return principal * r * factor / (factor - 1)


def compute_interest_only_payment(principal: Decimal, annual_rate_percent: Decimal) -> Decimal:
    """Monthly interest on the full principal; capital is repaid at term end."""
    return principal * monthly_rate(annual_rate_percent)


def calculate_mortgage(
    principal: Decimal,
    years: int,
    annual_rate_percent: Decimal,
    mortgage_type: MortgageType,
) -> MortgageResult:
    """Compute the monthly payment and total repaid for one mortgage."""
    if mortgage_type not in MORTGAGE_TYPES:
        raise ValueError(f"Unknown mortgage type '{mortgage_type}'")
    if years <= 0:
        raise ValueError("years must be > 0")
    if principal < ZERO:
        raise ValueError("principal must be >= 0")
    if annual_rate_percent < ZERO:
        raise ValueError("annual_rate_percent must be >= 0")

    n = years * MONTHS_PER_YEAR

    if mortgage_type == "repayment":
        monthly = compute_repayment_payment(principal, annual_rate_percent, n)
        total = monthly * Decimal(n)
    else:
        monthly = compute_interest_only_payment(principal, annual_rate_percent)
        total = monthly * Decimal(n) + principal

    return MortgageResult(
        principal=principal,
        years=years,
        annual_rate_percent=annual_rate_percent,
        mortgage_type=mortgage_type,
        monthly_payment=_round(monthly),
        total_repayment=_round(total),
    )
