"""Application-wide constants and configuration defaults.

All tuneable defaults live here so there is a single place to adjust them.
"""
from __future__ import annotations

import os
from decimal import Decimal
from typing import Literal

# ── Type aliases ──────────────────────────────────────────────────────────────

MortgageType = Literal["repayment", "interest-only"]
Field = Literal["amount", "term", "rate", "type"]

# ── Form definition ───────────────────────────────────────────────────────────

MORTGAGE_TYPES: tuple[MortgageType, ...] = ("repayment", "interest-only")
NUMERIC_FIELDS: tuple[Field, ...] = ("amount", "term", "rate")

FIELD_LABELS: dict[str, str] = {
    "amount": "Mortgage Amount",
    "term": "Mortgage Term",
    "rate": "Interest Rate",
    "type": "Mortgage Type",
}
TYPE_LABELS: dict[str, str] = {
    "repayment": "Repayment",
    "interest-only": "Interest Only",
}

# ── Currency ──────────────────────────────────────────────────────────────────

CURRENCY_SYMBOL: str = "£"

# ── Numeric convenience ───────────────────────────────────────────────────────

MONTHS_PER_YEAR: int = 12

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# ── Input limits ──────────────────────────────────────────────────────────────

# Upper bounds keep every calculation inside Decimal's default 28-digit context.
MAX_AMOUNT = Decimal("999999999999")
MAX_TERM_YEARS: int = 100
MAX_RATE_PERCENT = Decimal("100")

# ── Web server ────────────────────────────────────────────────────────────────

WEB_HOST: str = os.environ.get("MORTGAGE_CALCULATOR_HOST", "127.0.0.1")
WEB_PORT: int = int(os.environ.get("MORTGAGE_CALCULATOR_PORT", "5000"))
WEB_LOG_LEVEL: str = os.environ.get("MORTGAGE_CALCULATOR_LOG_LEVEL", "WARNING")
