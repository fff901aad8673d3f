"""Input normalisation and numeric parsing for the three text fields.

Normalisers run on every keystroke and only ever restrict or reformat the
text; they never fail.  Parsers run at calculation time and report failures
explicitly instead of coercing bad input to zero.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Union

from .config import Field

_NON_DIGIT = re.compile(r"[^\d]")
_NON_RATE_CHAR = re.compile(r"[^\d.]")


# ──────────────────────────────────────────────────────────────────────────────
# Normalisers
# ──────────────────────────────────────────────────────────────────────────────

def normalize_amount(raw: str) -> str:
    """Keep digits only and regroup them in threes with commas.

    >>> normalize_amount("£200000.50")
    '20,000,050'
    """
    digits = _NON_DIGIT.sub("", raw)
    if not digits:
        return ""
    digits = digits.lstrip("0") or "0"
    head = len(digits) % 3 or 3
    groups = [digits[:head]] + [digits[i:i + 3] for i in range(head, len(digits), 3)]
    return ",".join(groups)


def normalize_term(raw: str) -> str:
    return _NON_DIGIT.sub("", raw)


def normalize_rate(raw: str) -> str:
    """Keep digits and the first decimal point; later points are dropped."""
    value = _NON_RATE_CHAR.sub("", raw)
    parts = value.split(".")
    if len(parts) > 2:
        value = parts[0] + "." + "".join(parts[1:])
    return value


NORMALIZERS = {
    "amount": normalize_amount,
    "term": normalize_term,
    "rate": normalize_rate,
}


def normalize(field: Field, raw: str) -> str:
    """Dispatch to the normaliser for *field* (raises KeyError for 'type')."""
    return NORMALIZERS[field](raw)


# ──────────────────────────────────────────────────────────────────────────────
# Parsing
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ParsedValue:
    value: Decimal

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ParseFailure:
    field: Field
    raw: str
    reason: str

    @property
    def ok(self) -> bool:
        return False


ParseResult = Union[ParsedValue, ParseFailure]


def _parse_decimal(field: Field, raw: str) -> ParseResult:
    if not raw:
        return ParseFailure(field, raw, "empty")
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return ParseFailure(field, raw, f"'{raw}' is not a number")
    if not value.is_finite():
        return ParseFailure(field, raw, f"'{raw}' is not a number")
    return ParsedValue(value)


def parse_amount(text: str) -> ParseResult:
    """Parse a grouped amount such as '200,000'."""
    return _parse_decimal("amount", text.replace(",", ""))


def parse_term(text: str) -> ParseResult:
    result = _parse_decimal("term", text)
    if isinstance(result, ParsedValue) and result.value != result.value.to_integral_value():
        return ParseFailure("term", text, "term must be a whole number of years")
    return result


def parse_rate(text: str) -> ParseResult:
    return _parse_decimal("rate", text)
