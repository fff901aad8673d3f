"""Per-session form state: inputs, validation flags, result and view.

A MortgageSession owns everything a presentation layer needs:

  - set_amount / set_term / set_rate normalise raw keystrokes and return the
    text to re-display; a non-empty value clears that field's error flag.
  - select_type switches the single-select mortgage type and clears 'type'.
  - calculate validates all four fields, then runs the calculator.
  - clear returns the session to its initial empty state.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal, Optional

from .calculator import MortgageResult, calculate_mortgage, format_currency
from .config import (
    MAX_AMOUNT,
    MAX_RATE_PERCENT,
    MAX_TERM_YEARS,
    MORTGAGE_TYPES,
    Field,
    MortgageType,
)
from .normalizer import (
    ParseFailure,
    ParsedValue,
    normalize_amount,
    normalize_rate,
    normalize_term,
    parse_amount,
    parse_rate,
    parse_term,
)

logger = logging.getLogger(__name__)

ErrorKind = Literal["missing", "unparseable", "out_of_range"]


class View(enum.Enum):
    EMPTY = "empty"
    RESULTS = "results"


@dataclass
class LoanInput:
    """Normalised text of each field.  Empty string / None means not entered."""
    amount: str = ""
    term: str = ""
    rate: str = ""
    mortgage_type: Optional[MortgageType] = None


@dataclass(frozen=True)
class FieldError:
    field: Field
    kind: ErrorKind
    message: str


@dataclass
class MortgageSession:
    inputs: LoanInput = field(default_factory=LoanInput)
    invalid: set[str] = field(default_factory=set)
    errors: dict[str, FieldError] = field(default_factory=dict)
    result: Optional[MortgageResult] = None

    # ── derived state ─────────────────────────────────────────────────────────

    @property
    def view(self) -> View:
        return View.EMPTY if self.result is None else View.RESULTS

    def is_selected(self, mortgage_type: MortgageType) -> bool:
        return self.inputs.mortgage_type == mortgage_type

    def is_invalid(self, name: Field) -> bool:
        return name in self.invalid

    # ── input events ──────────────────────────────────────────────────────────

    def set_amount(self, raw: str) -> str:
        self.inputs.amount = normalize_amount(raw)
        logger.debug("Amount normalised %r -> %r", raw, self.inputs.amount)
        self._clear_if_filled("amount", self.inputs.amount)
        return self.inputs.amount

    def set_term(self, raw: str) -> str:
        self.inputs.term = normalize_term(raw)
        logger.debug("Term normalised %r -> %r", raw, self.inputs.term)
        self._clear_if_filled("term", self.inputs.term)
        return self.inputs.term

    def set_rate(self, raw: str) -> str:
        self.inputs.rate = normalize_rate(raw)
        logger.debug("Rate normalised %r -> %r", raw, self.inputs.rate)
        self._clear_if_filled("rate", self.inputs.rate)
        return self.inputs.rate

    def set_field(self, name: Field, raw: str) -> str:
        """Route a text-change event to the right setter."""
        setters = {"amount": self.set_amount, "term": self.set_term, "rate": self.set_rate}
        if name not in setters:
            raise ValueError(f"'{name}' is not a text field")
        return setters[name](raw)

    def select_type(self, mortgage_type: str) -> None:
        if mortgage_type not in MORTGAGE_TYPES:
            raise ValueError(
                f"Unknown mortgage type '{mortgage_type}'. Expected one of: {', '.join(MORTGAGE_TYPES)}"
            )
        self.inputs.mortgage_type = mortgage_type  # type: ignore[assignment]
        self._clear_error("type")
        logger.debug("Mortgage type set to %s", mortgage_type)

    # ── triggers ──────────────────────────────────────────────────────────────

    def validate(self) -> bool:
        """Flag every required field that is missing, unusable or out of range.

        Fields that pass are left as they are; flags are only removed by
        corrective input.
        """
        failures: list[FieldError] = []

        amount = parse_amount(self.inputs.amount)
        term = parse_term(self.inputs.term)
        rate = parse_rate(self.inputs.rate)

        for result in (amount, term, rate):
            if isinstance(result, ParseFailure):
                failures.append(_failure_to_error(result))

        if isinstance(amount, ParsedValue) and amount.value > MAX_AMOUNT:
            failures.append(FieldError(
                "amount", "out_of_range", f"Amount cannot exceed {format_currency(MAX_AMOUNT)}"
            ))
        if isinstance(term, ParsedValue) and not 1 <= term.value <= MAX_TERM_YEARS:
            failures.append(FieldError(
                "term", "out_of_range", f"Term must be between 1 and {MAX_TERM_YEARS} years"
            ))
        if isinstance(rate, ParsedValue) and rate.value > MAX_RATE_PERCENT:
            failures.append(FieldError(
                "rate", "out_of_range", f"Rate cannot exceed {MAX_RATE_PERCENT}%"
            ))

        if self.inputs.mortgage_type is None:
            failures.append(FieldError("type", "missing", "This field is required"))

        for error in failures:
            self.invalid.add(error.field)
            self.errors[error.field] = error

        if failures:
            logger.debug("Validation failed for: %s", ", ".join(e.field for e in failures))
        return not failures

    def calculate(self) -> Optional[MortgageResult]:
        """Validate and compute.  Returns None (and keeps the old view) on failure."""
        if not self.validate():
            return None

        mortgage_type = self.inputs.mortgage_type
        if mortgage_type is None:
            raise ValueError("mortgage_type must be selected before calculating")
        principal = _value(parse_amount(self.inputs.amount))
        years = int(_value(parse_term(self.inputs.term)))
        rate = _value(parse_rate(self.inputs.rate))

        self.result = calculate_mortgage(principal, years, rate, mortgage_type)
        logger.debug(
            "Calculated %s mortgage: principal=%s years=%d rate=%s%% monthly=%s total=%s",
            mortgage_type, principal, years, rate,
            self.result.monthly_payment, self.result.total_repayment,
        )
        return self.result

    def clear(self) -> None:
        self.inputs = LoanInput()
        self.invalid.clear()
        self.errors.clear()
        self.result = None
        logger.debug("Session cleared")

    # ── helpers ───────────────────────────────────────────────────────────────

    def _clear_if_filled(self, name: Field, value: str) -> None:
        if value:
            self._clear_error(name)

    def _clear_error(self, name: Field) -> None:
        self.invalid.discard(name)
        self.errors.pop(name, None)


def _failure_to_error(failure: ParseFailure) -> FieldError:
    if failure.reason == "empty":
        return FieldError(failure.field, "missing", "This field is required")
    return FieldError(failure.field, "unparseable", f"Enter a valid number ({failure.reason})")


def _value(result) -> Decimal:
    if isinstance(result, ParseFailure):
        raise ValueError(f"{result.field}: {result.reason}")
    return result.value


def session_from_form(
    amount: str = "",
    term: str = "",
    rate: str = "",
    mortgage_type: Optional[str] = None,
) -> MortgageSession:
    """Build a session by replaying raw form values as input events."""
    session = MortgageSession()
    session.set_amount(amount)
    session.set_term(term)
    session.set_rate(rate)
    if mortgage_type:
        session.select_type(mortgage_type)
    return session
