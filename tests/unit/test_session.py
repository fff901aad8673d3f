"""Unit tests for session.py — validation flags, type selection, reset."""
from decimal import Decimal

import pytest

from mortgage_calculator.session import LoanInput, MortgageSession, View, session_from_form


def _filled(**overrides) -> MortgageSession:
    values = dict(amount="200000", term="25", rate="5", mortgage_type="repayment")
    values.update(overrides)
    return session_from_form(**values)


class TestInitialState:
    def test_empty(self):
        session = MortgageSession()
        assert session.inputs == LoanInput()
        assert session.invalid == set()
        assert session.result is None
        assert session.view is View.EMPTY


class TestInputEvents:
    def test_set_amount_returns_normalized(self):
        session = MortgageSession()
        assert session.set_amount("200000") == "200,000"
        assert session.inputs.amount == "200,000"

    def test_filled_value_clears_flag(self):
        session = MortgageSession()
        session.calculate()
        assert session.is_invalid("amount")
        session.set_amount("1")
        assert not session.is_invalid("amount")
        assert "amount" not in session.errors

    def test_empty_value_keeps_flag(self):
        session = MortgageSession()
        session.calculate()
        session.set_rate("abc")
        assert session.inputs.rate == ""
        assert session.is_invalid("rate")

    def test_set_field_rejects_type(self):
        with pytest.raises(ValueError, match="not a text field"):
            MortgageSession().set_field("type", "repayment")


class TestSelectType:
    def test_clears_type_flag(self):
        session = MortgageSession()
        session.calculate()
        assert session.is_invalid("type")
        session.select_type("interest-only")
        assert not session.is_invalid("type")

    @pytest.mark.parametrize("first,second", [
        ("repayment", "repayment"),
        ("repayment", "interest-only"),
        ("interest-only", "repayment"),
        ("interest-only", "interest-only"),
    ])
    def test_single_selection(self, first, second):
        session = MortgageSession()
        session.select_type(first)
        session.select_type(second)
        selected = [t for t in ("repayment", "interest-only") if session.is_selected(t)]
        assert selected == [second]

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown mortgage type"):
            MortgageSession().select_type("offset")


class TestValidation:
    def test_all_missing(self):
        session = MortgageSession()
        assert session.calculate() is None
        assert session.invalid == {"amount", "term", "rate", "type"}
        assert all(error.kind == "missing" for error in session.errors.values())

    @pytest.mark.parametrize("missing", ["amount", "term", "rate"])
    def test_single_missing_field(self, missing):
        session = _filled(**{missing: ""})
        assert session.calculate() is None
        assert session.result is None
        assert session.invalid == {missing}

    def test_missing_type(self):
        session = _filled(mortgage_type=None)
        assert session.calculate() is None
        assert session.invalid == {"type"}

    def test_zero_term_rejected(self):
        session = _filled(term="0")
        assert session.calculate() is None
        assert session.invalid == {"term"}
        assert session.errors["term"].kind == "out_of_range"

    def test_unparseable_rate_rejected(self):
        session = _filled(rate=".")
        assert session.calculate() is None
        assert session.invalid == {"rate"}
        assert session.errors["rate"].kind == "unparseable"

    def test_pass_does_not_clear_existing_flags(self):
        session = _filled()
        session.invalid.add("amount")
        assert session.validate() is True
        assert session.is_invalid("amount")

    def test_corrected_field_not_reflagged(self):
        session = MortgageSession()
        session.calculate()
        session.set_term("25")
        session.calculate()
        assert session.invalid == {"amount", "rate", "type"}


class TestCalculate:
    def test_repayment(self):
        session = _filled()
        result = session.calculate()
        assert result is not None
        assert session.view is View.RESULTS
        assert result.monthly_payment_display == "£1,169.18"

    def test_interest_only(self):
        session = _filled(mortgage_type="interest-only")
        result = session.calculate()
        assert result.monthly_payment == Decimal("833.33")
        assert result.total_repayment_display == "£450,000.00"

    def test_zero_rate(self):
        session = _filled(amount="120,000", term="10", rate="0")
        result = session.calculate()
        assert result.monthly_payment_display == "£1,000.00"
        assert result.total_repayment_display == "£120,000.00"

    def test_failed_pass_keeps_previous_result(self):
        session = _filled()
        first = session.calculate()
        session.set_amount("")
        assert session.calculate() is None
        assert session.result is first
        assert session.view is View.RESULTS

    def test_new_result_replaces_old(self):
        session = _filled()
        first = session.calculate()
        session.set_rate("4")
        second = session.calculate()
        assert second is not first
        assert session.result is second


class TestClear:
    @pytest.mark.parametrize("session", [
        MortgageSession(),
        _filled(),
        _filled(amount="", mortgage_type=None),
    ])
    def test_clear_resets_everything(self, session):
        session.calculate()
        session.clear()
        assert session.inputs == LoanInput()
        assert session.invalid == set()
        assert session.errors == {}
        assert session.result is None
        assert session.view is View.EMPTY


class TestInputLimits:
    @pytest.mark.parametrize("field,value", [
        ("amount", "1" * 5000),
        ("amount", "1,000,000,000,000"),
        ("term", "101"),
        ("term", "99999999"),
        ("rate", "100.01"),
        ("rate", "99999999"),
    ])
    def test_out_of_range_flagged(self, field, value):
        session = _filled(**{field: value})
        assert session.calculate() is None
        assert session.invalid == {field}
        assert session.errors[field].kind == "out_of_range"

    def test_huge_term_and_rate_do_not_raise(self):
        session = _filled(term="99999999", rate="99999999")
        assert session.calculate() is None
        assert session.invalid == {"term", "rate"}

    @pytest.mark.parametrize("mortgage_type", ["repayment", "interest-only"])
    def test_largest_accepted_values(self, mortgage_type):
        session = _filled(amount="999,999,999,999", term="100", rate="100", mortgage_type=mortgage_type)
        result = session.calculate()
        assert result is not None
        assert result.monthly_payment > 0
        assert result.total_repayment > result.principal

    def test_long_paste_normalises(self):
        session = MortgageSession()
        assert session.set_amount("1" * 5000).replace(",", "") == "1" * 5000
