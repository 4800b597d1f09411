"""
Tests for the daily step function: per-generator semantics, ordering and
the zero-sum check.
"""

from datetime import date
from decimal import Decimal

import pytest
from daybook.core.balances import BalanceSheet, normalize_opening_balances
from daybook.core.engine import (
    mortgage_deduction,
    monthly_interest,
    step_day,
    tithe_amount,
)
from daybook.core.errors import (
    ConfigError,
    InvariantViolation,
    PositiveLiabilityError,
)
from daybook.core.generators import Interest, Mortgage, Salary, Tithe, Transfer

D = Decimal


def _sheet(**balances) -> BalanceSheet:
    return normalize_opening_balances({k: D(v) for k, v in balances.items()})


class TestMortgage:
    def test_clamped_by_available_balance(self):
        sheet = _sheet(main="100.00", mortgage="-500000.00")
        gens = [Mortgage("500.00", 5, "main", "mortgage")]

        result = step_day(gens, sheet, date(2025, 1, 5), D("0"))

        assert result.balances["main"] == D("0.00")
        assert result.balances["mortgage"] == D("-499900.00")
        assert result.balances.total() == 0

    def test_clamped_by_remaining_liability(self):
        sheet = _sheet(main="10000", mortgage="-50")
        gens = [Mortgage("500", 1, "main", "mortgage")]

        result = step_day(gens, sheet, date(2025, 2, 1))

        assert result.balances["mortgage"] == 0
        assert result.balances["main"] == D("9950")

    def test_paid_off_mortgage_posts_nothing(self):
        sheet = _sheet(main="10000", mortgage="0")
        result = step_day([Mortgage("500", 1, "main", "mortgage")], sheet, date(2025, 3, 1))

        assert result.balances == sheet
        assert result.entries == ()

    def test_overdrawn_source_posts_nothing(self):
        sheet = _sheet(main="-20", mortgage="-1000")
        result = step_day([Mortgage("500", 1, "main", "mortgage")], sheet, date(2025, 3, 1))

        assert result.balances == sheet

    def test_no_op_on_other_days(self):
        sheet = _sheet(main="10000", mortgage="-500000")
        gens = [Mortgage("123.45", 1, "main", "mortgage")]

        for day in range(2, 29):
            result = step_day(gens, sheet, date(2025, 1, day))
            assert result.balances == sheet

    def test_positive_liability_is_fatal(self):
        sheet = _sheet(main="100", mortgage="10")
        with pytest.raises(PositiveLiabilityError) as excinfo:
            step_day([Mortgage("5", 1, "main", "mortgage")], sheet, date(2025, 1, 1))

        err = excinfo.value
        assert isinstance(err, InvariantViolation)
        assert err.day == date(2025, 1, 1)
        assert err.balances["mortgage"] == D("10")
        assert "mortgage" in str(err)


class TestInterest:
    def test_positive_balance_accrues(self):
        sheet = _sheet(savings="1000")
        gens = [Interest("3", 15, "savings", "mortgage_income")]

        result = step_day(gens, sheet, date(2025, 1, 15))

        assert result.balances["savings"] == D("1002.50")
        assert result.balances["mortgage_income"] == D("-2.50")

    def test_liability_grows(self):
        sheet = _sheet(mortgage="-500000.00")
        gens = [Interest("5", 1, "mortgage", "mortgage_income")]

        result = step_day(gens, sheet, date(2025, 2, 1))

        assert result.balances["mortgage"] == D("-502083.33")
        assert result.balances["mortgage_income"] == D("2083.33")

    def test_zero_rate_posts_nothing(self):
        sheet = _sheet(savings="1000")
        result = step_day([Interest("0", 1, "savings", "mortgage_income")], sheet, date(2025, 1, 1))
        assert result.entries == ()
        assert result.balances == sheet

    def test_bankers_rounding_of_half_cents(self):
        assert monthly_interest(D("3"), D("6")) == D("0.02")  # 0.015 -> 0.02
        assert monthly_interest(D("1"), D("6")) == D("0.00")  # 0.005 -> 0.00

    def test_rounded_to_nothing_posts_nothing(self):
        sheet = _sheet(savings="1")
        result = step_day([Interest("6", 1, "savings", "mortgage_income")], sheet, date(2025, 1, 1))
        assert result.entries == ()


class TestSalaryAndTithe:
    def test_salary_credits_target_and_accumulates(self):
        sheet = _sheet(main="0")
        result = step_day([Salary("2000.00", 6, "main")], sheet, date(2025, 1, 6), D("150"))

        assert result.balances["main"] == D("2000.00")
        assert result.balances["salary_income"] == D("-2000.00")
        assert result.accumulator == D("2150.00")

    def test_tithe_pays_percentage_and_resets(self):
        sheet = _sheet(main="5000")
        gens = [Tithe("10", 10, "main", "charity_expenditure")]

        result = step_day(gens, sheet, date(2025, 1, 10), D("2000.00"))

        assert result.balances["main"] == D("4800.00")
        assert result.balances["charity_expenditure"] == D("200.00")
        assert result.accumulator == 0

    def test_tithe_with_empty_accumulator_is_no_op(self):
        sheet = _sheet(main="5000")
        gens = [Tithe("10", 10, "main", "charity_expenditure")]

        result = step_day(gens, sheet, date(2025, 1, 10), D("0"))

        assert result.balances == sheet
        assert result.accumulator == 0

    def test_tithe_rounding_to_zero_keeps_accumulator(self):
        sheet = _sheet(main="5000")
        gens = [Tithe("10", 10, "main", "charity_expenditure")]

        result = step_day(gens, sheet, date(2025, 1, 10), D("0.04"))

        assert result.entries == ()
        assert result.accumulator == D("0.04")

    def test_tithe_amount_rounds_to_cents(self):
        assert tithe_amount(D("1234.56"), D("12.5")) == D("154.32")


class TestTransfer:
    def test_transfer_is_not_clamped(self):
        sheet = _sheet(main="100", savings="0")
        result = step_day([Transfer("500", 1, "main", "savings")], sheet, date(2025, 1, 1))

        assert result.balances["main"] == D("-400")
        assert result.balances["savings"] == D("500")


class TestOrdering:
    """Same-day generators apply in declaration order."""

    def test_interest_before_mortgage(self):
        sheet = _sheet(main="100.00", mortgage="-500000.00")
        gens = [
            Interest("5", 5, "mortgage", "mortgage_income"),
            Mortgage("500.00", 5, "main", "mortgage"),
        ]

        result = step_day(gens, sheet, date(2025, 1, 5))

        # -500000.00 + 100.00 + round(-500000.00 * 5 / 1200, 2)
        assert result.balances["mortgage"] == D("-501983.33")
        assert result.balances["main"] == D("0.00")
        assert result.balances.total() == 0

    def test_mortgage_before_interest(self):
        sheet = _sheet(main="100.00", mortgage="-500000.00")
        gens = [
            Mortgage("500.00", 5, "main", "mortgage"),
            Interest("5", 5, "mortgage", "mortgage_income"),
        ]

        result = step_day(gens, sheet, date(2025, 1, 5))

        # interest is charged on the balance left by the mortgage payment
        assert result.balances["mortgage"] == D("-501982.92")
        assert result.balances["mortgage_income"] == D("2082.92")

    def test_tithe_before_salary_sees_old_accumulator(self):
        sheet = _sheet(main="0")
        gens = [Tithe("10", 6, "main", "charity_expenditure"), Salary("2000", 6, "main")]

        result = step_day(gens, sheet, date(2025, 1, 6))

        assert result.balances["charity_expenditure"] == 0
        assert result.accumulator == D("2000")

    def test_salary_before_tithe(self):
        sheet = _sheet(main="0")
        gens = [Salary("2000", 6, "main"), Tithe("10", 6, "main", "charity_expenditure")]

        result = step_day(gens, sheet, date(2025, 1, 6))

        assert result.balances["charity_expenditure"] == D("200")
        assert result.balances["main"] == D("1800")
        assert result.accumulator == 0
        assert result.fired == (0, 1)
        assert [e.kind for e in result.entries] == ["salary", "tithe"]


class TestStepContract:
    def test_input_sheet_is_not_mutated(self):
        sheet = _sheet(main="100", savings="0")
        before = sheet.to_dict()
        step_day([Transfer("50", 1, "main", "savings")], sheet, date(2025, 1, 1))
        assert sheet.to_dict() == before

    def test_missing_account_is_config_error(self):
        sheet = _sheet(main="100")
        with pytest.raises(ConfigError, match="nowhere"):
            step_day([Transfer("50", 1, "main", "nowhere")], sheet, date(2025, 1, 1))

    def test_missing_account_ignored_until_generator_fires(self):
        sheet = _sheet(main="100")
        result = step_day([Transfer("50", 1, "main", "nowhere")], sheet, date(2025, 1, 2))
        assert result.balances == sheet

    def test_unbalanced_sheet_is_fatal(self):
        sheet = BalanceSheet({"main": "1.00", "other": "0"})
        with pytest.raises(InvariantViolation) as excinfo:
            step_day([], sheet, date(2025, 1, 1))

        err = excinfo.value
        assert err.balances == {"main": D("1.00"), "other": D("0")}
        message = str(err)
        assert "2025-01-01" in message
        assert "main" in message and "other" in message

    def test_entries_are_zero_sum_pairs(self):
        sheet = _sheet(main="100", savings="0")
        result = step_day([Transfer("50", 1, "main", "savings")], sheet, date(2025, 1, 1))

        (entry,) = result.entries
        assert entry.id == "cp:transfer:2025-01-01:0"
        assert {p.account_id: p.amount for p in entry.postings} == {
            "savings": D("50"),
            "main": D("-50"),
        }


@pytest.mark.parametrize(
    "amount,from_balance,to_balance,expected",
    [
        ("500", "100", "-500000", "100"),
        ("500", "10000", "-50", "50"),
        ("500", "10000", "-500000", "500"),
        ("500", "-1", "-500000", "0"),
        ("500", "10000", "0", "0"),
    ],
)
def test_mortgage_deduction_clamp(amount, from_balance, to_balance, expected):
    assert mortgage_deduction(D(amount), D(from_balance), D(to_balance)) == D(expected)
