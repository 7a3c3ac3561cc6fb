"""Tests for the single-period interest/principal split."""

from __future__ import annotations

from decimal import Decimal

import pytest

from debtsage.services.amortization import amount_owed, apply_period
from debtsage.services.validation import DebtValidationError
from tests.conftest import assert_money_equal


class TestApplyPeriod:
    def test_interest_paid_before_principal(self):
        """Balance 1000 at 12%/yr with a 100 payment."""
        split = apply_period(Decimal("1000"), Decimal("0.12"), Decimal("100"))

        assert_money_equal(split.accrued_interest, "10.00")
        assert_money_equal(split.interest_portion, "10.00")
        assert_money_equal(split.principal_portion, "90.00")
        assert_money_equal(split.new_balance, "910.00")
        assert split.unapplied == 0

    def test_payment_below_interest_is_not_capitalized(self):
        split = apply_period("10000", "0.30", "50")

        assert_money_equal(split.accrued_interest, "250.00")
        assert_money_equal(split.interest_portion, "50.00")
        assert split.principal_portion == 0
        assert_money_equal(split.new_balance, "10000.00")
        assert_money_equal(split.unpaid_interest, "200.00")

    def test_exact_payoff_leaves_no_residual(self):
        owed = amount_owed("500", "0.12")
        assert_money_equal(owed, "505.00")

        split = apply_period("500", "0.12", owed)

        assert split.new_balance == Decimal("0.00")
        assert_money_equal(split.principal_portion, "500.00")
        assert split.unapplied == 0

    def test_overpayment_is_clipped_to_balance(self):
        split = apply_period("100", "0.12", "150")

        assert_money_equal(split.interest_portion, "1.00")
        assert_money_equal(split.principal_portion, "100.00")
        assert split.new_balance == 0
        assert_money_equal(split.applied, "101.00")
        assert_money_equal(split.unapplied, "49.00")

    def test_zero_rate(self):
        split = apply_period("300", "0", "100")

        assert split.interest_portion == 0
        assert_money_equal(split.new_balance, "200.00")

    def test_zero_balance_and_payment(self):
        split = apply_period("0", "0.20", "0")

        assert split.new_balance == 0
        assert split.applied == 0

    def test_same_inputs_same_result(self):
        first = apply_period("2345.67", "0.2199", "88.10")
        second = apply_period("2345.67", "0.2199", "88.10")
        assert first == second

    @pytest.mark.parametrize(
        "balance, rate, payment, field",
        [
            ("-1", "0.1", "10", "balance"),
            ("100", "-0.1", "10", "interest_rate"),
            ("100", "0.1", "-10", "payment"),
        ],
    )
    def test_negative_inputs_rejected(self, balance, rate, payment, field):
        with pytest.raises(DebtValidationError) as excinfo:
            apply_period(balance, rate, payment)
        assert excinfo.value.field == field


def test_split_always_sums_to_payment():
    """interest + principal + unapplied == payment for a spread of inputs."""
    balances = ["0", "0.01", "49.99", "1000", "18500.55"]
    rates = ["0", "0.0499", "0.1299", "0.2499", "0.36"]
    payments = ["0", "0.01", "25", "485", "20000"]

    for balance in balances:
        for rate in rates:
            for payment in payments:
                split = apply_period(balance, rate, payment)
                assert split.interest_portion + split.principal_portion == split.applied
                assert split.applied + split.unapplied == Decimal(payment)
                assert split.interest_portion >= 0
                assert split.principal_portion >= 0
                assert 0 <= split.new_balance <= Decimal(balance)
