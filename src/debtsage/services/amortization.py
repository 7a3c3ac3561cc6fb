"""Single-period amortization math."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .money import ZERO, monthly_interest, to_money, to_rate
from .validation import require_non_negative


@dataclass(frozen=True, slots=True)
class PeriodSplit:
    """How one payment was split over one month.

    ``interest_portion + principal_portion`` is the amount actually applied;
    anything beyond what was owed is reported as ``unapplied``.
    """

    accrued_interest: Decimal
    interest_portion: Decimal
    principal_portion: Decimal
    new_balance: Decimal
    unapplied: Decimal = ZERO

    @property
    def applied(self) -> Decimal:
        return self.interest_portion + self.principal_portion

    @property
    def unpaid_interest(self) -> Decimal:
        """Interest accrued but not covered by the payment (not capitalized)."""
        return self.accrued_interest - self.interest_portion


def amount_owed(balance, annual_rate) -> Decimal:
    """Balance plus the interest that accrues on it this month."""

    balance = to_money(balance)
    return balance + monthly_interest(balance, to_rate(annual_rate))


def apply_period(balance, annual_rate, payment) -> PeriodSplit:
    """Apply ``payment`` to ``balance`` for one month at ``annual_rate``.

    Interest is paid first. A payment smaller than the accrued interest pays
    interest only; the uncovered interest is not added to the balance. The
    returned balance is never negative, and the principal portion never
    exceeds the starting balance.
    """

    balance = to_money(balance)
    annual_rate = to_rate(annual_rate)
    payment = to_money(payment)
    require_non_negative("balance", balance)
    require_non_negative("interest_rate", annual_rate)
    require_non_negative("payment", payment)

    accrued = monthly_interest(balance, annual_rate)
    interest_portion = min(accrued, payment)
    principal_portion = min(payment - interest_portion, balance)
    new_balance = max(ZERO, balance - principal_portion)
    unapplied = payment - interest_portion - principal_portion

    return PeriodSplit(
        accrued_interest=accrued,
        interest_portion=interest_portion,
        principal_portion=principal_portion,
        new_balance=new_balance,
        unapplied=unapplied,
    )


__all__ = ["PeriodSplit", "apply_period", "amount_owed"]
