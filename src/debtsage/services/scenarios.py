"""What-if planners built on the payoff projector."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from .accounts import DebtAccount
from .debts import PayoffProjection, project_payoff
from .money import ZERO, to_money, to_rate
from .strategy import PayoffStrategy
from .validation import require_non_negative


@dataclass(frozen=True, slots=True)
class ExtraPaymentScenario:
    """Effect of paying ``extra_payment`` on top of the minimum every month."""

    extra_payment: Decimal
    original_months: Optional[int]
    new_months: Optional[int]
    original_payoff_date: Optional[date]
    new_payoff_date: Optional[date]
    interest_saved: Decimal
    months_saved: int


@dataclass(frozen=True, slots=True)
class RefinanceScenario:
    """Effect of moving a debt to ``new_rate`` at the same monthly payment."""

    new_rate: Decimal
    monthly_payment: Decimal
    new_months: Optional[int]
    new_payoff_date: Optional[date]
    interest_saved: Decimal


def _savings(before: PayoffProjection, after: PayoffProjection) -> tuple[Decimal, int]:
    # Savings only mean something when both plans actually finish.
    if not (before.converged and after.converged):
        return ZERO, 0
    interest = max(ZERO, before.total_interest_paid - after.total_interest_paid)
    months = max(0, before.months_to_payoff - after.months_to_payoff)
    return interest, months


def extra_payment_scenario(
    debt: DebtAccount,
    extra_monthly,
    *,
    start_date: date | None = None,
    max_months: int | None = None,
) -> ExtraPaymentScenario:
    start = start_date or date.today()
    extra = to_money(extra_monthly)
    require_non_negative("extra_monthly", extra, debt_id=debt.id)

    baseline = project_payoff([debt], extra_monthly=ZERO, max_months=max_months, start_date=start)
    boosted = project_payoff([debt], extra_monthly=extra, max_months=max_months, start_date=start)
    interest_saved, months_saved = _savings(baseline, boosted)

    return ExtraPaymentScenario(
        extra_payment=extra,
        original_months=baseline.months_to_payoff,
        new_months=boosted.months_to_payoff,
        original_payoff_date=baseline.payoff_date,
        new_payoff_date=boosted.payoff_date,
        interest_saved=interest_saved,
        months_saved=months_saved,
    )


def refinance_scenario(
    debt: DebtAccount,
    new_rate,
    *,
    start_date: date | None = None,
    max_months: int | None = None,
) -> RefinanceScenario:
    start = start_date or date.today()
    rate = to_rate(new_rate)
    require_non_negative("new_rate", rate, debt_id=debt.id)

    current = project_payoff([debt], max_months=max_months, start_date=start)
    refinanced = project_payoff(
        [replace(debt, interest_rate=rate)], max_months=max_months, start_date=start
    )
    interest_saved, _ = _savings(current, refinanced)

    return RefinanceScenario(
        new_rate=rate,
        monthly_payment=debt.minimum_payment,
        new_months=refinanced.months_to_payoff,
        new_payoff_date=refinanced.payoff_date,
        interest_saved=interest_saved,
    )


def compare_strategies(
    debts: Iterable[DebtAccount],
    extra_monthly=ZERO,
    *,
    start_date: date | None = None,
    max_months: int | None = None,
) -> dict[PayoffStrategy, PayoffProjection]:
    """Project the same debts under every strategy with the same clock."""

    debts = list(debts)
    start = start_date or date.today()
    return {
        strategy: project_payoff(
            debts, strategy, extra_monthly, max_months, start_date=start
        )
        for strategy in PayoffStrategy
    }


__all__ = [
    "ExtraPaymentScenario",
    "RefinanceScenario",
    "extra_payment_scenario",
    "refinance_scenario",
    "compare_strategies",
]
