"""Debt payoff projections (snowball and avalanche).

The projector simulates whole months. Each month every open debt receives its
own minimum (capped at what it owes), and the rest of the monthly budget goes
to debts in strategy order: the extra payment, minimums freed by debts closed
in earlier months, and anything left over from capped minimums this month. The
budget therefore stays constant, and money freed by a closed debt "snowballs"
into the next priority debt.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..config import DEFAULT_MAX_MONTHS, configured_max_months
from ..logging_config import get_logger
from .accounts import DebtAccount, DebtCategory, DebtId, DebtStatus, PaymentRecord
from .amortization import amount_owed, apply_period
from .due_dates import add_months
from .money import ZERO, to_money
from .strategy import PayoffStrategy, order_debts
from .validation import (
    DebtValidationError,
    require_non_negative,
    require_positive,
    validate_debts,
)

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PeriodEntry:
    """One debt's line in a simulated month."""

    debt_id: DebtId
    payment: Decimal
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal

    @property
    def paid_off(self) -> bool:
        return self.remaining_balance == 0


@dataclass(frozen=True, slots=True)
class PeriodResult:
    """A simulated month of the payoff schedule."""

    month: int
    period_date: date
    target_debt_id: DebtId
    entries: tuple[PeriodEntry, ...]

    @property
    def total_payment(self) -> Decimal:
        return sum((e.payment for e in self.entries), ZERO)

    @property
    def total_interest(self) -> Decimal:
        return sum((e.interest for e in self.entries), ZERO)

    @property
    def total_principal(self) -> Decimal:
        return sum((e.principal for e in self.entries), ZERO)

    @property
    def remaining_balance(self) -> Decimal:
        return sum((e.remaining_balance for e in self.entries), ZERO)

    def entry_for(self, debt_id: DebtId) -> Optional[PeriodEntry]:
        for entry in self.entries:
            if entry.debt_id == debt_id:
                return entry
        return None


@dataclass(frozen=True, slots=True)
class PayoffProjection:
    """Result of :func:`project_payoff`.

    ``months_to_payoff`` and ``payoff_date`` are ``None`` when the debts are not
    paid off within the month limit; ``schedule`` still holds every simulated
    month so callers can show how far the plan got.
    """

    strategy: PayoffStrategy
    start_date: date
    extra_monthly: Decimal
    monthly_budget: Decimal
    schedule: tuple[PeriodResult, ...]
    total_interest_paid: Decimal
    months_to_payoff: Optional[int]
    payoff_date: Optional[date]

    @property
    def converged(self) -> bool:
        return self.months_to_payoff is not None

    @property
    def total_paid(self) -> Decimal:
        return sum((p.total_payment for p in self.schedule), ZERO)

    def payoff_month_for(self, debt_id: DebtId) -> Optional[int]:
        """Month in which ``debt_id`` reaches zero, if it does."""

        for period in self.schedule:
            entry = period.entry_for(debt_id)
            if entry is not None and entry.paid_off:
                return period.month
        return None


def _resolve_max_months(max_months: int | None) -> int:
    if max_months is None:
        return configured_max_months()
    if isinstance(max_months, bool) or not isinstance(max_months, int):
        raise DebtValidationError(
            "max_months", "must be a whole number of months", value=max_months
        )
    require_positive("max_months", max_months)
    return max_months


def project_payoff(
    debts: Iterable[DebtAccount],
    strategy: PayoffStrategy | str = PayoffStrategy.AVALANCHE,
    extra_monthly=ZERO,
    max_months: int | None = None,
    *,
    start_date: date | None = None,
) -> PayoffProjection:
    """Simulate month-by-month payoff of ``debts`` under ``strategy``.

    Inputs are validated up front; nothing is simulated if any of them is out
    of domain. The input debts are never modified. The loop runs at most
    ``max_months`` times.
    """

    strategy = PayoffStrategy.parse(strategy)
    extra = to_money(extra_monthly)
    require_non_negative("extra_monthly", extra)
    month_limit = _resolve_max_months(max_months)
    checked = validate_debts(debts)
    start = start_date or date.today()

    working: dict[DebtId, DebtAccount] = {d.id: d for d in checked if d.is_open}
    budget = sum((d.minimum_payment for d in working.values()), ZERO) + extra

    if not working:
        return PayoffProjection(
            strategy=strategy,
            start_date=start,
            extra_monthly=extra,
            monthly_budget=budget,
            schedule=(),
            total_interest_paid=ZERO,
            months_to_payoff=0,
            payoff_date=start,
        )

    schedule: list[PeriodResult] = []
    total_interest = ZERO

    for month in range(1, month_limit + 1):
        ordered = order_debts(working.values(), strategy)
        owed = {d.id: amount_owed(d.current_balance, d.interest_rate) for d in ordered}

        # Minimums first, never more than the debt owes this month.
        payments = {d.id: min(d.minimum_payment, owed[d.id]) for d in ordered}

        # Whatever is left of the budget goes down the priority list.
        pool = budget - sum(payments.values(), ZERO)
        for debt in ordered:
            if pool <= 0:
                break
            top_up = min(pool, owed[debt.id] - payments[debt.id])
            payments[debt.id] += top_up
            pool -= top_up

        entries: list[PeriodEntry] = []
        for debt in ordered:
            split = apply_period(debt.current_balance, debt.interest_rate, payments[debt.id])
            total_interest += split.interest_portion
            entries.append(
                PeriodEntry(
                    debt_id=debt.id,
                    payment=split.applied,
                    interest=split.interest_portion,
                    principal=split.principal_portion,
                    remaining_balance=split.new_balance,
                )
            )
            if split.new_balance == 0:
                del working[debt.id]
            else:
                working[debt.id] = replace(debt, current_balance=split.new_balance)

        schedule.append(
            PeriodResult(
                month=month,
                period_date=add_months(start, month),
                target_debt_id=ordered[0].id,
                entries=tuple(entries),
            )
        )

        if not working:
            payoff_date = add_months(start, month)
            logger.info(
                "Payoff projection complete",
                extra={
                    "strategy": strategy.value,
                    "months": month,
                    "total_interest": total_interest,
                    "payoff_date": payoff_date,
                },
            )
            return PayoffProjection(
                strategy=strategy,
                start_date=start,
                extra_monthly=extra,
                monthly_budget=budget,
                schedule=tuple(schedule),
                total_interest_paid=total_interest,
                months_to_payoff=month,
                payoff_date=payoff_date,
            )

    logger.warning(
        "Payoff schedule did not converge within %s months; payments too low",
        month_limit,
        extra={
            "strategy": strategy.value,
            "remaining_debts": sorted(str(debt_id) for debt_id in working),
            "remaining_balance": sum((d.current_balance for d in working.values()), ZERO),
        },
    )
    return PayoffProjection(
        strategy=strategy,
        start_date=start,
        extra_monthly=extra,
        monthly_budget=budget,
        schedule=tuple(schedule),
        total_interest_paid=total_interest,
        months_to_payoff=None,
        payoff_date=None,
    )


def schedule_summary(projection: PayoffProjection) -> tuple[str | None, Decimal, int | None]:
    """Return (payoff_date_iso, total_interest, months)."""

    payoff_date = projection.payoff_date.isoformat() if projection.payoff_date else None
    return payoff_date, projection.total_interest_paid, projection.months_to_payoff


def snowball_schedule(
    *, debts: Iterable[DebtAccount], surplus=ZERO, **kwargs
) -> PayoffProjection:
    """Return payoff projection prioritizing smallest balances first."""
    return project_payoff(debts, PayoffStrategy.SNOWBALL, surplus, **kwargs)


def avalanche_schedule(
    *, debts: Iterable[DebtAccount], surplus=ZERO, **kwargs
) -> PayoffProjection:
    """Return payoff projection prioritizing highest APR first."""
    return project_payoff(debts, PayoffStrategy.AVALANCHE, surplus, **kwargs)


__all__ = [
    "DEFAULT_MAX_MONTHS",
    "DebtAccount",
    "DebtCategory",
    "DebtStatus",
    "PaymentRecord",
    "PeriodEntry",
    "PeriodResult",
    "PayoffProjection",
    "project_payoff",
    "schedule_summary",
    "snowball_schedule",
    "avalanche_schedule",
]
