"""Portfolio-level debt figures."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from .accounts import DebtAccount
from .money import ZERO, percent_of
from .strategy import PayoffStrategy


@dataclass(frozen=True, slots=True)
class PortfolioSummary:
    """Aggregate view over the active debts of one user."""

    total_balance: Decimal = ZERO
    total_original_balance: Decimal = ZERO
    total_minimum_payment: Decimal = ZERO
    debt_count: int = 0
    progress_percent: int = 0
    highest_rate_debt: Optional[DebtAccount] = None

    @property
    def total_paid_down(self) -> Decimal:
        return self.total_original_balance - self.total_balance


def summarize(debts: Iterable[DebtAccount]) -> PortfolioSummary:
    """Summarize the active debts in ``debts``; paid off debts are ignored."""

    active = [d for d in debts if d.is_active]
    if not active:
        return PortfolioSummary()

    total_balance = sum((d.current_balance for d in active), ZERO)
    total_original = sum((d.original_balance for d in active), ZERO)
    total_minimum = sum((d.minimum_payment for d in active), ZERO)

    # Same tie-break as avalanche ordering so the "priority" debt agrees everywhere.
    highest = min(active, key=PayoffStrategy.AVALANCHE.sort_key)

    return PortfolioSummary(
        total_balance=total_balance,
        total_original_balance=total_original,
        total_minimum_payment=total_minimum,
        debt_count=len(active),
        progress_percent=percent_of(total_original - total_balance, total_original),
        highest_rate_debt=highest,
    )


def debt_progress(debt: DebtAccount) -> int:
    """Percent of one debt's original balance already paid down."""

    if debt.original_balance <= 0:
        return 100
    return percent_of(debt.original_balance - debt.current_balance, debt.original_balance)


def weighted_interest_rate(debts: Iterable[DebtAccount]) -> Decimal:
    """Balance-weighted average APR across active debts."""

    active = [d for d in debts if d.is_active]
    total_balance = sum((d.current_balance for d in active), ZERO)
    if total_balance == 0:
        return Decimal("0")
    weighted_sum = sum((d.current_balance * d.interest_rate for d in active), Decimal("0"))
    return weighted_sum / total_balance


__all__ = ["PortfolioSummary", "summarize", "debt_progress", "weighted_interest_rate"]
