"""Payoff strategy ordering (snowball and avalanche)."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Iterable

from .accounts import DebtAccount
from .validation import DebtValidationError


class PayoffStrategy(str, Enum):
    """Closed set of repayment strategies.

    Each strategy carries a sort key producing a total order: the final
    component is the debt id, so no two distinct debts ever compare equal.
    """

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"

    @classmethod
    def parse(cls, value: "PayoffStrategy | str") -> "PayoffStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise DebtValidationError(
                "strategy",
                f"unknown payoff strategy; expected one of {', '.join(s.value for s in cls)}",
                value=value,
            ) from None

    def sort_key(self, debt: DebtAccount) -> tuple[Decimal, Decimal, str, str]:
        # The id type name separates 1 from "1".
        id_key = (str(debt.id), type(debt.id).__name__)
        if self is PayoffStrategy.AVALANCHE:
            # Highest rate first, then the smaller balance, then id.
            return (-debt.interest_rate, debt.current_balance, *id_key)
        # Smallest balance first, then the higher rate, then id.
        return (debt.current_balance, -debt.interest_rate, *id_key)


def order_debts(debts: Iterable[DebtAccount], strategy: PayoffStrategy | str) -> list[DebtAccount]:
    """Return the open debts in payment priority order for ``strategy``."""

    strategy = PayoffStrategy.parse(strategy)
    return sorted((d for d in debts if d.is_open), key=strategy.sort_key)


def snowball_order(debts: Iterable[DebtAccount]) -> list[DebtAccount]:
    """Smallest balances first."""
    return order_debts(debts, PayoffStrategy.SNOWBALL)


def avalanche_order(debts: Iterable[DebtAccount]) -> list[DebtAccount]:
    """Highest APR first."""
    return order_debts(debts, PayoffStrategy.AVALANCHE)


__all__ = ["PayoffStrategy", "order_debts", "snowball_order", "avalanche_order"]
