"""Input validation for the payoff engine."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

from .accounts import DebtAccount, DebtStatus


class DebtValidationError(ValueError):
    """Raised when an engine input is malformed or out of domain.

    ``field`` names the offending input so callers can point the user at it.
    """

    def __init__(self, field: str, message: str, *, value: Any = None, debt_id: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value
        self.debt_id = debt_id

    def __str__(self) -> str:
        prefix = f"debt {self.debt_id}: " if self.debt_id is not None else ""
        return f"{prefix}{self.field}: {self.args[0]}"


def require_non_negative(field: str, value: Decimal, *, debt_id: Any = None) -> None:
    if value < 0:
        raise DebtValidationError(field, "must not be negative", value=value, debt_id=debt_id)


def require_positive(field: str, value: Decimal | int, *, debt_id: Any = None) -> None:
    if value <= 0:
        raise DebtValidationError(field, "must be greater than zero", value=value, debt_id=debt_id)


def validate_debt(debt: DebtAccount) -> None:
    """Check the money/rate fields and state invariants of one debt."""

    require_non_negative("original_balance", debt.original_balance, debt_id=debt.id)
    require_non_negative("current_balance", debt.current_balance, debt_id=debt.id)
    require_non_negative("interest_rate", debt.interest_rate, debt_id=debt.id)
    require_non_negative("minimum_payment", debt.minimum_payment, debt_id=debt.id)

    if debt.current_balance > debt.original_balance:
        raise DebtValidationError(
            "current_balance",
            "must not exceed the original balance",
            value=debt.current_balance,
            debt_id=debt.id,
        )
    if not 1 <= debt.due_day <= 31:
        raise DebtValidationError(
            "due_day", "must be a day of month between 1 and 31", value=debt.due_day, debt_id=debt.id
        )
    if debt.status is DebtStatus.PAID_OFF and debt.current_balance != 0:
        raise DebtValidationError(
            "status",
            "a paid off debt must have a zero balance",
            value=debt.status.value,
            debt_id=debt.id,
        )


def validate_debts(debts: Iterable[DebtAccount]) -> list[DebtAccount]:
    """Validate every debt and return them as a list."""

    checked = list(debts)
    seen: set[Any] = set()
    for debt in checked:
        validate_debt(debt)
        if debt.id in seen:
            raise DebtValidationError("id", "duplicate debt id", value=debt.id, debt_id=debt.id)
        seen.add(debt.id)
    return checked


__all__ = [
    "DebtValidationError",
    "require_non_negative",
    "require_positive",
    "validate_debt",
    "validate_debts",
]
