"""Debt repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.debt import Debt
from ...models.payment import DebtPayment
from ...services.payments import PaymentResult


class DebtRepository(Protocol):
    """Storage contract for debts and their payment history."""

    def get_by_id(self, debt_id: int) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        ...

    def list_all(self) -> list[Debt]:
        """List all debts."""
        ...

    def list_active(self) -> list[Debt]:
        """List debts that are not paid off."""
        ...

    def create(self, debt: Debt) -> Debt:
        """Create a new debt."""
        ...

    def update(self, debt: Debt) -> Debt:
        """Update an existing debt."""
        ...

    def delete(self, debt_id: int) -> None:
        """Delete a debt and its payments."""
        ...

    def list_payments(self, debt_id: int) -> list[DebtPayment]:
        """Payments for one debt, newest first."""
        ...

    def record_payment(self, debt_id: int, amount, *, now=None) -> PaymentResult:
        """Apply a payment and persist debt + payment as one atomic write."""
        ...
