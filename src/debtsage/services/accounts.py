"""Engine-side value types for debts and payments."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from .money import to_money, to_rate

DebtId = Union[int, str]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DebtCategory(str, Enum):
    """Display grouping for a debt; never used in calculations."""

    CREDIT_CARD = "credit_card"
    AUTO_LOAN = "auto_loan"
    STUDENT_LOAN = "student_loan"
    PERSONAL_LOAN = "personal_loan"
    MORTGAGE = "mortgage"
    MEDICAL = "medical"
    OTHER = "other"


class DebtStatus(str, Enum):
    """Lifecycle of a debt. Only ``active -> paid_off`` is allowed."""

    ACTIVE = "active"
    PAID_OFF = "paid_off"


@dataclass(frozen=True, slots=True)
class DebtAccount:
    """Represents a liability input for payoff projections and payments.

    Money fields accept ``Decimal``, ``int``, ``str`` or ``float`` and are
    stored as cent-quantized decimals. ``interest_rate`` is an annual fraction
    (``0.2499`` for 24.99% APR). When ``original_balance`` is omitted the
    current balance is used.
    """

    id: DebtId
    current_balance: Decimal
    interest_rate: Decimal
    minimum_payment: Decimal
    original_balance: Optional[Decimal] = None
    name: str = ""
    category: DebtCategory = DebtCategory.OTHER
    due_day: int = 1  # Day of the month the payment is due
    status: DebtStatus = DebtStatus.ACTIVE
    paid_off_date: Optional[datetime] = None

    def __post_init__(self) -> None:
        current = to_money(self.current_balance)
        original = current if self.original_balance is None else to_money(self.original_balance)
        object.__setattr__(self, "current_balance", current)
        object.__setattr__(self, "original_balance", original)
        object.__setattr__(self, "interest_rate", to_rate(self.interest_rate))
        object.__setattr__(self, "minimum_payment", to_money(self.minimum_payment))
        object.__setattr__(self, "category", DebtCategory(self.category))
        object.__setattr__(self, "status", DebtStatus(self.status))
        object.__setattr__(self, "due_day", int(self.due_day))

    @property
    def is_active(self) -> bool:
        return self.status is DebtStatus.ACTIVE

    @property
    def is_open(self) -> bool:
        """Active and still carrying a balance."""
        return self.is_active and self.current_balance > 0


@dataclass(frozen=True, slots=True)
class PaymentRecord:
    """An applied payment. ``principal_paid + interest_paid == amount``."""

    debt_id: DebtId
    amount: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    payment_date: datetime = field(default_factory=utcnow)

    @property
    def payment_day(self) -> date:
        return self.payment_date.date()


__all__ = ["DebtId", "DebtCategory", "DebtStatus", "DebtAccount", "PaymentRecord", "utcnow"]
