"""SQLModel table exports."""

from .debt import Debt
from .payment import DebtPayment

__all__ = ["Debt", "DebtPayment"]
