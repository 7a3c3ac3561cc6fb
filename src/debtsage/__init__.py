"""DebtSage debt payoff engine package."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .services.accounts import DebtAccount, DebtCategory, DebtStatus, PaymentRecord
from .services.amortization import apply_period
from .services.debts import project_payoff
from .services.payments import record_payment
from .services.portfolio import summarize
from .services.strategy import PayoffStrategy, order_debts
from .services.validation import DebtValidationError

__all__ = [
    "BaseConfig",
    "DevConfig",
    "DebtAccount",
    "DebtCategory",
    "DebtStatus",
    "PaymentRecord",
    "DebtValidationError",
    "PayoffStrategy",
    "apply_period",
    "order_debts",
    "project_payoff",
    "record_payment",
    "summarize",
]
