"""Service module exports."""

from . import (
    accounts,
    amortization,
    debts,
    due_dates,
    export_csv,
    money,
    payments,
    portfolio,
    scenarios,
    strategy,
    validation,
)

__all__ = [
    "accounts",
    "amortization",
    "debts",
    "due_dates",
    "export_csv",
    "money",
    "payments",
    "portfolio",
    "scenarios",
    "strategy",
    "validation",
]
