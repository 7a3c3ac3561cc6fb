"""SQLModel repository implementations."""

from .debt import DebtNotFoundError, SQLModelDebtRepository, StaleDebtError

__all__ = ["DebtNotFoundError", "SQLModelDebtRepository", "StaleDebtError"]
