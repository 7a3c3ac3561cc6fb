"""Pytest configuration and shared fixtures for DebtSage tests.

This module provides database fixtures, test data factories, and helper utilities
for testing the payoff engine, repositories, and CLI without touching a real
application database.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from debtsage.models import Debt, DebtPayment  # noqa: F401
from debtsage.infra.database import session_scope
from debtsage.services.accounts import DebtAccount, DebtCategory, DebtStatus

FIXED_START = date(2025, 1, 15)
FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0)


@pytest.fixture(autouse=True)
def _isolated_data_dir(tmp_path, monkeypatch):
    """Keep config-created directories and log files inside the test tmp dir."""
    monkeypatch.setenv("DEBTSAGE_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.delenv("DEBTSAGE_DATABASE_URL", raising=False)
    monkeypatch.delenv("DEBTSAGE_MAX_MONTHS", raising=False)
    monkeypatch.delenv("DEBTSAGE_DEFAULT_STRATEGY", raising=False)
    monkeypatch.delenv("DEBTSAGE_DEV_MODE", raising=False)
    monkeypatch.delenv("DEBTSAGE_LOG_LEVEL", raising=False)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories expect."""

    def factory():
        return session_scope(db_engine)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def make_debt():
    """Factory for engine-side debt values.

    Returns:
        Callable: Function that builds ``DebtAccount`` instances
    """

    counter = {"next": 1}

    def _make_debt(
        balance="1000.00",
        rate="0.12",
        minimum="50.00",
        *,
        id=None,
        original=None,
        name=None,
        category=DebtCategory.CREDIT_CARD,
        due_day=15,
        status=DebtStatus.ACTIVE,
    ) -> DebtAccount:
        debt_id = id if id is not None else counter["next"]
        counter["next"] += 1
        return DebtAccount(
            id=debt_id,
            name=name or f"Debt {debt_id}",
            category=category,
            current_balance=balance,
            original_balance=original,
            interest_rate=rate,
            minimum_payment=minimum,
            due_day=due_day,
            status=status,
        )

    return _make_debt


@pytest.fixture
def debt_row_factory(db_session):
    """Factory for creating persisted debts.

    Returns:
        Callable: Function that creates and persists Debt rows
    """

    def _create_debt(
        name: str = "Test Debt",
        balance: str = "1000.00",
        rate: str = "0.18",
        minimum_payment: str = "25.00",
        original: str | None = None,
        due_day: int = 15,
        category: DebtCategory = DebtCategory.CREDIT_CARD,
    ) -> Debt:
        """Create a test debt with sensible defaults.

        Args:
            name: Debt name/description
            balance: Current outstanding balance
            rate: Annual interest rate as a fraction (0.18 for 18%)
            minimum_payment: Minimum monthly payment
            original: Original balance (defaults to ``balance``)
            due_day: Day of month payment is due (1-31)

        Returns:
            Debt: Persisted debt row
        """
        debt = Debt(
            name=name,
            category=category,
            current_balance=Decimal(balance),
            original_balance=Decimal(original or balance),
            interest_rate=Decimal(rate),
            minimum_payment=Decimal(minimum_payment),
            due_day=due_day,
        )
        db_session.add(debt)
        db_session.commit()
        db_session.refresh(debt)
        return debt

    return _create_debt


# =============================================================================
# Assertion Helpers
# =============================================================================


def assert_money_equal(actual, expected, tolerance: str = "0"):
    """Assert that two money amounts are equal to the cent.

    The engine works in cent-quantized ``Decimal`` so the default tolerance is
    exact; pass ``tolerance`` only when comparing against a hand-rounded figure.
    """
    actual_d = Decimal(str(actual))
    expected_d = Decimal(str(expected))
    diff = abs(actual_d - expected_d)
    assert diff <= Decimal(tolerance), f"Expected {expected_d}, got {actual_d} (diff: {diff})"
