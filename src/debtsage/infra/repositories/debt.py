"""SQLModel implementation of the debt repository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.debt import Debt
from ...models.payment import DebtPayment
from ...services.accounts import DebtAccount, DebtStatus
from ...services.money import ZERO, to_money, to_rate
from ...services.payments import PaymentResult, record_payment
from ...services.validation import validate_debt

logger = get_logger(__name__)


class DebtNotFoundError(LookupError):
    """No debt with the requested id."""

    def __init__(self, debt_id: int):
        super().__init__(f"Debt {debt_id} not found")
        self.debt_id = debt_id


class StaleDebtError(RuntimeError):
    """The debt changed between read and write; nothing was saved."""

    def __init__(self, debt_id: int):
        super().__init__(f"Debt {debt_id} was modified concurrently; retry the payment")
        self.debt_id = debt_id


def _normalize(debt: Debt) -> None:
    """Quantize money fields and reject out-of-domain values before saving."""

    debt.current_balance = to_money(debt.current_balance)
    if debt.original_balance is None:
        debt.original_balance = debt.current_balance
    debt.original_balance = to_money(debt.original_balance)
    debt.interest_rate = to_rate(debt.interest_rate)
    debt.minimum_payment = to_money(debt.minimum_payment)
    validate_debt(
        DebtAccount(
            id=debt.id or 0,
            current_balance=debt.current_balance,
            original_balance=debt.original_balance,
            interest_rate=debt.interest_rate,
            minimum_payment=debt.minimum_payment,
            due_day=debt.due_day,
            status=debt.status,
        )
    )


class SQLModelDebtRepository:
    """SQLModel-based debt repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, debt_id: int) -> Optional[Debt]:
        """Retrieve a debt by ID."""
        with self.session_factory() as session:
            return session.get(Debt, debt_id)

    def list_all(self) -> list[Debt]:
        """List all debts."""
        with self.session_factory() as session:
            statement = select(Debt).order_by(Debt.name, Debt.id)  # type: ignore
            return list(session.exec(statement).all())

    def list_active(self) -> list[Debt]:
        """List debts that are not paid off."""
        with self.session_factory() as session:
            statement = (
                select(Debt)
                .where(Debt.status == DebtStatus.ACTIVE)
                .order_by(Debt.name, Debt.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def create(self, debt: Debt) -> Debt:
        """Create a new debt; the original balance defaults to the current one."""
        _normalize(debt)
        with self.session_factory() as session:
            session.add(debt)
            session.commit()
            session.refresh(debt)
            logger.info("Debt created", extra={"debt_id": debt.id, "debt_name": debt.name})
            return debt

    def update(self, debt: Debt) -> Debt:
        """Update an existing debt."""
        _normalize(debt)
        with self.session_factory() as session:
            merged = session.merge(debt)
            session.commit()
            session.refresh(merged)
            return merged

    def delete(self, debt_id: int) -> None:
        """Delete a debt and its payments."""
        with self.session_factory() as session:
            debt = session.get(Debt, debt_id)
            if debt:
                session.delete(debt)
                session.commit()

    def list_payments(self, debt_id: int) -> list[DebtPayment]:
        """Payments for one debt, newest first."""
        with self.session_factory() as session:
            statement = (
                select(DebtPayment)
                .where(DebtPayment.debt_id == debt_id)
                .order_by(DebtPayment.payment_date.desc(), DebtPayment.id.desc())  # type: ignore
            )
            return list(session.exec(statement).all())

    def record_payment(
        self, debt_id: int, amount, *, now: Optional[datetime] = None
    ) -> PaymentResult:
        """Apply a payment and store the new balance and payment row together.

        The balance update only matches if the stored balance is still the one
        that was read, so two concurrent payments cannot both decrement the same
        stale balance. The loser gets ``StaleDebtError`` and nothing is written.
        """
        with self.session_factory() as session:
            row = session.get(Debt, debt_id)
            if row is None:
                raise DebtNotFoundError(debt_id)

            read_balance = row.current_balance
            result = record_payment(row.to_account(), amount, now=now)
            updated = result.updated_debt

            statement = (
                update(Debt)
                .where(Debt.id == debt_id)
                .where(Debt.current_balance == read_balance)
                .where(Debt.status == DebtStatus.ACTIVE)
                .values(
                    current_balance=updated.current_balance,
                    minimum_payment=updated.minimum_payment,
                    status=updated.status,
                    paid_off_date=updated.paid_off_date,
                )
            )
            outcome = session.connection().execute(statement)
            if outcome.rowcount != 1:
                session.rollback()
                logger.warning(
                    "Payment rejected: debt changed since it was read",
                    extra={"debt_id": debt_id},
                )
                raise StaleDebtError(debt_id)

            session.add(DebtPayment.from_record(result.payment))
            session.commit()
            return result

    def total_balance(self) -> Decimal:
        """Outstanding balance across active debts."""
        return sum((d.current_balance for d in self.list_active()), ZERO)
