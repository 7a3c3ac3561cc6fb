"""SQLModel definitions for recorded debt payments."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..services.accounts import PaymentRecord

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .debt import Debt


class DebtPayment(SQLModel, table=True):
    """A payment applied to a debt. Rows are never updated after insert."""

    __tablename__: ClassVar[str] = "debt_payment"

    id: Optional[int] = Field(default=None, primary_key=True)
    debt_id: int = Field(foreign_key="debt.id", nullable=False, index=True)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    principal_paid: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    interest_paid: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    payment_date: datetime = Field(nullable=False, index=True)

    debt: "Debt" = Relationship(
        sa_relationship=relationship("Debt", back_populates="payments"),
    )

    @classmethod
    def from_record(cls, record: PaymentRecord) -> "DebtPayment":
        return cls(
            debt_id=int(record.debt_id),
            amount=record.amount,
            principal_paid=record.principal_paid,
            interest_paid=record.interest_paid,
            payment_date=record.payment_date,
        )

    def to_record(self) -> PaymentRecord:
        return PaymentRecord(
            debt_id=self.debt_id,
            amount=self.amount,
            principal_paid=self.principal_paid,
            interest_paid=self.interest_paid,
            payment_date=self.payment_date,
        )
