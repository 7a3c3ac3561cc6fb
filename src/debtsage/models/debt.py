"""Debt entities."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..services.accounts import DebtAccount, DebtCategory, DebtStatus, utcnow

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .payment import DebtPayment


class Debt(SQLModel, table=True):
    """Installment or revolving debt tracked in DebtSage."""

    __tablename__: ClassVar[str] = "debt"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    category: DebtCategory = Field(default=DebtCategory.OTHER, nullable=False)
    original_balance: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    current_balance: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    interest_rate: Decimal = Field(
        default=Decimal("0"),
        nullable=False,
        max_digits=9,
        decimal_places=6,
        description="Annual rate as a fraction, 0.2499 for 24.99%",
    )
    minimum_payment: Decimal = Field(
        default=Decimal("0"), nullable=False, max_digits=14, decimal_places=2
    )
    due_day: int = Field(default=1, ge=1, le=31)
    status: DebtStatus = Field(default=DebtStatus.ACTIVE, nullable=False, index=True)
    paid_off_date: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    payments: list["DebtPayment"] = Relationship(
        back_populates="debt",
        sa_relationship=relationship(
            "DebtPayment", back_populates="debt", cascade="all, delete-orphan"
        ),
    )

    def to_account(self) -> DebtAccount:
        """Snapshot this row as an engine value."""

        if self.id is None:
            raise ValueError("Debt must be saved before it can be used by the engine")
        return DebtAccount(
            id=self.id,
            name=self.name,
            category=self.category,
            original_balance=self.original_balance,
            current_balance=self.current_balance,
            interest_rate=self.interest_rate,
            minimum_payment=self.minimum_payment,
            due_day=self.due_day,
            status=self.status,
            paid_off_date=self.paid_off_date,
        )
