"""Recording real-world payments against a debt."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from ..logging_config import get_logger
from .accounts import DebtAccount, DebtStatus, PaymentRecord, utcnow
from .amortization import apply_period
from .money import ZERO, to_money
from .validation import DebtValidationError, require_positive, validate_debt

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PaymentResult:
    """Outcome of :func:`record_payment`.

    Both ``updated_debt`` and ``payment`` must be persisted together.
    ``unapplied`` is any part of the tendered amount beyond what was owed.
    """

    updated_debt: DebtAccount
    payment: PaymentRecord
    unapplied: Decimal = ZERO

    @property
    def paid_off(self) -> bool:
        return self.updated_debt.status is DebtStatus.PAID_OFF


def record_payment(debt: DebtAccount, amount, *, now: datetime | None = None) -> PaymentResult:
    """Apply one payment of ``amount`` to ``debt``.

    Interest accrued for the month is paid first, then principal. When the
    balance reaches zero the debt is marked paid off, stamped with ``now`` and
    its minimum payment drops to zero.
    """

    amount = to_money(amount)
    require_positive("amount", amount, debt_id=debt.id)
    validate_debt(debt)
    if debt.status is DebtStatus.PAID_OFF:
        raise DebtValidationError(
            "status", "debt is already paid off", value=debt.status.value, debt_id=debt.id
        )
    if debt.current_balance == 0:
        raise DebtValidationError(
            "current_balance", "debt has no balance to pay", value=debt.current_balance, debt_id=debt.id
        )

    paid_at = now or utcnow()
    split = apply_period(debt.current_balance, debt.interest_rate, amount)

    if split.new_balance == 0:
        updated = replace(
            debt,
            current_balance=ZERO,
            status=DebtStatus.PAID_OFF,
            paid_off_date=paid_at,
            minimum_payment=ZERO,
        )
    else:
        updated = replace(debt, current_balance=split.new_balance)

    payment = PaymentRecord(
        debt_id=debt.id,
        amount=split.applied,
        principal_paid=split.principal_portion,
        interest_paid=split.interest_portion,
        payment_date=paid_at,
    )

    logger.info(
        "Payment recorded",
        extra={
            "debt_id": debt.id,
            "amount": payment.amount,
            "principal": payment.principal_paid,
            "interest": payment.interest_paid,
            "new_balance": updated.current_balance,
        },
    )
    if split.unapplied > 0:
        logger.warning(
            "Payment exceeded amount owed; %s left unapplied",
            split.unapplied,
            extra={"debt_id": debt.id},
        )
    if updated.status is DebtStatus.PAID_OFF:
        logger.info("Debt paid off", extra={"debt_id": debt.id, "paid_off_date": paid_at})

    return PaymentResult(updated_debt=updated, payment=payment, unapplied=split.unapplied)


def apply_payments(
    debt: DebtAccount, amounts, *, now: datetime | None = None
) -> tuple[DebtAccount, list[PaymentRecord]]:
    """Record a sequence of payments, stopping once the debt is paid off.

    Returns the final debt and the payment records that were applied.
    """

    records: list[PaymentRecord] = []
    current = debt
    for amount in amounts:
        if current.status is DebtStatus.PAID_OFF:
            break
        result = record_payment(current, amount, now=now)
        current = result.updated_debt
        records.append(result.payment)
    return current, records


__all__ = ["PaymentResult", "record_payment", "apply_payments"]
