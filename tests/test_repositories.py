"""Tests for the SQLModel debt repository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlmodel import select

from debtsage.infra.repositories import (
    DebtNotFoundError,
    SQLModelDebtRepository,
    StaleDebtError,
)
from debtsage.infra.repositories import debt as debt_repo_module
from debtsage.models import Debt, DebtPayment
from debtsage.services.accounts import DebtCategory, DebtStatus
from debtsage.services.validation import DebtValidationError
from tests.conftest import FIXED_NOW, assert_money_equal


@pytest.fixture
def repo(session_factory):
    return SQLModelDebtRepository(session_factory)


class TestCreate:
    def test_create_quantizes_and_defaults_original(self, repo):
        debt = repo.create(
            Debt(
                name="Visa",
                category=DebtCategory.CREDIT_CARD,
                current_balance=Decimal("1234.567"),
                interest_rate=Decimal("0.2499"),
                minimum_payment=Decimal("35"),
                due_day=20,
            )
        )

        assert debt.id is not None
        stored = repo.get_by_id(debt.id)
        assert stored.current_balance == Decimal("1234.57")
        assert stored.original_balance == Decimal("1234.57")
        assert stored.interest_rate == Decimal("0.2499")
        assert stored.minimum_payment == Decimal("35.00")
        assert stored.status is DebtStatus.ACTIVE
        assert stored.category is DebtCategory.CREDIT_CARD

    def test_create_rejects_negative_rate(self, repo):
        with pytest.raises(DebtValidationError) as excinfo:
            repo.create(
                Debt(
                    name="Bad",
                    current_balance=Decimal("100"),
                    interest_rate=Decimal("-0.05"),
                    minimum_payment=Decimal("10"),
                )
            )
        assert excinfo.value.field == "interest_rate"
        assert repo.list_all() == []

    def test_create_rejects_balance_above_original(self, repo):
        with pytest.raises(DebtValidationError) as excinfo:
            repo.create(
                Debt(
                    name="Bad",
                    current_balance=Decimal("600"),
                    original_balance=Decimal("500"),
                    minimum_payment=Decimal("10"),
                )
            )
        assert excinfo.value.field == "current_balance"


class TestQueries:
    def test_list_active_skips_paid_off(self, repo, debt_row_factory, db_session):
        debt_row_factory(name="Car", balance="8000")
        paid = debt_row_factory(name="Amex", balance="300")
        paid.current_balance = Decimal("0")
        paid.status = DebtStatus.PAID_OFF
        db_session.add(paid)
        db_session.commit()

        assert [d.name for d in repo.list_all()] == ["Amex", "Car"]
        assert [d.name for d in repo.list_active()] == ["Car"]

    def test_total_balance(self, repo, debt_row_factory):
        debt_row_factory(name="A", balance="1000.50")
        debt_row_factory(name="B", balance="250.25")
        assert_money_equal(repo.total_balance(), "1250.75")

    def test_total_balance_empty(self, repo):
        assert repo.total_balance() == 0

    def test_get_missing_returns_none(self, repo):
        assert repo.get_by_id(999) is None

    def test_update(self, repo, debt_row_factory):
        debt = debt_row_factory(name="Loan", balance="5000")
        debt.minimum_payment = Decimal("150")
        debt.name = "Student loan"

        repo.update(debt)

        stored = repo.get_by_id(debt.id)
        assert stored.name == "Student loan"
        assert stored.minimum_payment == Decimal("150.00")


class TestRecordPayment:
    def test_payment_updates_balance_and_stores_row(self, repo, debt_row_factory):
        debt = debt_row_factory(balance="1000", rate="0.12", minimum_payment="100")

        result = repo.record_payment(debt.id, "100", now=FIXED_NOW)

        assert result.updated_debt.current_balance == Decimal("910.00")
        stored = repo.get_by_id(debt.id)
        assert stored.current_balance == Decimal("910.00")
        assert stored.status is DebtStatus.ACTIVE

        payments = repo.list_payments(debt.id)
        assert len(payments) == 1
        assert payments[0].amount == Decimal("100.00")
        assert payments[0].interest_paid == Decimal("10.00")
        assert payments[0].principal_paid == Decimal("90.00")
        assert payments[0].payment_date == FIXED_NOW

    def test_payoff_is_persisted(self, repo, debt_row_factory):
        debt = debt_row_factory(balance="500", rate="0.12", minimum_payment="50")

        result = repo.record_payment(debt.id, "505", now=FIXED_NOW)

        assert result.paid_off
        stored = repo.get_by_id(debt.id)
        assert stored.current_balance == 0
        assert stored.status is DebtStatus.PAID_OFF
        assert stored.paid_off_date == FIXED_NOW
        assert stored.minimum_payment == 0
        assert repo.list_active() == []

    def test_payments_listed_newest_first(self, repo, debt_row_factory):
        debt = debt_row_factory(balance="1000", rate="0.12", minimum_payment="100")

        repo.record_payment(debt.id, "100", now=datetime(2025, 1, 15))
        repo.record_payment(debt.id, "100", now=datetime(2025, 2, 15))

        dates = [p.payment_date for p in repo.list_payments(debt.id)]
        assert dates == [datetime(2025, 2, 15), datetime(2025, 1, 15)]
        assert repo.get_by_id(debt.id).current_balance == Decimal("819.10")

    def test_paying_a_paid_off_debt_is_rejected(self, repo, debt_row_factory):
        debt = debt_row_factory(balance="500", rate="0", minimum_payment="50")
        repo.record_payment(debt.id, "500", now=FIXED_NOW)

        with pytest.raises(DebtValidationError) as excinfo:
            repo.record_payment(debt.id, "10", now=FIXED_NOW)

        assert excinfo.value.field == "status"
        assert len(repo.list_payments(debt.id)) == 1

    def test_missing_debt(self, repo):
        with pytest.raises(DebtNotFoundError) as excinfo:
            repo.record_payment(404, "10")
        assert excinfo.value.debt_id == 404

    def test_invalid_amount_writes_nothing(self, repo, debt_row_factory):
        debt = debt_row_factory(balance="1000")

        with pytest.raises(DebtValidationError):
            repo.record_payment(debt.id, "0")

        assert repo.list_payments(debt.id) == []
        assert repo.get_by_id(debt.id).current_balance == Decimal("1000.00")

    def test_concurrent_change_is_detected(self, repo, session_factory, debt_row_factory, monkeypatch):
        """A balance written between read and update makes the payment fail cleanly."""
        debt = debt_row_factory(balance="1000", rate="0.12", minimum_payment="100")
        real_record_payment = debt_repo_module.record_payment

        def racing_record_payment(account, amount, *, now=None):
            with session_factory() as other:
                row = other.get(Debt, account.id)
                row.current_balance = Decimal("800.00")
                other.add(row)
            return real_record_payment(account, amount, now=now)

        monkeypatch.setattr(debt_repo_module, "record_payment", racing_record_payment)

        with pytest.raises(StaleDebtError) as excinfo:
            repo.record_payment(debt.id, "100", now=FIXED_NOW)

        assert excinfo.value.debt_id == debt.id
        assert repo.get_by_id(debt.id).current_balance == Decimal("800.00")
        assert repo.list_payments(debt.id) == []


def test_delete_removes_payments(repo, debt_row_factory, db_session):
    debt = debt_row_factory(balance="1000", rate="0.12", minimum_payment="100")
    repo.record_payment(debt.id, "100", now=FIXED_NOW)

    repo.delete(debt.id)

    assert repo.get_by_id(debt.id) is None
    assert db_session.exec(select(DebtPayment)).all() == []


def test_row_to_account_round_trip(debt_row_factory):
    row = debt_row_factory(name="Visa", balance="750", original="1000", rate="0.2")
    account = row.to_account()

    assert account.id == row.id
    assert account.original_balance == Decimal("1000.00")
    assert account.current_balance == Decimal("750.00")
    assert account.interest_rate == Decimal("0.2")

    unsaved = Debt(name="New", current_balance=Decimal("1"), original_balance=Decimal("1"))
    with pytest.raises(ValueError):
        unsaved.to_account()


def test_payment_row_to_record(repo, debt_row_factory):
    debt = debt_row_factory(balance="1000", rate="0.12", minimum_payment="100")
    result = repo.record_payment(debt.id, "100", now=FIXED_NOW)

    record = repo.list_payments(debt.id)[0].to_record()

    assert record == result.payment
