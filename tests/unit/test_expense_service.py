"""Unit tests for ExpenseService allocation checks."""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.config import settings
from bursary.core.exceptions import ServiceError
from bursary.models.enums import Currency, ExpenseMethod
from bursary.models.expense import Expense
from bursary.schemas.expense import ExpenseCreate, ExpenseUpdate
from bursary.services.expense_service import ExpenseService


def _empty_db() -> AsyncMock:
    db = AsyncMock(spec=AsyncSession)
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    db.execute.return_value = result
    return db


def _drawn_expense(amount="40") -> ExpenseCreate:
    return ExpenseCreate(
        description="Lab reagents",
        amount=Decimal(amount),
        currency="ZAR",
        account_id="406",
        allocation_category="practical_fee",
    )


@pytest.mark.asyncio
async def test_overspend_is_logged_by_default(monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_ALLOCATION_BALANCE", False)
    db = _empty_db()

    expense = await ExpenseService.create_expense(db, _drawn_expense())

    assert expense.category == "Other"
    assert db.add.called
    assert db.commit.called


@pytest.mark.asyncio
async def test_overspend_is_rejected_when_enforced(monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_ALLOCATION_BALANCE", True)
    db = _empty_db()

    with pytest.raises(ServiceError) as exc_info:
        await ExpenseService.create_expense(db, _drawn_expense())

    assert exc_info.value.status_code == 400
    assert not db.add.called


@pytest.mark.asyncio
async def test_undrawn_expense_skips_balance_lookup(monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_ALLOCATION_BALANCE", True)
    db = _empty_db()

    await ExpenseService.create_expense(db, ExpenseCreate(description="Fuel", amount=Decimal("99")))

    assert not db.execute.called
    assert db.commit.called


@pytest.mark.asyncio
async def test_update_ignores_null_required_fields(monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_ALLOCATION_BALANCE", False)
    db = _empty_db()
    existing = Expense(
        description="Textbook order",
        amount=Decimal("40"),
        currency=Currency.ZAR,
        category="Supplies",
        date=date(2024, 2, 1),
        payment_method=ExpenseMethod.CASH,
        account_id="406",
        allocation_category="tuition",
    )

    with patch(
        "bursary.services.expense_service.ExpenseService.get_expense_by_id", new_callable=AsyncMock
    ) as mock_get:
        mock_get.return_value = existing
        expense = await ExpenseService.update_expense(
            db, uuid4(), ExpenseUpdate(amount=None, description=None, date=None, allocation_category=None)
        )

    assert expense.amount == Decimal("40")
    assert expense.description == "Textbook order"
    assert expense.date == date(2024, 2, 1)
    # Optional columns can still be cleared
    assert expense.allocation_category is None
    assert db.commit.called
