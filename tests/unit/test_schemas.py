"""Unit tests for request and response schemas."""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4
from pydantic import ValidationError

from bursary.ledger import FinancialSummary, get_account
from bursary.models.enums import Currency, ExpenseCategory, PaymentStatus
from bursary.schemas.expense import ExpenseCreate, ExpenseUpdate
from bursary.schemas.ledger import AccountResponse, FinancialSummaryResponse
from bursary.schemas.payment import PaymentCreate, PaymentUpdate
from bursary.schemas.student import StudentCreate, StudentUpdate


def test_payment_create_defaults():
    data = PaymentCreate(student_id=uuid4(), amount=Decimal("150"))
    assert data.currency is Currency.USD
    assert data.status is PaymentStatus.COMPLETED
    assert data.allocations is None
    assert isinstance(data.payment_date, date)


def test_payment_create_accepts_lowercase_currency():
    data = PaymentCreate(student_id=uuid4(), amount=10, currency="zig")
    assert data.currency is Currency.ZIG


def test_payment_create_rejects_unknown_currency():
    with pytest.raises(ValidationError):
        PaymentCreate(student_id=uuid4(), amount=10, currency="EUR")


@pytest.mark.parametrize("amount", [0, -5])
def test_payment_create_rejects_non_positive_amount(amount):
    with pytest.raises(ValidationError):
        PaymentCreate(student_id=uuid4(), amount=amount)


def test_payment_create_with_allocations():
    data = PaymentCreate(
        student_id=uuid4(),
        amount=100,
        account_id="406",
        allocations=[{"category": "tuition", "percentage": "100", "amount": "100"}],
    )
    assert data.allocations[0].amount == Decimal("100")


def test_payment_update_partial():
    data = PaymentUpdate(amount=Decimal("20"))
    assert data.model_dump(exclude_unset=True) == {"amount": Decimal("20")}


def test_student_create_defaults():
    data = StudentCreate(first_name="Tariro", last_name="Moyo")
    assert data.total_fees == Decimal("0")
    assert data.paid_amount == Decimal("0")


def test_student_create_rejects_negative_fees():
    with pytest.raises(ValidationError):
        StudentCreate(first_name="Tariro", last_name="Moyo", total_fees=-1)


def test_student_update_has_no_paid_amount():
    assert "paid_amount" not in StudentUpdate.model_fields


def test_expense_create_valid_allocation_target():
    data = ExpenseCreate(
        description="Chalk",
        amount=Decimal("40"),
        currency="ZAR",
        category=ExpenseCategory.SUPPLIES,
        account_id="406",
        allocation_category="tuition",
    )
    assert data.allocation_category == "tuition"


def test_expense_create_requires_account_for_category():
    with pytest.raises(ValidationError):
        ExpenseCreate(description="Chalk", amount=10, allocation_category="tuition")


def test_expense_create_rejects_unknown_category_for_account():
    with pytest.raises(ValidationError):
        ExpenseCreate(description="Chalk", amount=10, account_id="408", allocation_category="tuition")


def test_expense_create_rejects_unknown_account():
    with pytest.raises(ValidationError):
        ExpenseCreate(description="Chalk", amount=10, account_id="999", allocation_category="tuition")


def test_expense_update_partial():
    data = ExpenseUpdate(description="Diesel")
    assert data.amount is None


def test_account_response_lists_rules_in_order():
    response = AccountResponse.from_account(get_account("408"), {"406"})
    assert [r.category for r in response.allocation_rules] == [
        "salaries", "projects", "practical_equipment",
    ]
    assert response.legacy_ids == ["406"]
    assert response.currency is Currency.ZAR


def test_financial_summary_response_keys_by_currency_code():
    summary = FinancialSummary(total_revenue=Decimal("5"))
    summary.total_revenue_by_currency[Currency.ZIG] = Decimal("34")
    response = FinancialSummaryResponse.from_summary(summary, date(2024, 1, 15))
    assert response.total_revenue_by_currency["ZiG"] == Decimal("34")
    assert set(response.daily_revenue_by_currency) == {"USD", "ZAR", "ZiG"}
    assert response.reference_date == date(2024, 1, 15)


@pytest.mark.parametrize("schema", [PaymentCreate, PaymentUpdate])
def test_payment_amount_rejects_sub_cent_precision(schema):
    extra = {"student_id": uuid4()} if schema is PaymentCreate else {}
    with pytest.raises(ValidationError):
        schema(amount=Decimal("1.4874"), currency="ZAR", **extra)


def test_expense_amount_rejects_sub_cent_precision():
    with pytest.raises(ValidationError):
        ExpenseCreate(description="Chalk", amount=Decimal("12.005"))
    with pytest.raises(ValidationError):
        ExpenseUpdate(amount=Decimal("0.001"))


def test_student_fees_reject_sub_cent_precision():
    with pytest.raises(ValidationError):
        StudentCreate(first_name="Tariro", last_name="Moyo", total_fees=Decimal("100.555"))
