"""Unit tests for allocation generation and available balances."""

from datetime import date
from decimal import Decimal

import pytest

from bursary.core.exceptions import AllocationSumMismatch, UnknownAccount
from bursary.ledger import (
    Allocation,
    Currency,
    PaymentStatus,
    account_metrics,
    allocation_breakdown,
    allocation_mismatch,
    available_balance,
    generate_allocations,
    payment_matches_account,
)
from tests.conftest import make_expense, make_payment


def test_generate_allocations_tuition_book():
    allocations = generate_allocations(1000, "406")
    assert [(a.category, a.amount) for a in allocations] == [
        ("building", Decimal("300")),
        ("tuition", Decimal("200")),
        ("gpf", Decimal("100")),
        ("sports", Decimal("100")),
        ("ra", Decimal("100")),
        ("nash_bspz", Decimal("100")),
        ("textbooks", Decimal("50")),
        ("practical_fee", Decimal("50")),
    ]
    assert sum(a.amount for a in allocations) == Decimal("1000")


def test_generate_allocations_keeps_percentages():
    allocations = generate_allocations(Decimal("300"), "408")
    assert [(a.category, a.percentage, a.amount) for a in allocations] == [
        ("salaries", Decimal("50"), Decimal("150")),
        ("projects", Decimal("30"), Decimal("90")),
        ("practical_equipment", Decimal("20"), Decimal("60")),
    ]


def test_generate_allocations_without_table():
    assert generate_allocations(500, "401") == []
    assert generate_allocations(500, "999") == []
    assert generate_allocations(500, None) == []


def test_generate_allocations_zero_amount():
    allocations = generate_allocations(0, "406")
    assert len(allocations) == 8
    assert all(a.amount == 0 for a in allocations)


def test_available_balance_computes_share_for_old_payments():
    payments = [make_payment(1000, Currency.ZAR, account_id="406")]
    expenses = [make_expense(150, Currency.ZAR, account_id="406", allocation_category="tuition")]
    assert available_balance("406", "tuition", "ZAR", payments, expenses) == Decimal("50")


def test_available_balance_uses_stored_allocations_verbatim():
    stored = [
        Allocation("building", Decimal("30"), Decimal("10")),
        Allocation("tuition", Decimal("20"), Decimal("90")),
    ]
    payments = [make_payment(100, Currency.ZAR, account_id="406", allocations=stored)]
    assert available_balance("406", "tuition", "ZAR", payments, []) == Decimal("90")
    # Category absent from the stored split contributes nothing
    assert available_balance("406", "sports", "ZAR", payments, []) == Decimal("0")


def test_available_balance_floors_at_zero():
    payments = [make_payment(100, Currency.ZAR, account_id="406")]
    expenses = [make_expense(500, Currency.ZAR, account_id="406", allocation_category="tuition")]
    assert available_balance("406", "tuition", "ZAR", payments, expenses) == Decimal("0")


def test_available_balance_without_payments():
    assert available_balance("406", "tuition", "ZAR", [], []) == Decimal("0")


def test_available_balance_ignores_other_currencies_and_statuses():
    payments = [
        make_payment(1000, Currency.ZAR, account_id="406"),
        make_payment(1000, Currency.USD, account_id="406"),
        make_payment(1000, Currency.ZAR, account_id="406", status=PaymentStatus.PENDING),
        make_payment(1000, Currency.ZAR, account_id="406", status=PaymentStatus.FAILED),
    ]
    assert available_balance("406", "tuition", "ZAR", payments, []) == Decimal("200")


def test_available_balance_matches_legacy_alias():
    # Payments filed under 405 before the renumbering belong to 406
    payments = [make_payment(500, Currency.ZAR, account_id="405")]
    assert available_balance("406", "building", "ZAR", payments, []) == Decimal("150")


def test_available_balance_matches_description_keyword():
    payments = [make_payment(100, Currency.ZAR, description="Term 1 TUITION fees")]
    assert available_balance("406", "tuition", "ZAR", payments, []) == Decimal("20")


def test_available_balance_unrelated_payment_does_not_count():
    payments = [make_payment(100, Currency.ZAR, account_id="402", description="uniform")]
    assert available_balance("406", "tuition", "ZAR", payments, []) == Decimal("0")


def test_available_balance_expenses_need_exact_account():
    payments = [make_payment(1000, Currency.ZAR, account_id="406")]
    expenses = [
        # Legacy id does not apply to expenses
        make_expense(100, Currency.ZAR, account_id="405", allocation_category="tuition"),
        make_expense(100, Currency.ZAR, account_id="406", allocation_category="building"),
        make_expense(100, Currency.ZAR, account_id="406"),
    ]
    assert available_balance("406", "tuition", "ZAR", payments, expenses) == Decimal("200")


def test_available_balance_unknown_category_is_zero():
    payments = [make_payment(1000, Currency.ZAR, account_id="406")]
    assert available_balance("406", "canteen", "ZAR", payments, []) == Decimal("0")


def test_available_balance_negative_reversal_reduces_category():
    original = generate_allocations(Decimal("100"), "406")
    reversal = [Allocation(a.category, a.percentage, -a.amount) for a in original]
    payments = [
        make_payment(100, Currency.ZAR, account_id="406", allocations=original),
        make_payment(-100, Currency.ZAR, account_id="406", allocations=reversal),
    ]
    assert available_balance("406", "tuition", "ZAR", payments, []) == Decimal("0")


def test_payment_matches_account():
    assert payment_matches_account(make_payment(10, account_id="406"), "406")
    assert payment_matches_account(make_payment(10, account_id="406"), "408")
    assert not payment_matches_account(make_payment(10, account_id="401"), "406")
    assert payment_matches_account(make_payment(10, description="School project levy"), "408")
    assert not payment_matches_account(make_payment(10), "401")


def test_allocation_breakdown_in_table_order():
    payments = [make_payment(300, Currency.ZAR, account_id="408")]
    expenses = [make_expense(40, Currency.ZAR, account_id="408", allocation_category="salaries")]
    breakdown = allocation_breakdown("408", payments, expenses)
    assert list(breakdown) == ["salaries", "projects", "practical_equipment"]
    assert breakdown == {
        "salaries": Decimal("110"),
        "projects": Decimal("90"),
        "practical_equipment": Decimal("60"),
    }


def test_allocation_breakdown_unknown_account():
    with pytest.raises(UnknownAccount):
        allocation_breakdown("999", [], [])


def test_allocation_mismatch_detects_drift():
    allocations = [Allocation("building", Decimal("50"), Decimal("40"))]
    mismatch = allocation_mismatch(Decimal("100"), allocations, payment_id="p-1")
    assert isinstance(mismatch, AllocationSumMismatch)
    assert isinstance(mismatch, UserWarning)
    assert mismatch.expected == Decimal("100")
    assert mismatch.actual == Decimal("40")


def test_allocation_mismatch_accepts_generated_split():
    allocations = generate_allocations(Decimal("333.33"), "406")
    assert allocation_mismatch(Decimal("333.33"), allocations) is None


def test_allocation_mismatch_ignores_missing_allocations():
    assert allocation_mismatch(Decimal("100"), None) is None
    assert allocation_mismatch(Decimal("100"), []) is None


def test_payment_matches_account_by_name_in_description():
    named = make_payment(10, Currency.ZIG, description="Paid into Account 402 at the bursary")
    assert payment_matches_account(named, "402")
    # Books without a keyword need the currency to agree as well
    assert not payment_matches_account(
        make_payment(10, Currency.USD, description="Paid into Account 402"), "402"
    )
    assert payment_matches_account(
        make_payment(10, Currency.USD, description="Deposit, USD SiG Account"), "401"
    )
    assert payment_matches_account(
        make_payment(10, Currency.ZAR, description="Filed in Projects Receipt Book"), "408"
    )


def test_account_metrics_counts_description_only_payments():
    payments = [
        make_payment(25, Currency.ZIG, description="Account 402 levy", payment_date=date(2024, 1, 15)),
        make_payment(40, Currency.ZAR, description="Account 402 levy", payment_date=date(2024, 1, 15)),
    ]
    metrics = account_metrics("402", payments, [], reference_date=date(2024, 1, 15))
    assert metrics.total_revenue == Decimal("25")
    assert metrics.total_transactions == 1
