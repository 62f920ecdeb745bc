"""Unit tests for dashboard and receipt-book aggregates."""

from datetime import date
from decimal import Decimal

from bursary.ledger import (
    Currency,
    PaymentStatus,
    StudentStatus,
    account_metrics,
    defaulters,
    summarize,
    summarize_expenses,
)
from bursary.ledger.summary import recent_payments
from tests.conftest import make_expense, make_payment, make_student

REFERENCE = date(2024, 1, 15)


def test_daily_revenue_uses_reference_date():
    payments = [
        make_payment(50, payment_date=date(2024, 1, 15)),
        make_payment(999, payment_date=date(2024, 1, 16)),
    ]
    summary = summarize([], payments, reference_date=REFERENCE)
    assert summary.daily_revenue == Decimal("50")
    assert summary.daily_revenue_by_currency[Currency.USD] == Decimal("50")


def test_windows():
    payments = [
        make_payment(10, payment_date=date(2024, 1, 15)),
        make_payment(20, payment_date=date(2024, 1, 2)),
        make_payment(40, payment_date=date(2023, 12, 31)),
        make_payment(80, payment_date=date(2023, 1, 15)),
    ]
    summary = summarize([], payments, reference_date=REFERENCE)
    assert summary.total_revenue == Decimal("150")
    assert summary.monthly_revenue == Decimal("30")
    assert summary.daily_revenue == Decimal("10")


def test_only_completed_payments_count():
    payments = [
        make_payment(100),
        make_payment(200, status=PaymentStatus.PENDING),
        make_payment(400, status=PaymentStatus.FAILED),
    ]
    summary = summarize([], payments, reference_date=REFERENCE)
    assert summary.total_revenue == Decimal("100")
    assert len(summary.recent_payments) == 1


def test_per_currency_totals_are_not_mixed():
    payments = [
        make_payment(100, Currency.USD),
        make_payment(350, Currency.ZAR),
        make_payment(68, Currency.ZIG),
    ]
    summary = summarize([], payments, reference_date=REFERENCE)
    assert summary.total_revenue_by_currency == {
        Currency.USD: Decimal("100"),
        Currency.ZAR: Decimal("350"),
        Currency.ZIG: Decimal("68"),
    }
    # 100 USD + 20 USD + 2 USD
    assert summary.total_revenue == Decimal("122")


def test_breakdown_always_has_every_currency():
    summary = summarize([], [], reference_date=REFERENCE)
    assert set(summary.monthly_revenue_by_currency) == set(Currency)
    assert all(v == 0 for v in summary.daily_revenue_by_currency.values())


def test_student_figures():
    students = [
        make_student(1000, 400),
        make_student(500, 500),
        make_student(300, 0, status=StudentStatus.GRADUATED),
    ]
    summary = summarize(students, [], reference_date=REFERENCE)
    assert summary.outstanding_amount == Decimal("900")
    assert summary.total_students == 3
    assert summary.active_students == 2


def test_recent_payments_newest_first_and_limited():
    payments = [make_payment(i, payment_date=date(2024, 1, i)) for i in range(1, 9)]
    recent = recent_payments(payments, limit=5)
    assert [p.payment_date.day for p in recent] == [8, 7, 6, 5, 4]


def test_recent_payments_ties_keep_input_order():
    first = make_payment(1, payment_date=REFERENCE)
    second = make_payment(2, payment_date=REFERENCE)
    older = make_payment(3, payment_date=date(2024, 1, 1))
    recent = recent_payments([older, first, second])
    assert recent == [first, second, older]


def test_summarize_respects_recent_limit():
    payments = [make_payment(1) for _ in range(10)]
    assert len(summarize([], payments, reference_date=REFERENCE, recent_limit=3).recent_payments) == 3


def test_expense_summary():
    expenses = [
        make_expense(10, expense_date=REFERENCE, category="Food"),
        make_expense(15, expense_date=date(2023, 11, 1), category="Food"),
        make_expense(100, Currency.ZAR, expense_date=REFERENCE, category="Utilities"),
    ]
    summary = summarize_expenses(expenses, REFERENCE)
    assert summary.category_summary == {"Food": Decimal("25"), "Utilities": Decimal("100")}
    assert summary.total_expenses_by_currency[Currency.USD] == Decimal("25")
    assert summary.monthly_expenses_by_currency[Currency.USD] == Decimal("10")
    assert summary.monthly_expenses_by_currency[Currency.ZAR] == Decimal("100")


def test_account_metrics():
    alice, bob = make_student(0), make_student(0)
    payments = [
        make_payment(100, Currency.ZAR, payment_date=REFERENCE, account_id="406", student_id=alice.id),
        make_payment(200, Currency.ZAR, payment_date=date(2024, 1, 3), account_id="406", student_id=alice.id),
        make_payment(300, Currency.ZAR, payment_date=date(2023, 6, 1), account_id="406", student_id=bob.id),
        make_payment(999, Currency.ZAR, payment_date=REFERENCE, account_id="402"),
        make_payment(999, Currency.ZAR, payment_date=REFERENCE, account_id="406", status=PaymentStatus.PENDING),
    ]
    expenses = [
        make_expense(50, Currency.ZAR, expense_date=REFERENCE, account_id="406"),
        make_expense(25, Currency.ZAR, expense_date=date(2023, 6, 1), account_id="406"),
        make_expense(999, Currency.ZAR, expense_date=REFERENCE, account_id="408"),
    ]
    metrics = account_metrics("406", payments, expenses, REFERENCE)

    assert metrics.total_revenue == Decimal("600")
    assert metrics.monthly_revenue == Decimal("300")
    assert metrics.daily_revenue == Decimal("100")
    assert metrics.total_expenses == Decimal("75")
    assert metrics.monthly_expenses == Decimal("50")
    assert metrics.daily_expenses == Decimal("50")
    assert metrics.total_amount == Decimal("525")
    assert metrics.daily_amount == Decimal("50")
    assert metrics.total_transactions == 3
    assert metrics.monthly_transactions == 2
    assert metrics.daily_transactions == 1
    assert metrics.unique_students == 2
    assert metrics.average_payment == Decimal("200")


def test_account_metrics_empty():
    metrics = account_metrics("401", [], [], REFERENCE)
    assert metrics.total_transactions == 0
    assert metrics.average_payment == Decimal("0")


def test_defaulters_largest_balance_first():
    small = make_student(100, 90)
    large = make_student(1000, 0)
    settled = make_student(200, 200)
    assert defaulters([small, settled, large]) == [large, small]
