"""Dashboard figures folded from payment, expense and student snapshots.

Nothing here is persisted; every figure is recomputed from source records on
read. The reference date decides what "today" and "this month" mean, so a
dashboard can be viewed as of any historical day.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from bursary.ledger.allocation import payment_matches_account
from bursary.ledger.currency import Currency, to_usd
from bursary.ledger.records import (
    ExpenseRecord,
    PaymentRecord,
    StudentRecord,
    StudentStatus,
    completed,
)

ZERO = Decimal("0")
RECENT_PAYMENTS = 5


def currency_breakdown() -> Dict[Currency, Decimal]:
    return {currency: ZERO for currency in Currency}


def same_day(value: date, reference: date) -> bool:
    return value == reference


def same_month(value: date, reference: date) -> bool:
    return value.year == reference.year and value.month == reference.month


@dataclass
class FinancialSummary:
    total_revenue: Decimal = ZERO
    monthly_revenue: Decimal = ZERO
    daily_revenue: Decimal = ZERO
    outstanding_amount: Decimal = ZERO
    total_students: int = 0
    active_students: int = 0
    recent_payments: List[PaymentRecord] = field(default_factory=list)
    total_revenue_by_currency: Dict[Currency, Decimal] = field(default_factory=currency_breakdown)
    monthly_revenue_by_currency: Dict[Currency, Decimal] = field(default_factory=currency_breakdown)
    daily_revenue_by_currency: Dict[Currency, Decimal] = field(default_factory=currency_breakdown)


@dataclass
class ExpenseSummary:
    category_summary: Dict[str, Decimal] = field(default_factory=dict)
    total_expenses_by_currency: Dict[Currency, Decimal] = field(default_factory=currency_breakdown)
    monthly_expenses_by_currency: Dict[Currency, Decimal] = field(default_factory=currency_breakdown)


@dataclass
class AccountMetrics:
    """Receipt-book view: revenue, expenses and net per window, in account currency."""
    account_id: str
    total_revenue: Decimal = ZERO
    monthly_revenue: Decimal = ZERO
    daily_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    monthly_expenses: Decimal = ZERO
    daily_expenses: Decimal = ZERO
    total_transactions: int = 0
    monthly_transactions: int = 0
    daily_transactions: int = 0
    unique_students: int = 0
    average_payment: Decimal = ZERO

    @property
    def total_amount(self) -> Decimal:
        return self.total_revenue - self.total_expenses

    @property
    def monthly_amount(self) -> Decimal:
        return self.monthly_revenue - self.monthly_expenses

    @property
    def daily_amount(self) -> Decimal:
        return self.daily_revenue - self.daily_expenses


def recent_payments(payments: Iterable[PaymentRecord], limit: int = RECENT_PAYMENTS) -> List[PaymentRecord]:
    """Most recent completed payments, newest first; equal dates keep input order."""
    # sorted() is stable under reverse=True, so ties stay in insertion order
    ordered = sorted(completed(payments), key=lambda p: p.payment_date, reverse=True)
    return ordered[:limit]


def summarize(
    students: Sequence[StudentRecord],
    payments: Sequence[PaymentRecord],
    reference_date: Optional[date] = None,
    recent_limit: int = RECENT_PAYMENTS,
) -> FinancialSummary:
    """
    Fold payments and students into the dashboard summary.

    Headline revenue figures are USD-equivalent; the per-currency maps keep
    each currency separate.
    """
    today = reference_date or date.today()
    summary = FinancialSummary()

    for payment in completed(payments):
        usd = to_usd(payment.amount, payment.currency)
        summary.total_revenue += usd
        summary.total_revenue_by_currency[payment.currency] += payment.amount
        if same_month(payment.payment_date, today):
            summary.monthly_revenue += usd
            summary.monthly_revenue_by_currency[payment.currency] += payment.amount
        if same_day(payment.payment_date, today):
            summary.daily_revenue += usd
            summary.daily_revenue_by_currency[payment.currency] += payment.amount

    summary.outstanding_amount = sum((s.outstanding_balance for s in students), ZERO)
    summary.total_students = len(students)
    summary.active_students = sum(1 for s in students if s.status == StudentStatus.ACTIVE)
    summary.recent_payments = recent_payments(payments, recent_limit)
    return summary


def summarize_expenses(
    expenses: Iterable[ExpenseRecord],
    reference_date: Optional[date] = None,
) -> ExpenseSummary:
    today = reference_date or date.today()
    summary = ExpenseSummary()
    for expense in expenses:
        summary.category_summary[expense.category] = (
            summary.category_summary.get(expense.category, ZERO) + expense.amount
        )
        summary.total_expenses_by_currency[expense.currency] += expense.amount
        if same_month(expense.date, today):
            summary.monthly_expenses_by_currency[expense.currency] += expense.amount
    return summary


def account_metrics(
    account_id: str,
    payments: Iterable[PaymentRecord],
    expenses: Iterable[ExpenseRecord],
    reference_date: Optional[date] = None,
) -> AccountMetrics:
    today = reference_date or date.today()
    metrics = AccountMetrics(account_id=account_id)
    students = set()

    for payment in completed(payments):
        if not payment_matches_account(payment, account_id):
            continue
        metrics.total_revenue += payment.amount
        metrics.total_transactions += 1
        students.add(payment.student_id)
        if same_month(payment.payment_date, today):
            metrics.monthly_revenue += payment.amount
            metrics.monthly_transactions += 1
        if same_day(payment.payment_date, today):
            metrics.daily_revenue += payment.amount
            metrics.daily_transactions += 1

    for expense in expenses:
        if expense.account_id != account_id:
            continue
        metrics.total_expenses += expense.amount
        if same_month(expense.date, today):
            metrics.monthly_expenses += expense.amount
        if same_day(expense.date, today):
            metrics.daily_expenses += expense.amount

    metrics.unique_students = len(students)
    if metrics.total_transactions:
        metrics.average_payment = metrics.total_revenue / metrics.total_transactions
    return metrics


def defaulters(students: Iterable[StudentRecord]) -> List[StudentRecord]:
    """Students who still owe money, largest balance first."""
    owing = [s for s in students if s.outstanding_balance > ZERO]
    return sorted(owing, key=lambda s: s.outstanding_balance, reverse=True)
