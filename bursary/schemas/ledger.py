"""Response schemas for accounts, allocation balances and dashboard figures"""

from typing import Dict, List, Optional
from pydantic import BaseModel
from uuid import UUID
from decimal import Decimal
from datetime import date

from bursary.ledger import Account, AccountMetrics, ExpenseSummary, FinancialSummary
from bursary.models.enums import Currency


class AllocationRule(BaseModel):
    category: str
    label: str
    percentage: Decimal


class AccountResponse(BaseModel):
    id: str
    name: str
    currency: Currency
    description: str
    ceiling: Optional[Decimal] = None
    legacy_ids: List[str] = []
    allocation_rules: List[AllocationRule] = []

    @classmethod
    def from_account(cls, account: Account, legacy_ids=()) -> "AccountResponse":
        return cls(
            id=account.id,
            name=account.name,
            currency=account.currency,
            description=account.description,
            ceiling=account.ceiling,
            legacy_ids=sorted(legacy_ids),
            allocation_rules=[
                AllocationRule(category=c, label=account.label_for(c), percentage=p)
                for c, p in account.percentages.items()
            ],
        )


class AllocationBalanceResponse(BaseModel):
    account_id: str
    category: str
    currency: Currency
    available_balance: Decimal


class AccountMetricsResponse(BaseModel):
    total_revenue: Decimal
    monthly_revenue: Decimal
    daily_revenue: Decimal
    total_expenses: Decimal
    monthly_expenses: Decimal
    daily_expenses: Decimal
    total_amount: Decimal
    monthly_amount: Decimal
    daily_amount: Decimal
    total_transactions: int
    monthly_transactions: int
    daily_transactions: int
    unique_students: int
    average_payment: Decimal

    @classmethod
    def from_metrics(cls, metrics: AccountMetrics) -> "AccountMetricsResponse":
        return cls(
            total_revenue=metrics.total_revenue,
            monthly_revenue=metrics.monthly_revenue,
            daily_revenue=metrics.daily_revenue,
            total_expenses=metrics.total_expenses,
            monthly_expenses=metrics.monthly_expenses,
            daily_expenses=metrics.daily_expenses,
            total_amount=metrics.total_amount,
            monthly_amount=metrics.monthly_amount,
            daily_amount=metrics.daily_amount,
            total_transactions=metrics.total_transactions,
            monthly_transactions=metrics.monthly_transactions,
            daily_transactions=metrics.daily_transactions,
            unique_students=metrics.unique_students,
            average_payment=metrics.average_payment,
        )


class AccountOverviewResponse(BaseModel):
    account: AccountResponse
    metrics: AccountMetricsResponse
    allocation_balances: Dict[str, Decimal]


class RecentPayment(BaseModel):
    id: Optional[UUID] = None
    student_id: UUID
    student_name: str
    amount: Decimal
    currency: Currency
    payment_date: date
    account_id: Optional[str] = None


class FinancialSummaryResponse(BaseModel):
    """Dashboard summary. Headline revenue is USD-equivalent."""
    reference_date: date
    total_revenue: Decimal
    monthly_revenue: Decimal
    daily_revenue: Decimal
    outstanding_amount: Decimal
    total_students: int
    active_students: int
    recent_payments: List[RecentPayment]
    total_revenue_by_currency: Dict[str, Decimal]
    monthly_revenue_by_currency: Dict[str, Decimal]
    daily_revenue_by_currency: Dict[str, Decimal]

    @classmethod
    def from_summary(cls, summary: FinancialSummary, reference_date) -> "FinancialSummaryResponse":
        return cls(
            reference_date=reference_date,
            total_revenue=summary.total_revenue,
            monthly_revenue=summary.monthly_revenue,
            daily_revenue=summary.daily_revenue,
            outstanding_amount=summary.outstanding_amount,
            total_students=summary.total_students,
            active_students=summary.active_students,
            recent_payments=[
                RecentPayment(
                    id=p.id,
                    student_id=p.student_id,
                    student_name=p.student_name,
                    amount=p.amount,
                    currency=p.currency,
                    payment_date=p.payment_date,
                    account_id=p.account_id,
                )
                for p in summary.recent_payments
            ],
            total_revenue_by_currency=_by_code(summary.total_revenue_by_currency),
            monthly_revenue_by_currency=_by_code(summary.monthly_revenue_by_currency),
            daily_revenue_by_currency=_by_code(summary.daily_revenue_by_currency),
        )


class ExpenseSummaryResponse(BaseModel):
    category_summary: Dict[str, Decimal]
    total_expenses_by_currency: Dict[str, Decimal]
    monthly_expenses_by_currency: Dict[str, Decimal]

    @classmethod
    def from_summary(cls, summary: ExpenseSummary) -> "ExpenseSummaryResponse":
        return cls(
            category_summary=dict(summary.category_summary),
            total_expenses_by_currency=_by_code(summary.total_expenses_by_currency),
            monthly_expenses_by_currency=_by_code(summary.monthly_expenses_by_currency),
        )


def _by_code(breakdown: Dict[Currency, Decimal]) -> Dict[str, Decimal]:
    return {currency.value: amount for currency, amount in breakdown.items()}
