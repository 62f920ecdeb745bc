from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.config import settings
from bursary.core.exceptions import InvalidCurrency, ServiceError, UnknownAccount
from bursary.core.logging import get_logger
from bursary.ledger import (
    Account,
    AccountMetrics,
    ExpenseRecord,
    ExpenseSummary,
    FinancialSummary,
    PaymentRecord,
    StudentRecord,
    account_metrics,
    allocation_breakdown,
    available_balance,
    get_account,
    summarize,
    summarize_expenses,
)
from bursary.ledger.currency import parse_currency
from bursary.models.expense import Expense
from bursary.models.payment import Payment
from bursary.models.student import Student
from bursary.utils.time import get_utc_today

logger = get_logger(__name__)


class LedgerService:
    """
    Read-side figures for the dashboard and the receipt-book screens.

    Each call loads a fresh snapshot of the relevant rows and hands plain
    records to the ledger calculations; nothing is cached or stored.
    """

    @staticmethod
    async def load_payments(db: AsyncSession) -> List[PaymentRecord]:
        result = await db.execute(select(Payment).order_by(Payment.created_at))
        return [PaymentRecord.from_model(p) for p in result.scalars().all()]

    @staticmethod
    async def load_expenses(db: AsyncSession) -> List[ExpenseRecord]:
        result = await db.execute(select(Expense).order_by(Expense.created_at))
        return [ExpenseRecord.from_model(e) for e in result.scalars().all()]

    @staticmethod
    async def load_students(db: AsyncSession) -> List[StudentRecord]:
        result = await db.execute(select(Student))
        return [StudentRecord.from_model(s) for s in result.scalars().all()]

    @staticmethod
    def _account_or_404(account_id: str) -> Account:
        try:
            return get_account(account_id)
        except UnknownAccount as e:
            raise ServiceError(str(e), status.HTTP_404_NOT_FOUND)

    @staticmethod
    async def get_financial_summary(
        db: AsyncSession, reference_date: Optional[date] = None
    ) -> FinancialSummary:
        today = reference_date or get_utc_today()
        students = await LedgerService.load_students(db)
        payments = await LedgerService.load_payments(db)
        return summarize(
            students,
            payments,
            reference_date=today,
            recent_limit=settings.RECENT_PAYMENTS_LIMIT,
        )

    @staticmethod
    async def get_expense_summary(
        db: AsyncSession, reference_date: Optional[date] = None
    ) -> ExpenseSummary:
        expenses = await LedgerService.load_expenses(db)
        return summarize_expenses(expenses, reference_date or get_utc_today())

    @staticmethod
    async def get_account_overview(
        db: AsyncSession,
        account_id: str,
        reference_date: Optional[date] = None,
    ) -> Tuple[Account, AccountMetrics, Dict[str, Decimal]]:
        account = LedgerService._account_or_404(account_id)
        payments = await LedgerService.load_payments(db)
        expenses = await LedgerService.load_expenses(db)
        metrics = account_metrics(
            account.id, payments, expenses, reference_date or get_utc_today()
        )
        balances = allocation_breakdown(account.id, payments, expenses)
        return account, metrics, balances

    @staticmethod
    async def get_available_balance(
        db: AsyncSession,
        account_id: str,
        category: str,
        currency: Optional[str] = None,
    ) -> Tuple[str, Decimal]:
        """
        Available balance for one category, in ``currency`` or the account's own.

        Returns the currency code used alongside the amount.
        """
        account = LedgerService._account_or_404(account_id)
        try:
            code = parse_currency(currency) if currency else account.currency
        except InvalidCurrency as e:
            raise ServiceError(str(e), status.HTTP_422_UNPROCESSABLE_ENTITY)
        payments = await LedgerService.load_payments(db)
        expenses = await LedgerService.load_expenses(db)
        amount = available_balance(account.id, category, code, payments, expenses)
        return code.value, amount
