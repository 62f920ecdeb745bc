from datetime import date
from typing import List, Optional
from uuid import UUID
from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.config import settings
from bursary.core.exceptions import ServiceError
from bursary.core.logging import get_logger
from bursary.ledger import ExpenseRecord, PaymentRecord, available_balance
from bursary.models.expense import Expense
from bursary.models.payment import Payment
from bursary.schemas.expense import ExpenseCreate, ExpenseUpdate, validate_allocation_target

logger = get_logger(__name__)

REQUIRED_FIELDS = ("description", "amount", "currency", "category", "date", "payment_method")


class ExpenseService:
    """Service layer for Expense operations"""

    @staticmethod
    async def get_expense_by_id(db: AsyncSession, expense_id: UUID) -> Optional[Expense]:
        result = await db.execute(select(Expense).where(Expense.id == expense_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_expenses(
        db: AsyncSession,
        category: Optional[str] = None,
        account_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Expense]:
        stmt = select(Expense)
        if category:
            stmt = stmt.where(Expense.category == category)
        if account_id:
            stmt = stmt.where(Expense.account_id == account_id)
        if start_date:
            stmt = stmt.where(Expense.date >= start_date)
        if end_date:
            stmt = stmt.where(Expense.date <= end_date)
        stmt = stmt.order_by(Expense.date.desc(), Expense.created_at.desc())
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def _check_funds(
        db: AsyncSession,
        expense: Expense,
        exclude_id: Optional[UUID] = None,
    ) -> None:
        """
        Compare a drawn expense against what its allocation category still holds.

        Overspending is logged; it is refused only when
        ENFORCE_ALLOCATION_BALANCE is on.
        """
        if not expense.account_id or not expense.allocation_category:
            return

        payments = (await db.execute(select(Payment))).scalars().all()
        stmt = select(Expense).where(
            Expense.account_id == expense.account_id,
            Expense.allocation_category == expense.allocation_category,
        )
        if exclude_id is not None:
            stmt = stmt.where(Expense.id != exclude_id)
        expenses = (await db.execute(stmt)).scalars().all()

        available = available_balance(
            expense.account_id,
            expense.allocation_category,
            expense.currency,
            [PaymentRecord.from_model(p) for p in payments],
            [ExpenseRecord.from_model(e) for e in expenses],
        )
        if expense.amount <= available:
            return

        message = (
            f"Expense of {expense.amount} exceeds available balance {available} "
            f"for {expense.account_id}/{expense.allocation_category}"
        )
        if settings.ENFORCE_ALLOCATION_BALANCE:
            raise ServiceError(message, status.HTTP_400_BAD_REQUEST)
        logger.warning(
            message,
            extra={
                "account_id": expense.account_id,
                "allocation_category": expense.allocation_category,
            },
        )

    @staticmethod
    async def create_expense(db: AsyncSession, expense_in: ExpenseCreate) -> Expense:
        data = expense_in.model_dump()
        data["category"] = expense_in.category.value
        expense = Expense(**data)
        await ExpenseService._check_funds(db, expense)
        db.add(expense)
        await db.commit()
        await db.refresh(expense)
        logger.info(
            "Expense recorded",
            extra={"expense_id": str(expense.id), "account_id": expense.account_id},
        )
        return expense

    @staticmethod
    async def update_expense(
        db: AsyncSession, expense_id: UUID, expense_in: ExpenseUpdate
    ) -> Optional[Expense]:
        expense = await ExpenseService.get_expense_by_id(db, expense_id)
        if not expense:
            return None
        changes = expense_in.model_dump(exclude_unset=True)
        # Explicit nulls only clear the optional columns
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]
        if changes.get("category") is not None:
            changes["category"] = changes["category"].value
        for field, value in changes.items():
            setattr(expense, field, value)
        try:
            validate_allocation_target(expense.account_id, expense.allocation_category)
        except ValueError as e:
            raise ServiceError(str(e), status.HTTP_422_UNPROCESSABLE_ENTITY)
        await ExpenseService._check_funds(db, expense, exclude_id=expense.id)
        await db.commit()
        await db.refresh(expense)
        return expense

    @staticmethod
    async def delete_expense(db: AsyncSession, expense_id: UUID) -> bool:
        expense = await ExpenseService.get_expense_by_id(db, expense_id)
        if not expense:
            return False
        await db.delete(expense)
        await db.commit()
        return True
