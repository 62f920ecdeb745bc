from datetime import date
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from bursary.api import deps
from bursary.core.exceptions import ServiceError
from bursary.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from bursary.schemas.responses import PaginatedResponse, SuccessResponse
from bursary.services.expense_service import ExpenseService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ExpenseResponse])
async def list_expenses(
    category: Optional[str] = None,
    account_id: Optional[str] = Query(None, max_length=10),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    paging: dict = Depends(deps.pagination),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    expenses = await ExpenseService.list_expenses(
        db,
        category=category,
        account_id=account_id,
        start_date=start_date,
        end_date=end_date,
    )
    page = deps.paginate(expenses, paging["page"], paging["limit"])
    return PaginatedResponse(
        data=[ExpenseResponse.model_validate(e) for e in page["data"]],
        meta=page["meta"],
    )


@router.post("", response_model=SuccessResponse[ExpenseResponse], status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Record an expense. Drawing on an allocation category needs both
    account_id and allocation_category.
    """
    try:
        expense = await ExpenseService.create_expense(db, expense_in)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return SuccessResponse(data=ExpenseResponse.model_validate(expense), message="Expense recorded successfully")


@router.get("/{expense_id}", response_model=SuccessResponse[ExpenseResponse])
async def get_expense(expense_id: UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    expense = await ExpenseService.get_expense_by_id(db, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return SuccessResponse(data=ExpenseResponse.model_validate(expense))


@router.put("/{expense_id}", response_model=SuccessResponse[ExpenseResponse])
async def update_expense(
    expense_id: UUID,
    expense_in: ExpenseUpdate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    try:
        expense = await ExpenseService.update_expense(db, expense_id, expense_in)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return SuccessResponse(data=ExpenseResponse.model_validate(expense), message="Expense updated successfully")


@router.delete("/{expense_id}", response_model=SuccessResponse)
async def delete_expense(expense_id: UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    deleted = await ExpenseService.delete_expense(db, expense_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Expense not found")
    return SuccessResponse(data=None, message="Expense deleted successfully")
