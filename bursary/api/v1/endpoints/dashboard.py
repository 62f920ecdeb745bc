from datetime import date
from typing import Any, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.api import deps
from bursary.schemas.ledger import ExpenseSummaryResponse, FinancialSummaryResponse
from bursary.schemas.responses import SuccessResponse
from bursary.services.ledger_service import LedgerService
from bursary.utils.time import get_utc_today

router = APIRouter()


@router.get("/summary", response_model=SuccessResponse[FinancialSummaryResponse])
async def get_financial_summary(
    day: Optional[date] = Depends(deps.reference_date),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Revenue totals (USD-equivalent and per currency), outstanding fees,
    student counts and the latest payments.
    """
    reference = day or get_utc_today()
    summary = await LedgerService.get_financial_summary(db, reference)
    return SuccessResponse(data=FinancialSummaryResponse.from_summary(summary, reference))


@router.get("/expenses", response_model=SuccessResponse[ExpenseSummaryResponse])
async def get_expense_summary(
    day: Optional[date] = Depends(deps.reference_date),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    summary = await LedgerService.get_expense_summary(db, day)
    return SuccessResponse(data=ExpenseSummaryResponse.from_summary(summary))
