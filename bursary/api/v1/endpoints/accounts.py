from datetime import date
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.api import deps
from bursary.core.exceptions import ServiceError, UnknownAccount
from bursary.ledger import get_account, list_accounts
from bursary.ledger.accounts import legacy_aliases
from bursary.schemas.ledger import (
    AccountMetricsResponse,
    AccountOverviewResponse,
    AccountResponse,
    AllocationBalanceResponse,
)
from bursary.schemas.responses import SuccessResponse
from bursary.services.ledger_service import LedgerService

router = APIRouter()


@router.get("", response_model=SuccessResponse[list[AccountResponse]])
async def get_accounts() -> Any:
    """
    Receipt-book accounts with their currency, ceiling and allocation table.
    """
    return SuccessResponse(
        data=[AccountResponse.from_account(a, legacy_aliases(a.id)) for a in list_accounts()]
    )


@router.get("/{account_id}", response_model=SuccessResponse[AccountResponse])
async def get_account_detail(account_id: str) -> Any:
    try:
        account = get_account(account_id)
    except UnknownAccount as e:
        raise HTTPException(status_code=404, detail=str(e))
    return SuccessResponse(data=AccountResponse.from_account(account, legacy_aliases(account.id)))


@router.get("/{account_id}/overview", response_model=SuccessResponse[AccountOverviewResponse])
async def get_account_overview(
    account_id: str,
    day: Optional[date] = Depends(deps.reference_date),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Revenue, expenses and net for the account, plus what each allocation
    category still holds in the account's currency.
    """
    try:
        account, metrics, balances = await LedgerService.get_account_overview(db, account_id, day)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return SuccessResponse(
        data=AccountOverviewResponse(
            account=AccountResponse.from_account(account, legacy_aliases(account.id)),
            metrics=AccountMetricsResponse.from_metrics(metrics),
            allocation_balances=balances,
        )
    )


@router.get("/{account_id}/balance", response_model=SuccessResponse[AllocationBalanceResponse])
async def get_available_balance(
    account_id: str,
    category: str = Query(..., min_length=1),
    currency: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Available balance of one allocation category: allocated minus spent, never below zero.
    """
    try:
        code, amount = await LedgerService.get_available_balance(db, account_id, category, currency)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return SuccessResponse(
        data=AllocationBalanceResponse(
            account_id=account_id,
            category=category,
            currency=code,
            available_balance=amount,
        )
    )
