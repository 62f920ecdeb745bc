from datetime import date
from typing import Any, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from bursary.api import deps
from bursary.core.exceptions import ServiceError
from bursary.schemas.payment import (
    BalanceUpdateResponse,
    PaymentCreate,
    PaymentResponse,
    PaymentReverseRequest,
    PaymentUpdate,
    PaymentWriteResponse,
)
from bursary.schemas.responses import PaginatedResponse, SuccessResponse
from bursary.services.payment_service import PaymentService
from bursary.utils.time import get_utc_today

router = APIRouter()


def _write_response(payment, reconciliations) -> PaymentWriteResponse:
    return PaymentWriteResponse(
        payment=PaymentResponse.model_validate(payment) if payment is not None else None,
        balance_updates=[BalanceUpdateResponse.from_reconciliation(r) for r in reconciliations],
    )


@router.get("", response_model=PaginatedResponse[PaymentResponse])
async def list_payments(
    student_id: Optional[UUID] = None,
    payment_date: Optional[date] = None,
    account_id: Optional[str] = Query(None, max_length=10),
    paging: dict = Depends(deps.pagination),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    List payments, most recent payment date first.
    """
    payments = await PaymentService.list_payments(
        db, student_id=student_id, payment_date=payment_date, account_id=account_id
    )
    page = deps.paginate(payments, paging["page"], paging["limit"])
    return PaginatedResponse(
        data=[PaymentResponse.model_validate(p) for p in page["data"]],
        meta=page["meta"],
    )


@router.get("/daily/today", response_model=SuccessResponse[list[PaymentResponse]])
async def get_daily_payments(
    day: Optional[date] = Depends(deps.reference_date),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Payments dated on the reference day (today by default).
    """
    payments = await PaymentService.list_payments(db, payment_date=day or get_utc_today())
    return SuccessResponse(data=[PaymentResponse.model_validate(p) for p in payments])


@router.get("/student/{student_id}", response_model=SuccessResponse[list[PaymentResponse]])
async def get_payments_by_student(student_id: UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    payments = await PaymentService.list_payments(db, student_id=student_id)
    return SuccessResponse(data=[PaymentResponse.model_validate(p) for p in payments])


@router.post("", response_model=SuccessResponse[PaymentWriteResponse], status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_in: PaymentCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Record a payment and move the student's balance.

    When no allocations are sent, the receipt book's percentage table is
    applied. A missing student does not block the payment; the skipped
    balance update is reported in balance_updates.
    """
    try:
        payment, reconciliations = await PaymentService.create_payment(db, payment_in)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return SuccessResponse(
        data=_write_response(payment, reconciliations),
        message="Payment recorded successfully",
    )


@router.get("/{payment_id}", response_model=SuccessResponse[PaymentResponse])
async def get_payment(payment_id: UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    payment = await PaymentService.get_payment_by_id(db, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return SuccessResponse(data=PaymentResponse.model_validate(payment))


@router.put("/{payment_id}", response_model=SuccessResponse[PaymentWriteResponse])
async def update_payment(
    payment_id: UUID,
    payment_in: PaymentUpdate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    try:
        result = await PaymentService.update_payment(db, payment_id, payment_in)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if result is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    payment, reconciliations = result
    return SuccessResponse(
        data=_write_response(payment, reconciliations),
        message="Payment updated successfully",
    )


@router.delete("/{payment_id}", response_model=SuccessResponse[PaymentWriteResponse])
async def delete_payment(payment_id: UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    reconciliations = await PaymentService.delete_payment(db, payment_id)
    if reconciliations is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return SuccessResponse(
        data=_write_response(None, reconciliations),
        message="Payment deleted successfully",
    )


@router.post("/{payment_id}/reverse", response_model=SuccessResponse[PaymentWriteResponse], status_code=status.HTTP_201_CREATED)
async def reverse_payment(
    payment_id: UUID,
    reverse_in: Optional[PaymentReverseRequest] = Body(None),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Cancel a completed payment by recording a negative reversal against it.
    """
    reason = reverse_in.reason if reverse_in else None
    try:
        result = await PaymentService.reverse_payment(db, payment_id, reason=reason)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    if result is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    reversal, reconciliations = result
    return SuccessResponse(
        data=_write_response(reversal, reconciliations),
        message="Payment reversed successfully",
    )
