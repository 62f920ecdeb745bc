from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import date, datetime
from decimal import Decimal

from bursary.models.enums import Currency, PaymentMethod, PaymentStatus
from bursary.utils.time import get_utc_today


class AllocationSchema(BaseModel):
    category: str
    percentage: Decimal = Field(..., ge=0, le=100)
    amount: Decimal


class PaymentCreate(BaseModel):
    """
    Incoming fee payment. Amounts are always positive here; negative
    reversal records are only created by the service itself.
    """
    student_id: UUID
    student_name: Optional[str] = None
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    currency: Currency = Currency.USD
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: date = Field(default_factory=get_utc_today)
    description: Optional[str] = None
    invoice_number: Optional[str] = None
    status: PaymentStatus = PaymentStatus.COMPLETED
    account_id: Optional[str] = Field(None, max_length=10)
    # Omit to have the account's percentage table applied
    allocations: Optional[List[AllocationSchema]] = None


class PaymentUpdate(BaseModel):
    student_id: Optional[UUID] = None
    student_name: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    currency: Optional[Currency] = None
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[date] = None
    description: Optional[str] = None
    invoice_number: Optional[str] = None
    status: Optional[PaymentStatus] = None
    account_id: Optional[str] = Field(None, max_length=10)
    allocations: Optional[List[AllocationSchema]] = None


class PaymentResponse(BaseModel):
    id: UUID
    student_id: UUID
    student_name: Optional[str] = None
    amount: Decimal
    currency: Currency
    payment_method: PaymentMethod
    payment_date: date
    description: Optional[str] = None
    invoice_number: Optional[str] = None
    status: PaymentStatus
    account_id: Optional[str] = None
    allocations: Optional[List[AllocationSchema]] = None
    reverses_payment_id: Optional[UUID] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BalanceUpdateResponse(BaseModel):
    """What happened to one student's balance as a result of a payment write."""
    student_id: UUID
    applied: bool
    paid_amount: Optional[Decimal] = None
    outstanding_balance: Optional[Decimal] = None
    error: Optional[str] = None

    @classmethod
    def from_reconciliation(cls, result) -> "BalanceUpdateResponse":
        if not result.ok:
            return cls(student_id=result.student_id, applied=False, error=str(result.error))
        return cls(
            student_id=result.student_id,
            applied=True,
            paid_amount=result.balance.paid_amount,
            outstanding_balance=result.balance.outstanding_balance,
        )


class PaymentWriteResponse(BaseModel):
    payment: Optional[PaymentResponse] = None
    balance_updates: List[BalanceUpdateResponse] = []


class PaymentReverseRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)
