from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import date, datetime
from decimal import Decimal

from bursary.models.enums import Gender, StudentStatus


class StudentBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = None
    phone: Optional[str] = None
    admission_number: Optional[str] = None
    class_name: Optional[str] = None
    class_section: Optional[str] = None
    status: StudentStatus = StudentStatus.ACTIVE
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    enrollment_date: Optional[date] = None
    academic_year: Optional[str] = None
    address: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    medical_notes: Optional[str] = None


class StudentCreate(StudentBase):
    """Enrollment. Fees are USD-equivalent; paid_amount is the opening balance carried in."""
    total_fees: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    paid_amount: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class StudentUpdate(BaseModel):
    """Profile edits. paid_amount is absent on purpose: only payments move it."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    phone: Optional[str] = None
    admission_number: Optional[str] = None
    class_name: Optional[str] = None
    class_section: Optional[str] = None
    status: Optional[StudentStatus] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    enrollment_date: Optional[date] = None
    academic_year: Optional[str] = None
    address: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    medical_notes: Optional[str] = None
    total_fees: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)


class StudentResponse(StudentBase):
    id: UUID
    total_fees: Decimal
    paid_amount: Decimal
    outstanding_balance: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DefaulterResponse(BaseModel):
    id: UUID
    full_name: str
    total_fees: Decimal
    paid_amount: Decimal
    outstanding_balance: Decimal
