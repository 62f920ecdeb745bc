from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from uuid import UUID
import datetime
from decimal import Decimal

from bursary.ledger.accounts import find_account
from bursary.models.enums import Currency, ExpenseCategory, ExpenseMethod
from bursary.utils.time import get_utc_today


def validate_allocation_target(account_id: Optional[str], allocation_category: Optional[str]) -> None:
    if allocation_category is None:
        return
    if account_id is None:
        raise ValueError("allocation_category requires account_id")
    account = find_account(account_id)
    if account is None:
        raise ValueError(f"Unknown account {account_id}")
    if account.percentage_for(allocation_category) is None:
        raise ValueError(
            f"Account {account_id} has no allocation category {allocation_category!r}"
        )


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    currency: Currency = Currency.USD
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: datetime.date = Field(default_factory=get_utc_today)
    payment_method: ExpenseMethod = ExpenseMethod.CASH
    account_id: Optional[str] = Field(None, max_length=10)
    allocation_category: Optional[str] = None

    @model_validator(mode="after")
    def check_allocation_target(self) -> "ExpenseCreate":
        validate_allocation_target(self.account_id, self.allocation_category)
        return self


class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    currency: Optional[Currency] = None
    category: Optional[ExpenseCategory] = None
    date: Optional[datetime.date] = None
    payment_method: Optional[ExpenseMethod] = None
    account_id: Optional[str] = Field(None, max_length=10)
    allocation_category: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: UUID
    description: str
    amount: Decimal
    currency: Currency
    category: str
    date: datetime.date
    payment_method: ExpenseMethod
    account_id: Optional[str] = None
    allocation_category: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
