"""Expense Model"""

from sqlalchemy import Column, Date, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ENUM

from bursary.models.base import BaseModel
from bursary.models.enums import Currency, ExpenseMethod


class Expense(BaseModel):
    """
    Money paid out by the school.

    When account_id and allocation_category are set the expense is drawn
    against that receipt-book category and lowers its available balance.
    Expenses never touch student balances.
    """
    __tablename__ = "expenses"
    
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(ENUM(Currency, name="currency"), default=Currency.USD, nullable=False)
    category = Column(String(50), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    payment_method = Column(ENUM(ExpenseMethod, name="expense_method"), nullable=False)
    account_id = Column(String(10), nullable=True, index=True)
    allocation_category = Column(String(50), nullable=True)
    
    def __repr__(self) -> str:
        return f"<Expense {self.amount} {self.currency} - {self.category}>"
