"""Models Package - Export all models for easy imports"""

from bursary.models.base import BaseModel
from bursary.models.enums import *
from bursary.models.student import Student
from bursary.models.payment import Payment
from bursary.models.expense import Expense


__all__ = [
    "BaseModel",
    "Student",
    "Payment",
    "Expense",
    "Currency",
    "ExpenseCategory",
    "ExpenseMethod",
    "Gender",
    "PaymentMethod",
    "PaymentStatus",
    "StudentStatus",
]
