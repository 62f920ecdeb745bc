"""Centralized Enum Definitions"""

import enum

from bursary.ledger.currency import Currency
from bursary.ledger.records import PaymentStatus, StudentStatus


class PaymentMethod(str, enum.Enum):
    """How a fee payment was received"""
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"


class ExpenseMethod(str, enum.Enum):
    """How an expense was paid out"""
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ExpenseCategory(str, enum.Enum):
    """Expense ledger categories shown on the expenses screen"""
    TRANSPORTATION = "Transportation"
    UTILITIES = "Utilities"
    SUPPLIES = "Supplies"
    MAINTENANCE = "Maintenance"
    EQUIPMENT = "Equipment"
    STAFF = "Staff"
    FOOD = "Food"
    OTHER = "Other"


__all__ = [
    "Currency",
    "ExpenseCategory",
    "ExpenseMethod",
    "Gender",
    "PaymentMethod",
    "PaymentStatus",
    "StudentStatus",
]
