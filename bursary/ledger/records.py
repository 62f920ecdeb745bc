"""Plain in-memory records the ledger calculations run over.

The service layer converts ORM rows into these before calling into the ledger,
so every calculation works on a consistent snapshot and never touches a
session.
"""

import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Tuple

from bursary.ledger.currency import Currency, parse_currency, to_decimal


class PaymentStatus(str, enum.Enum):
    """Payment lifecycle status; only COMPLETED counts toward money totals"""
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class StudentStatus(str, enum.Enum):
    """Enrollment status"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    GRADUATED = "graduated"


@dataclass(frozen=True)
class Allocation:
    """Share of one payment assigned to one budget category"""
    category: str
    percentage: Decimal
    amount: Decimal

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Allocation":
        return cls(
            category=str(data["category"]),
            percentage=to_decimal(data.get("percentage", 0)),
            amount=to_decimal(data.get("amount", 0)),
        )

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "percentage": str(self.percentage),
            "amount": str(self.amount),
        }


@dataclass(frozen=True)
class PaymentRecord:
    id: Any
    student_id: Any
    amount: Decimal
    currency: Currency
    payment_date: date
    status: PaymentStatus = PaymentStatus.COMPLETED
    account_id: Optional[str] = None
    description: str = ""
    allocations: Optional[Tuple[Allocation, ...]] = None
    student_name: str = ""
    payment_method: str = "cash"
    invoice_number: str = ""

    @property
    def is_completed(self) -> bool:
        return self.status == PaymentStatus.COMPLETED

    @property
    def has_allocations(self) -> bool:
        return bool(self.allocations)

    @classmethod
    def from_model(cls, payment) -> "PaymentRecord":
        """Build a record from a ``Payment`` ORM row (or anything shaped like one)."""
        stored = payment.allocations
        allocations = None
        if stored is not None:
            allocations = tuple(
                a if isinstance(a, Allocation) else Allocation.from_dict(a)
                for a in stored
            )
        return cls(
            id=payment.id,
            student_id=payment.student_id,
            amount=to_decimal(payment.amount),
            currency=parse_currency(payment.currency),
            payment_date=payment.payment_date,
            status=PaymentStatus(payment.status),
            account_id=payment.account_id,
            description=payment.description or "",
            allocations=allocations,
            student_name=getattr(payment, "student_name", "") or "",
            payment_method=_enum_value(getattr(payment, "payment_method", "cash")),
            invoice_number=getattr(payment, "invoice_number", "") or "",
        )


@dataclass(frozen=True)
class ExpenseRecord:
    id: Any
    amount: Decimal
    currency: Currency
    category: str
    date: date
    account_id: Optional[str] = None
    allocation_category: Optional[str] = None
    description: str = ""

    @classmethod
    def from_model(cls, expense) -> "ExpenseRecord":
        return cls(
            id=expense.id,
            amount=to_decimal(expense.amount),
            currency=parse_currency(expense.currency),
            category=expense.category,
            date=expense.date,
            account_id=expense.account_id,
            allocation_category=expense.allocation_category,
            description=expense.description or "",
        )


@dataclass(frozen=True)
class StudentRecord:
    id: Any
    first_name: str = ""
    last_name: str = ""
    status: StudentStatus = StudentStatus.ACTIVE
    total_fees: Decimal = field(default_factory=Decimal)
    paid_amount: Decimal = field(default_factory=Decimal)
    outstanding_balance: Decimal = field(default_factory=Decimal)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_model(cls, student) -> "StudentRecord":
        return cls(
            id=student.id,
            first_name=student.first_name or "",
            last_name=student.last_name or "",
            status=StudentStatus(student.status),
            total_fees=to_decimal(student.total_fees),
            paid_amount=to_decimal(student.paid_amount),
            outstanding_balance=to_decimal(student.outstanding_balance),
        )


def _enum_value(value) -> str:
    return value.value if isinstance(value, enum.Enum) else str(value)


def completed(payments: Iterable[PaymentRecord]) -> Iterable[PaymentRecord]:
    return (p for p in payments if p.is_completed)
