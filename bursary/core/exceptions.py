"""Ledger and service error taxonomy"""

from typing import Optional
from uuid import UUID

from fastapi import status


class LedgerError(Exception):
    """Base class for errors raised by the ledger calculations."""


class InvalidCurrency(LedgerError, ValueError):
    """Currency code outside USD / ZAR / ZiG."""

    def __init__(self, code: object) -> None:
        super().__init__(f"Unsupported currency: {code!r}")
        self.code = code


class UnknownAccount(LedgerError, KeyError):
    """Receipt-book account with no configuration."""

    def __init__(self, account_id: Optional[str]) -> None:
        super().__init__(account_id)
        self.account_id = account_id

    def __str__(self) -> str:
        return f"Unknown account: {self.account_id!r}"


class StudentNotFound(LedgerError):
    """Balance reconciliation target is missing.

    Returned inside a ``Reconciliation`` rather than raised; the payment write
    that triggered it still goes through.
    """

    def __init__(self, student_id: object) -> None:
        super().__init__(f"Student {student_id} not found; balance update skipped")
        self.student_id = student_id


class PaymentCeilingExceeded(LedgerError):
    """Payment is larger than the receipt book allows for a single receipt."""

    def __init__(self, account_id: str, amount, ceiling) -> None:
        super().__init__(
            f"Maximum payment amount for account {account_id} is {ceiling}, got {amount}"
        )
        self.account_id = account_id
        self.amount = amount
        self.ceiling = ceiling


class AllocationSumMismatch(UserWarning):
    """Stored allocation amounts do not add up to the payment amount."""

    def __init__(self, payment_id: Optional[UUID], expected, actual) -> None:
        super().__init__(
            f"Allocations for payment {payment_id} sum to {actual}, expected {expected}"
        )
        self.payment_id = payment_id
        self.expected = expected
        self.actual = actual


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
