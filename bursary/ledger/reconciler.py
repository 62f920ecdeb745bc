"""Keep each student's paid and outstanding figures in line with their payments.

``total_fees`` and ``paid_amount`` are USD-equivalent. Every payment is
converted through the static rate table and rounded to the cent before it
touches a balance, so applying and reversing the same payment always cancels
out exactly.

Invariant after every mutation:
``outstanding_balance == max(0, total_fees - paid_amount)``.
"""

from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from bursary.core.exceptions import StudentNotFound
from bursary.ledger.currency import CENT, to_usd
from bursary.ledger.records import PaymentRecord, StudentRecord

ZERO = Decimal("0")


def outstanding_for(total_fees: Decimal, paid_amount: Decimal) -> Decimal:
    return max(ZERO, total_fees - paid_amount)


@dataclass(frozen=True)
class StudentBalance:
    student_id: Any
    total_fees: Decimal
    paid_amount: Decimal
    outstanding_balance: Decimal

    @classmethod
    def of(cls, student_id, total_fees: Decimal, paid_amount: Decimal) -> "StudentBalance":
        return cls(student_id, total_fees, paid_amount, outstanding_for(total_fees, paid_amount))

    @classmethod
    def from_record(cls, student: StudentRecord) -> "StudentBalance":
        return cls.of(student.id, student.total_fees, student.paid_amount)


@dataclass(frozen=True)
class BalanceAdjustment:
    """A signed change to one student's paid amount."""
    student_id: Any
    delta: Decimal
    # Deletions never push paid_amount below zero.
    floor_at_zero: bool = False


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of applying one adjustment: the new balance or why it was skipped."""
    student_id: Any
    balance: Optional[StudentBalance] = None
    error: Optional[StudentNotFound] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def effective_amount(payment: Optional[PaymentRecord]) -> Decimal:
    """USD-equivalent weight of a payment; anything not completed weighs nothing."""
    if payment is None or not payment.is_completed:
        return ZERO
    return to_usd(payment.amount, payment.currency).quantize(CENT, rounding=ROUND_HALF_UP)


def adjustments_for_create(payment: PaymentRecord) -> List[BalanceAdjustment]:
    amount = effective_amount(payment)
    if amount == ZERO:
        return []
    return [BalanceAdjustment(payment.student_id, amount)]


def adjustments_for_update(old: PaymentRecord, new: PaymentRecord) -> List[BalanceAdjustment]:
    """
    Adjustments for an amended payment.

    A payment moved to another student is handled as a delete against the old
    student followed by a create against the new one.
    """
    if old.student_id != new.student_id:
        return adjustments_for_delete(old) + adjustments_for_create(new)
    delta = effective_amount(new) - effective_amount(old)
    if delta == ZERO:
        return []
    return [BalanceAdjustment(new.student_id, delta)]


def adjustments_for_delete(payment: PaymentRecord) -> List[BalanceAdjustment]:
    amount = effective_amount(payment)
    if amount == ZERO:
        return []
    return [BalanceAdjustment(payment.student_id, -amount, floor_at_zero=True)]


def apply_adjustment(balance: Optional[StudentBalance], adjustment: BalanceAdjustment) -> Reconciliation:
    """
    Apply one adjustment to a student's balance.

    A missing student is reported in the result rather than raised; the caller
    decides whether to log and carry on.
    """
    if balance is None:
        return Reconciliation(adjustment.student_id, error=StudentNotFound(adjustment.student_id))
    paid = balance.paid_amount + adjustment.delta
    if adjustment.floor_at_zero:
        paid = max(ZERO, paid)
    updated = replace(
        balance,
        paid_amount=paid,
        outstanding_balance=outstanding_for(balance.total_fees, paid),
    )
    return Reconciliation(balance.student_id, balance=updated)


class BalanceReconciler:
    """
    Balance state machine over an in-memory snapshot of students.

    Each lifecycle method returns one ``Reconciliation`` per student touched.
    """

    def __init__(self, students: Iterable[StudentBalance]) -> None:
        self._balances: Dict[Any, StudentBalance] = {s.student_id: s for s in students}

    @classmethod
    def from_records(cls, students: Iterable[StudentRecord]) -> "BalanceReconciler":
        return cls(StudentBalance.from_record(s) for s in students)

    def balance_of(self, student_id) -> Optional[StudentBalance]:
        return self._balances.get(student_id)

    @property
    def balances(self) -> List[StudentBalance]:
        return list(self._balances.values())

    def payment_created(self, payment: PaymentRecord) -> List[Reconciliation]:
        return self._apply(adjustments_for_create(payment))

    def payment_updated(self, old: PaymentRecord, new: PaymentRecord) -> List[Reconciliation]:
        return self._apply(adjustments_for_update(old, new))

    def payment_deleted(self, payment: PaymentRecord) -> List[Reconciliation]:
        return self._apply(adjustments_for_delete(payment))

    def _apply(self, adjustments: List[BalanceAdjustment]) -> List[Reconciliation]:
        results = []
        for adjustment in adjustments:
            result = apply_adjustment(self._balances.get(adjustment.student_id), adjustment)
            if result.ok:
                self._balances[result.student_id] = result.balance
            results.append(result)
        return results
