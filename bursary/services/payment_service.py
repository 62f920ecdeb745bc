from datetime import date
from typing import List, Optional, Tuple
from uuid import UUID
from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.exceptions import PaymentCeilingExceeded, ServiceError
from bursary.core.logging import get_logger
from bursary.ledger import (
    Allocation,
    BalanceAdjustment,
    PaymentRecord,
    Reconciliation,
    StudentBalance,
    adjustments_for_create,
    adjustments_for_delete,
    adjustments_for_update,
    allocation_mismatch,
    apply_adjustment,
    check_payment_ceiling,
    generate_allocations,
)
from bursary.models.enums import PaymentStatus
from bursary.models.payment import Payment
from bursary.schemas.payment import PaymentCreate, PaymentUpdate
from bursary.services.student_service import StudentService
from bursary.utils.time import get_utc_today

logger = get_logger(__name__)

REQUIRED_FIELDS = ("student_id", "amount", "currency", "payment_method", "payment_date", "status")


def _allocations_to_json(allocations: List[Allocation]) -> Optional[list]:
    if not allocations:
        return None
    return [a.to_dict() for a in allocations]


class PaymentService:
    """
    Service layer for fee payments.

    Every write also moves the owning student's paid and outstanding figures
    in the same transaction. A missing student never blocks the payment
    itself; the skipped balance update is logged and reported back.
    """

    @staticmethod
    async def get_payment_by_id(db: AsyncSession, payment_id: UUID) -> Optional[Payment]:
        result = await db.execute(select(Payment).where(Payment.id == payment_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_payment_for_update(db: AsyncSession, payment_id: UUID) -> Optional[Payment]:
        """Load a payment locked until commit so two writers cannot both apply its old amount."""
        result = await db.execute(
            select(Payment).where(Payment.id == payment_id).with_for_update()
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_payments(
        db: AsyncSession,
        student_id: Optional[UUID] = None,
        payment_date: Optional[date] = None,
        account_id: Optional[str] = None,
    ) -> List[Payment]:
        stmt = select(Payment)
        if student_id is not None:
            stmt = stmt.where(Payment.student_id == student_id)
        if payment_date is not None:
            stmt = stmt.where(Payment.payment_date == payment_date)
        if account_id is not None:
            stmt = stmt.where(Payment.account_id == account_id)
        stmt = stmt.order_by(Payment.payment_date.desc(), Payment.created_at.desc())
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def _resolve_allocations(amount, account_id: Optional[str], supplied) -> List[Allocation]:
        """Use allocations sent by the client, else apply the account's table."""
        if supplied:
            return [
                Allocation(category=a.category, percentage=a.percentage, amount=a.amount)
                for a in supplied
            ]
        return generate_allocations(amount, account_id)

    @staticmethod
    def _warn_on_mismatch(payment: Payment, allocations: List[Allocation]) -> None:
        mismatch = allocation_mismatch(payment.amount, allocations, payment_id=payment.id)
        if mismatch is not None:
            logger.warning(
                str(mismatch),
                extra={
                    "payment_id": str(payment.id),
                    "expected": str(mismatch.expected),
                    "actual": str(mismatch.actual),
                },
            )

    @staticmethod
    async def _reconcile(
        db: AsyncSession, adjustments: List[BalanceAdjustment]
    ) -> List[Reconciliation]:
        # Lock in id order so two opposite moves between students cannot deadlock
        students = {}
        for student_id in sorted({a.student_id for a in adjustments}, key=str):
            students[student_id] = await StudentService.get_student_for_update(db, student_id)

        results = []
        for adjustment in adjustments:
            student = students[adjustment.student_id]
            balance = None
            if student is not None:
                balance = StudentBalance.of(student.id, student.total_fees, student.paid_amount)
            result = apply_adjustment(balance, adjustment)
            if result.ok:
                student.paid_amount = result.balance.paid_amount
                student.outstanding_balance = result.balance.outstanding_balance
            else:
                logger.warning(
                    str(result.error),
                    extra={
                        "student_id": str(adjustment.student_id),
                        "delta": str(adjustment.delta),
                    },
                )
            results.append(result)
        return results

    @staticmethod
    async def create_payment(
        db: AsyncSession, payment_in: PaymentCreate
    ) -> Tuple[Payment, List[Reconciliation]]:
        try:
            check_payment_ceiling(payment_in.amount, payment_in.account_id)
        except PaymentCeilingExceeded as e:
            raise ServiceError(str(e), status.HTTP_400_BAD_REQUEST)

        student_name = payment_in.student_name
        if not student_name:
            student = await StudentService.get_student_by_id(db, payment_in.student_id)
            student_name = student.full_name if student else None

        allocations = PaymentService._resolve_allocations(
            payment_in.amount, payment_in.account_id, payment_in.allocations
        )
        payment = Payment(
            student_id=payment_in.student_id,
            student_name=student_name,
            amount=payment_in.amount,
            currency=payment_in.currency,
            payment_method=payment_in.payment_method,
            payment_date=payment_in.payment_date,
            description=payment_in.description,
            invoice_number=payment_in.invoice_number,
            status=payment_in.status,
            account_id=payment_in.account_id,
            allocations=_allocations_to_json(allocations),
        )
        db.add(payment)
        await db.flush()
        PaymentService._warn_on_mismatch(payment, allocations)

        reconciliations = await PaymentService._reconcile(
            db, adjustments_for_create(PaymentRecord.from_model(payment))
        )
        await db.commit()
        await db.refresh(payment)
        logger.info(
            "Payment recorded",
            extra={
                "payment_id": str(payment.id),
                "student_id": str(payment.student_id),
                "account_id": payment.account_id,
            },
        )
        return payment, reconciliations

    @staticmethod
    async def update_payment(
        db: AsyncSession, payment_id: UUID, payment_in: PaymentUpdate
    ) -> Optional[Tuple[Payment, List[Reconciliation]]]:
        payment = await PaymentService.get_payment_for_update(db, payment_id)
        if not payment:
            return None
        if payment.reverses_payment_id is not None:
            raise ServiceError("Reversal records cannot be edited", status.HTTP_400_BAD_REQUEST)

        before = PaymentRecord.from_model(payment)
        changes = payment_in.model_dump(exclude_unset=True)
        # Explicit nulls only clear the optional columns
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]
        new_amount = changes.get("amount", payment.amount)
        new_account = changes.get("account_id", payment.account_id)
        try:
            check_payment_ceiling(new_amount, new_account)
        except PaymentCeilingExceeded as e:
            raise ServiceError(str(e), status.HTTP_400_BAD_REQUEST)

        moved = "student_id" in changes and changes["student_id"] != payment.student_id
        if moved and not changes.get("student_name"):
            student = await StudentService.get_student_by_id(db, changes["student_id"])
            changes["student_name"] = student.full_name if student else None

        supplied = changes.pop("allocations", None)
        for field, value in changes.items():
            setattr(payment, field, value)

        # Re-split when the amount or receipt book moved and the client sent no split
        if supplied is not None or "amount" in changes or "account_id" in changes:
            allocations = PaymentService._resolve_allocations(
                payment.amount, payment.account_id, payment_in.allocations
            )
            payment.allocations = _allocations_to_json(allocations)
            PaymentService._warn_on_mismatch(payment, allocations)

        after = PaymentRecord.from_model(payment)
        reconciliations = await PaymentService._reconcile(db, adjustments_for_update(before, after))
        await db.commit()
        await db.refresh(payment)
        return payment, reconciliations

    @staticmethod
    async def delete_payment(db: AsyncSession, payment_id: UUID) -> Optional[List[Reconciliation]]:
        payment = await PaymentService.get_payment_for_update(db, payment_id)
        if not payment:
            return None
        record = PaymentRecord.from_model(payment)
        await db.delete(payment)
        reconciliations = await PaymentService._reconcile(db, adjustments_for_delete(record))
        await db.commit()
        logger.info("Payment deleted", extra={"payment_id": str(payment_id)})
        return reconciliations

    @staticmethod
    async def reverse_payment(
        db: AsyncSession, payment_id: UUID, reason: Optional[str] = None
    ) -> Optional[Tuple[Payment, List[Reconciliation]]]:
        """
        Cancel a completed payment with a negative, system-generated record.

        The original stays untouched for the audit trail; the reversal runs
        through the normal create path, so it lowers the student's paid amount
        and every allocation category by the same figures.
        """
        original = await PaymentService.get_payment_for_update(db, payment_id)
        if not original:
            return None
        if original.reverses_payment_id is not None:
            raise ServiceError("A reversal cannot itself be reversed", status.HTTP_400_BAD_REQUEST)
        if original.status != PaymentStatus.COMPLETED:
            raise ServiceError("Only completed payments can be reversed", status.HTTP_400_BAD_REQUEST)
        existing = await db.execute(
            select(Payment.id).where(Payment.reverses_payment_id == original.id)
        )
        if existing.first():
            raise ServiceError("Payment has already been reversed", status.HTTP_409_CONFLICT)

        source = PaymentRecord.from_model(original)
        allocations = [
            Allocation(category=a.category, percentage=a.percentage, amount=-a.amount)
            for a in (source.allocations or ())
        ]
        reversal = Payment(
            student_id=original.student_id,
            student_name=original.student_name,
            amount=-source.amount,
            currency=original.currency,
            payment_method=original.payment_method,
            payment_date=get_utc_today(),
            description=reason or f"Reversal of {original.invoice_number or original.id}",
            invoice_number=f"REV-{original.invoice_number}" if original.invoice_number else None,
            status=PaymentStatus.COMPLETED,
            account_id=original.account_id,
            allocations=_allocations_to_json(allocations),
            reverses_payment_id=original.id,
        )
        db.add(reversal)
        await db.flush()

        reconciliations = await PaymentService._reconcile(
            db, adjustments_for_create(PaymentRecord.from_model(reversal))
        )
        await db.commit()
        await db.refresh(reversal)
        logger.info(
            "Payment reversed",
            extra={"payment_id": str(original.id), "reversal_id": str(reversal.id)},
        )
        return reversal, reconciliations
