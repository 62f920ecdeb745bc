from typing import List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bursary.core.logging import get_logger
from bursary.ledger import StudentRecord, defaulters, outstanding_for
from bursary.models.enums import StudentStatus
from bursary.models.student import Student
from bursary.schemas.student import StudentCreate, StudentUpdate

logger = get_logger(__name__)

REQUIRED_FIELDS = ("first_name", "last_name", "status", "total_fees")


class StudentService:
    """Service layer for Student operations"""

    @staticmethod
    async def get_student_by_id(db: AsyncSession, student_id: UUID) -> Optional[Student]:
        result = await db.execute(select(Student).where(Student.id == student_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_student_for_update(db: AsyncSession, student_id: UUID) -> Optional[Student]:
        """
        Load a student with a row lock held until the transaction ends.

        Concurrent payment writes for the same student queue up here instead
        of overwriting each other's paid_amount.
        """
        result = await db.execute(
            select(Student).where(Student.id == student_id).with_for_update()
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_students(
        db: AsyncSession,
        status: Optional[StudentStatus] = None,
        class_name: Optional[str] = None,
    ) -> List[Student]:
        stmt = select(Student)
        if status is not None:
            stmt = stmt.where(Student.status == status)
        if class_name:
            stmt = stmt.where(Student.class_name == class_name)
        stmt = stmt.order_by(Student.created_at.desc())
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create_student(db: AsyncSession, student_in: StudentCreate) -> Student:
        data = student_in.model_dump()
        student = Student(**data)
        student.outstanding_balance = outstanding_for(student_in.total_fees, student_in.paid_amount)
        db.add(student)
        await db.commit()
        await db.refresh(student)
        logger.info("Student enrolled", extra={"student_id": str(student.id)})
        return student

    @staticmethod
    async def update_student(
        db: AsyncSession, student_id: UUID, student_in: StudentUpdate
    ) -> Optional[Student]:
        student = await StudentService.get_student_for_update(db, student_id)
        if not student:
            return None
        changes = student_in.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]
        for field, value in changes.items():
            setattr(student, field, value)
        # Changing the fee total moves what is still owed
        student.outstanding_balance = outstanding_for(student.total_fees, student.paid_amount)
        await db.commit()
        await db.refresh(student)
        return student

    @staticmethod
    async def delete_student(db: AsyncSession, student_id: UUID) -> bool:
        """
        Remove a student. Their payments stay on record; later changes to
        those payments soft-fail their balance update.
        """
        student = await StudentService.get_student_by_id(db, student_id)
        if not student:
            return False
        await db.delete(student)
        await db.commit()
        logger.info("Student removed", extra={"student_id": str(student_id)})
        return True

    @staticmethod
    async def list_defaulters(db: AsyncSession) -> List[StudentRecord]:
        students = await StudentService.list_students(db)
        return defaulters(StudentRecord.from_model(s) for s in students)
