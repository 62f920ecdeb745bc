from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from bursary.api import deps
from bursary.models.enums import StudentStatus
from bursary.schemas.payment import PaymentResponse
from bursary.schemas.responses import PaginatedResponse, SuccessResponse
from bursary.schemas.student import (
    DefaulterResponse,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from bursary.services.payment_service import PaymentService
from bursary.services.student_service import StudentService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[StudentResponse])
async def list_students(
    status: Optional[StudentStatus] = None,
    class_name: Optional[str] = None,
    paging: dict = Depends(deps.pagination),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    List students, newest enrollment first.
    """
    students = await StudentService.list_students(db, status=status, class_name=class_name)
    page = deps.paginate(students, paging["page"], paging["limit"])
    return PaginatedResponse(
        data=[StudentResponse.model_validate(s) for s in page["data"]],
        meta=page["meta"],
    )


@router.get("/defaulters", response_model=SuccessResponse[list[DefaulterResponse]])
async def list_defaulters(db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Students with an outstanding balance, largest first.
    """
    owing = await StudentService.list_defaulters(db)
    return SuccessResponse(
        data=[
            DefaulterResponse(
                id=s.id,
                full_name=s.full_name,
                total_fees=s.total_fees,
                paid_amount=s.paid_amount,
                outstanding_balance=s.outstanding_balance,
            )
            for s in owing
        ]
    )


@router.post("", response_model=SuccessResponse[StudentResponse], status_code=status.HTTP_201_CREATED)
async def create_student(
    student_in: StudentCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    student = await StudentService.create_student(db, student_in)
    return SuccessResponse(data=StudentResponse.model_validate(student), message="Student created successfully")


@router.get("/{student_id}", response_model=SuccessResponse[StudentResponse])
async def get_student(student_id: UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    student = await StudentService.get_student_by_id(db, student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return SuccessResponse(data=StudentResponse.model_validate(student))


@router.get("/{student_id}/payments", response_model=SuccessResponse[list[PaymentResponse]])
async def get_student_payments(student_id: UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    """
    Payment history for one student, newest first.
    """
    payments = await PaymentService.list_payments(db, student_id=student_id)
    return SuccessResponse(data=[PaymentResponse.model_validate(p) for p in payments])


@router.put("/{student_id}", response_model=SuccessResponse[StudentResponse])
async def update_student(
    student_id: UUID,
    student_in: StudentUpdate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Update a student's profile or fee total. The paid amount only moves through payments.
    """
    student = await StudentService.update_student(db, student_id, student_in)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return SuccessResponse(data=StudentResponse.model_validate(student), message="Student updated successfully")


@router.delete("/{student_id}", response_model=SuccessResponse)
async def delete_student(student_id: UUID, db: AsyncSession = Depends(deps.get_db)) -> Any:
    deleted = await StudentService.delete_student(db, student_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Student not found")
    return SuccessResponse(data=None, message="Student deleted successfully")
