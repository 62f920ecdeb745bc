"""Student Model: identity plus the fee billing snapshot"""

from sqlalchemy import Column, Date, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ENUM

from bursary.models.base import BaseModel
from bursary.models.enums import Gender, StudentStatus


class Student(BaseModel):
    """
    Enrolled student.

    total_fees, paid_amount and outstanding_balance are USD-equivalent.
    paid_amount and outstanding_balance only change through payment
    create/update/delete; nothing else writes them.
    """
    __tablename__ = "students"
    
    # Identity
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    admission_number = Column(String(50), nullable=True, unique=True)
    class_name = Column(String(50), nullable=True, index=True)
    class_section = Column(String(20), nullable=True)
    status = Column(ENUM(StudentStatus, name="student_status"), default=StudentStatus.ACTIVE, nullable=False, index=True)
    gender = Column(ENUM(Gender, name="gender"), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    enrollment_date = Column(Date, nullable=True)
    academic_year = Column(String(20), nullable=True)
    
    # Guardian
    address = Column(Text, nullable=True)
    parent_name = Column(String(200), nullable=True)
    parent_phone = Column(String(50), nullable=True)
    medical_notes = Column(Text, nullable=True)
    
    # Billing snapshot
    total_fees = Column(Numeric(12, 2), default=0, nullable=False)
    paid_amount = Column(Numeric(12, 2), default=0, nullable=False)
    outstanding_balance = Column(Numeric(12, 2), default=0, nullable=False)
    
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
    
    def __repr__(self) -> str:
        return f"<Student {self.full_name} owes {self.outstanding_balance}>"
