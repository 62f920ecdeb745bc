"""Payment Model"""

from sqlalchemy import Column, Date, Numeric, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSONB, UUID

from bursary.models.base import BaseModel
from bursary.models.enums import Currency, PaymentMethod, PaymentStatus


class Payment(BaseModel):
    """
    Fee payment received from a student.

    student_id carries no foreign key: a payment for a student that no longer
    exists is still recorded, only the balance update is skipped.
    Negative amounts are system-generated reversals.
    """
    __tablename__ = "payments"
    
    student_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    student_name = Column(String(200), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(ENUM(Currency, name="currency"), default=Currency.USD, nullable=False)
    payment_method = Column(ENUM(PaymentMethod, name="payment_method"), default=PaymentMethod.CASH, nullable=False)
    payment_date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    invoice_number = Column(String(50), nullable=True)
    status = Column(ENUM(PaymentStatus, name="payment_status"), default=PaymentStatus.COMPLETED, nullable=False, index=True)
    
    # Receipt book and the allocation snapshot taken when the payment was recorded
    account_id = Column(String(10), nullable=True, index=True)
    allocations = Column(JSONB, nullable=True)
    
    # Set on reversal records to the payment they cancel
    reverses_payment_id = Column(UUID(as_uuid=True), nullable=True)
    
    def __repr__(self) -> str:
        return f"<Payment {self.amount} {self.currency} - {self.status}>"
