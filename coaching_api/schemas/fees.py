from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .enums import PaymentMethod, PaymentStatus


class FeePaymentRequest(BaseModel):
    student_id: int
    amount: float = Field(..., gt=0)
    payment_method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    remarks: Optional[str] = None


class FeePaymentResponse(BaseModel):
    id: int
    batch_id: int
    student_id: int
    amount: float
    payment_method: PaymentMethod
    status: PaymentStatus
    remarks: Optional[str] = None
    payment_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
