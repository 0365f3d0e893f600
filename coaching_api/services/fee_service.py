# coaching_api/services/fee_service.py
from typing import List, Optional

from coaching_api.core.errors import NotFoundError, ValidationError
from coaching_api.core.logging import logger
from coaching_api.core.permissions import authorize_batch_reader, ensure_teacher_owns_batch
from coaching_api.models import Batch, FeePayment
from coaching_api.models.base import utcnow
from coaching_api.schemas.auth import CallerContext
from coaching_api.schemas.enums import PaymentMethod, PaymentStatus
from coaching_api.services.base_service import BaseService


class FeeService(BaseService):
    """The single current payment record of each enrolled student"""

    @staticmethod
    def _record_for(batch: Batch, student_id: int) -> Optional[FeePayment]:
        return next((p for p in batch.fee_payments if p.student_id == student_id), None)

    async def upsert(
        self,
        caller: CallerContext,
        batch_id: int,
        student_id: int,
        amount: float,
        payment_method: PaymentMethod,
        status: PaymentStatus = PaymentStatus.PENDING,
        remarks: Optional[str] = None
    ) -> FeePayment:
        """Later writes overwrite the student's record"""
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        if not batch.has_student(student_id):
            raise NotFoundError("Student not found in this batch")
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be greater than 0")

        try:
            payment_method = PaymentMethod(payment_method)
            status = PaymentStatus(status)
        except ValueError as e:
            raise ValidationError(str(e))

        record = self._record_for(batch, student_id)
        async with self.transaction():
            if record:
                record.amount = amount
                record.payment_method = payment_method
                record.status = status
                record.remarks = remarks
                record.payment_date = utcnow()
            else:
                record = FeePayment(
                    student_id=student_id,
                    amount=amount,
                    payment_method=payment_method,
                    status=status,
                    remarks=remarks
                )
                batch.fee_payments.append(record)
            self._touch(batch)

        logger.info(
            f"Fee record for student {student_id} set to {status.value}",
            extra={"batch_id": batch.id}
        )
        return record

    async def get(self, caller: CallerContext, batch_id: int, student_id: int) -> Optional[FeePayment]:
        batch = await self._get_batch(batch_id)
        scope = await authorize_batch_reader(self.db, caller, batch, student_id)
        return self._record_for(batch, scope)

    async def list(self, caller: CallerContext, batch_id: int) -> List[FeePayment]:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        return sorted(batch.fee_payments, key=lambda p: p.student_id)
