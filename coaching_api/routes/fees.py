from typing import List
from fastapi import APIRouter, Depends, Path

from coaching_api.core.dependencies import get_current_caller, get_fee_service, require_teacher
from coaching_api.schemas import (
    APIResponse,
    CallerContext,
    FeePaymentRequest,
    FeePaymentResponse,
    success_response,
)
from coaching_api.services import FeeService

router = APIRouter(tags=["Fees"])


@router.get("", response_model=APIResponse[List[FeePaymentResponse]])
async def list_fees(
    batch_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: FeeService = Depends(get_fee_service)
):
    records = await service.list(caller, batch_id)
    return success_response("Fee records retrieved", [FeePaymentResponse.model_validate(r) for r in records])


@router.post("", response_model=APIResponse[FeePaymentResponse])
async def upsert_fee(
    request: FeePaymentRequest,
    batch_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: FeeService = Depends(get_fee_service)
):
    """Create or overwrite the fee record of one student"""
    record = await service.upsert(
        caller,
        batch_id,
        request.student_id,
        request.amount,
        request.payment_method,
        request.status,
        request.remarks
    )
    return success_response("Fee record updated successfully", FeePaymentResponse.model_validate(record))


@router.get("/{student_id}", response_model=APIResponse[FeePaymentResponse])
async def get_student_fee(
    batch_id: int = Path(...),
    student_id: int = Path(...),
    caller: CallerContext = Depends(get_current_caller),
    service: FeeService = Depends(get_fee_service)
):
    record = await service.get(caller, batch_id, student_id)
    if record is None:
        return success_response("No fee record found", None)
    return success_response("Fee record retrieved", FeePaymentResponse.model_validate(record))
