from typing import List
from fastapi import APIRouter, Depends

from coaching_api.core.dependencies import get_batch_service, require_parent
from coaching_api.schemas import (
    APIResponse,
    BatchSummary,
    CallerContext,
    LinkedStudent,
    StudentBatches,
    success_response,
)
from coaching_api.services import BatchService

router = APIRouter(
    tags=["Parents"],
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"}
    }
)


@router.get("/me/students", response_model=APIResponse[List[StudentBatches]])
async def linked_students(
    caller: CallerContext = Depends(require_parent),
    batch_service: BatchService = Depends(get_batch_service)
):
    """Students linked to the calling parent, each with their batches"""
    linked = await batch_service.list_parent_student_batches(caller)
    data = [
        StudentBatches(
            student=LinkedStudent.model_validate(item["student"]),
            batches=[BatchSummary.model_validate(b) for b in item["batches"]]
        )
        for item in linked
    ]
    return success_response("Linked students retrieved", data)
