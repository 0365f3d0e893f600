from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status

from coaching_api.core.dependencies import (
    get_batch_service,
    get_current_caller,
    require_student,
    require_teacher,
)
from coaching_api.schemas import (
    AddStudentsRequest,
    APIResponse,
    BatchCreate,
    BatchResponse,
    BatchUpdate,
    CallerContext,
    JoinBatchRequest,
    success_response,
)
from coaching_api.services import BatchService

router = APIRouter(
    tags=["Batches"],
    responses={
        404: {"description": "Not found"},
        403: {"description": "Forbidden"},
        401: {"description": "Unauthorized"}
    }
)


def _batch(batch) -> BatchResponse:
    return BatchResponse.model_validate(batch)


@router.post("", response_model=APIResponse[BatchResponse], status_code=status.HTTP_201_CREATED)
async def create_batch(
    request: BatchCreate,
    caller: CallerContext = Depends(require_teacher),
    batch_service: BatchService = Depends(get_batch_service)
):
    batch = await batch_service.create_batch(caller, request.batch_code, request.name, request.class_name)
    return success_response("Batch created successfully", _batch(batch))


@router.get("", response_model=APIResponse[List[BatchResponse]])
async def list_batches(
    caller: CallerContext = Depends(get_current_caller),
    batch_service: BatchService = Depends(get_batch_service)
):
    """Batches the caller teaches or attends"""
    batches = await batch_service.list_for_caller(caller)
    return success_response("Batches retrieved", [_batch(b) for b in batches])


@router.post("/join", response_model=APIResponse[BatchResponse])
async def join_batch(
    request: JoinBatchRequest,
    caller: CallerContext = Depends(require_student),
    batch_service: BatchService = Depends(get_batch_service)
):
    batch = await batch_service.join_by_code(caller, request.batch_code)
    return success_response("Successfully joined batch", _batch(batch))


@router.get("/{batch_id}", response_model=APIResponse[BatchResponse])
async def get_batch(
    batch_id: int = Path(..., description="Batch id"),
    student_id: Optional[int] = Query(None, description="Student a parent is reading for"),
    caller: CallerContext = Depends(get_current_caller),
    batch_service: BatchService = Depends(get_batch_service)
):
    batch = await batch_service.get_batch(caller, batch_id, student_id)
    return success_response("Batch retrieved", _batch(batch))


@router.put("/{batch_id}", response_model=APIResponse[BatchResponse])
async def update_batch(
    request: BatchUpdate,
    batch_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    batch_service: BatchService = Depends(get_batch_service)
):
    batch = await batch_service.update_fields(caller, batch_id, name=request.name, class_name=request.class_name)
    return success_response("Batch updated successfully", _batch(batch))


@router.delete("/{batch_id}", response_model=APIResponse[None])
async def delete_batch(
    batch_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    batch_service: BatchService = Depends(get_batch_service)
):
    await batch_service.delete_batch(caller, batch_id)
    return success_response("Batch deleted successfully")


@router.post("/{batch_id}/students", response_model=APIResponse[BatchResponse])
async def add_students(
    request: AddStudentsRequest,
    batch_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    batch_service: BatchService = Depends(get_batch_service)
):
    batch = await batch_service.add_students(caller, batch_id, request.student_ids)
    return success_response("Students added successfully", _batch(batch))


@router.delete("/{batch_id}/students/{student_id}", response_model=APIResponse[BatchResponse])
async def remove_student(
    batch_id: int = Path(...),
    student_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    batch_service: BatchService = Depends(get_batch_service)
):
    batch = await batch_service.remove_student(caller, batch_id, student_id)
    return success_response("Student removed from batch", _batch(batch))
