from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status

from coaching_api.core.dependencies import get_current_caller, get_test_result_service, require_teacher
from coaching_api.schemas import (
    APIResponse,
    CallerContext,
    ExamCreate,
    ExamResponse,
    ExamUpdate,
    MarksRequest,
    success_response,
)
from coaching_api.services import TestResultService

router = APIRouter(tags=["Tests"])


@router.post("", response_model=APIResponse[ExamResponse], status_code=status.HTTP_201_CREATED)
async def create_test(
    request: ExamCreate,
    batch_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: TestResultService = Depends(get_test_result_service)
):
    test = await service.create(
        caller, batch_id, request.exam_name, request.subject, request.maximum_marks, request.exam_date
    )
    return success_response("Test created successfully", ExamResponse.model_validate(test))


@router.get("", response_model=APIResponse[List[ExamResponse]])
async def list_tests(
    batch_id: int = Path(...),
    student_id: Optional[int] = Query(None),
    caller: CallerContext = Depends(get_current_caller),
    service: TestResultService = Depends(get_test_result_service)
):
    tests = await service.list(caller, batch_id, student_id)
    return success_response("Tests retrieved", tests)


@router.get("/{test_id}", response_model=APIResponse[ExamResponse])
async def get_test(
    batch_id: int = Path(...),
    test_id: int = Path(...),
    student_id: Optional[int] = Query(None),
    caller: CallerContext = Depends(get_current_caller),
    service: TestResultService = Depends(get_test_result_service)
):
    test = await service.get(caller, batch_id, test_id, student_id)
    return success_response("Test retrieved", test)


@router.put("/{test_id}", response_model=APIResponse[ExamResponse])
async def update_test(
    request: ExamUpdate,
    batch_id: int = Path(...),
    test_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: TestResultService = Depends(get_test_result_service)
):
    test = await service.update(caller, batch_id, test_id, request)
    return success_response("Test updated successfully", ExamResponse.model_validate(test))


@router.delete("/{test_id}", response_model=APIResponse[None])
async def delete_test(
    batch_id: int = Path(...),
    test_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: TestResultService = Depends(get_test_result_service)
):
    await service.delete(caller, batch_id, test_id)
    return success_response("Test deleted successfully")


@router.post("/{test_id}/marks", response_model=APIResponse[ExamResponse])
async def record_marks(
    request: MarksRequest,
    batch_id: int = Path(...),
    test_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: TestResultService = Depends(get_test_result_service)
):
    test = await service.record_marks(caller, batch_id, test_id, request.student_marks)
    return success_response("Marks recorded successfully", ExamResponse.model_validate(test))
