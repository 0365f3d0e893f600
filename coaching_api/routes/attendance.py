from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status

from coaching_api.core.dependencies import get_attendance_service, get_current_caller, require_teacher
from coaching_api.schemas import (
    APIResponse,
    AttendanceMarkRequest,
    AttendanceRecordResponse,
    AttendanceReport,
    AttendanceUpdateRequest,
    CallerContext,
    success_response,
)
from coaching_api.services import AttendanceService

router = APIRouter(tags=["Attendance"])


@router.post("", response_model=APIResponse[AttendanceRecordResponse], status_code=status.HTTP_201_CREATED)
async def mark_attendance(
    request: AttendanceMarkRequest,
    batch_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: AttendanceService = Depends(get_attendance_service)
):
    record = await service.mark(caller, batch_id, request.date, request.records)
    return success_response("Attendance marked successfully", AttendanceRecordResponse.model_validate(record))


@router.get("", response_model=APIResponse[AttendanceReport])
async def get_attendance(
    batch_id: int = Path(...),
    student_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    caller: CallerContext = Depends(get_current_caller),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Newest first; narrowed reads carry attendance statistics"""
    report = await service.query(caller, batch_id, student_id, start_date, end_date)
    return success_response("Attendance retrieved", report)


@router.put("/{attendance_id}", response_model=APIResponse[AttendanceRecordResponse])
async def update_attendance(
    request: AttendanceUpdateRequest,
    batch_id: int = Path(...),
    attendance_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: AttendanceService = Depends(get_attendance_service)
):
    record = await service.update(caller, batch_id, attendance_id, request.records)
    return success_response("Attendance updated successfully", AttendanceRecordResponse.model_validate(record))


@router.delete("/{attendance_id}", response_model=APIResponse[None])
async def delete_attendance(
    batch_id: int = Path(...),
    attendance_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: AttendanceService = Depends(get_attendance_service)
):
    await service.delete(caller, batch_id, attendance_id)
    return success_response("Attendance deleted successfully")
