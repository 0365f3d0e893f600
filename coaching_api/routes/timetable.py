from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query

from coaching_api.core.dependencies import get_current_caller, get_timetable_service, require_teacher
from coaching_api.schemas import (
    APIResponse,
    CallerContext,
    DayScheduleRequest,
    SlotUpdate,
    TimetableEntryResponse,
    TimetableResponse,
    success_response,
)
from coaching_api.services import TimetableService

router = APIRouter(tags=["Timetable"])


@router.get("", response_model=APIResponse[TimetableResponse])
async def get_timetable(
    batch_id: int = Path(...),
    student_id: Optional[int] = Query(None),
    caller: CallerContext = Depends(get_current_caller),
    service: TimetableService = Depends(get_timetable_service)
):
    """Every day from monday to saturday, periods sorted by hour"""
    week = await service.get_timetable(caller, batch_id, student_id)
    data = TimetableResponse(
        batch_id=batch_id,
        days={day: [TimetableEntryResponse.model_validate(e) for e in entries] for day, entries in week.items()}
    )
    return success_response("Timetable retrieved", data)


@router.put("/{day}", response_model=APIResponse[List[TimetableEntryResponse]])
async def set_day(
    request: DayScheduleRequest,
    batch_id: int = Path(...),
    day: str = Path(..., description="Day name, e.g. monday or mon"),
    caller: CallerContext = Depends(require_teacher),
    service: TimetableService = Depends(get_timetable_service)
):
    """Replace every period of one day"""
    entries = await service.set_day(caller, batch_id, day, request.entries)
    return success_response(
        "Timetable updated successfully",
        [TimetableEntryResponse.model_validate(e) for e in entries]
    )


@router.delete("/{day}", response_model=APIResponse[None])
async def clear_day(
    batch_id: int = Path(...),
    day: str = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: TimetableService = Depends(get_timetable_service)
):
    await service.clear_day(caller, batch_id, day)
    return success_response("Timetable day cleared")


@router.put("/{day}/{hour}", response_model=APIResponse[TimetableEntryResponse])
async def upsert_entry(
    request: SlotUpdate,
    batch_id: int = Path(...),
    day: str = Path(...),
    hour: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: TimetableService = Depends(get_timetable_service)
):
    entry = await service.upsert_entry(caller, batch_id, day, hour, request)
    return success_response("Timetable entry saved", TimetableEntryResponse.model_validate(entry))


@router.delete("/{day}/{hour}", response_model=APIResponse[None])
async def delete_entry(
    batch_id: int = Path(...),
    day: str = Path(...),
    hour: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: TimetableService = Depends(get_timetable_service)
):
    await service.delete_entry(caller, batch_id, day, hour)
    return success_response("Timetable entry deleted")
