from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, status

from coaching_api.core.dependencies import get_announcement_service, get_current_caller, require_teacher
from coaching_api.schemas import (
    AnnouncementCreate,
    AnnouncementResponse,
    AnnouncementUpdate,
    APIResponse,
    CallerContext,
    success_response,
)
from coaching_api.services import AnnouncementService

router = APIRouter(tags=["Announcements"])


@router.post("", response_model=APIResponse[AnnouncementResponse], status_code=status.HTTP_201_CREATED)
async def create_announcement(
    request: AnnouncementCreate,
    batch_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: AnnouncementService = Depends(get_announcement_service)
):
    announcement = await service.create(caller, batch_id, request.title, request.content)
    return success_response("Announcement created successfully", AnnouncementResponse.model_validate(announcement))


@router.get("", response_model=APIResponse[List[AnnouncementResponse]])
async def list_announcements(
    batch_id: int = Path(...),
    student_id: Optional[int] = Query(None),
    caller: CallerContext = Depends(get_current_caller),
    service: AnnouncementService = Depends(get_announcement_service)
):
    """Most recent first"""
    announcements = await service.list(caller, batch_id, student_id)
    return success_response(
        "Announcements retrieved",
        [AnnouncementResponse.model_validate(a) for a in announcements]
    )


@router.put("/{announcement_id}", response_model=APIResponse[AnnouncementResponse])
async def update_announcement(
    request: AnnouncementUpdate,
    batch_id: int = Path(...),
    announcement_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: AnnouncementService = Depends(get_announcement_service)
):
    announcement = await service.update(
        caller, batch_id, announcement_id, title=request.title, content=request.content
    )
    return success_response("Announcement updated successfully", AnnouncementResponse.model_validate(announcement))


@router.delete("/{announcement_id}", response_model=APIResponse[None])
async def delete_announcement(
    batch_id: int = Path(...),
    announcement_id: int = Path(...),
    caller: CallerContext = Depends(require_teacher),
    service: AnnouncementService = Depends(get_announcement_service)
):
    await service.delete(caller, batch_id, announcement_id)
    return success_response("Announcement deleted successfully")
