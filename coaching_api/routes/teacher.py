from typing import List
from fastapi import APIRouter, Depends

from coaching_api.core.dependencies import get_current_caller, get_identity_service
from coaching_api.schemas import APIResponse, CallerContext, TeacherSummary, success_response
from coaching_api.services import IdentityService

router = APIRouter(
    tags=["Teachers"],
    responses={401: {"description": "Unauthorized"}}
)


@router.get("", response_model=APIResponse[List[TeacherSummary]])
async def list_teachers(
    caller: CallerContext = Depends(get_current_caller),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Active teacher accounts"""
    teachers = await identity_service.list_teachers()
    return success_response(
        "Teachers retrieved",
        [TeacherSummary.model_validate(t) for t in teachers]
    )
