from typing import List, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from coaching_api.core.database import get_db
from coaching_api.core.errors import AuthenticationError, NotFoundError
from coaching_api.core.permissions import ensure_role
from coaching_api.models import User
from coaching_api.schemas.auth import CallerContext
from coaching_api.schemas.enums import UserRole
from coaching_api.services import (
    AnnouncementService,
    AttendanceService,
    BatchService,
    FeeService,
    IdentityService,
    TestResultService,
    TimetableService,
    TokenService,
)

# Bearer scheme; missing headers are reported by get_current_caller
bearer_scheme = HTTPBearer(auto_error=False)


# Service providers
async def get_identity_service(db: AsyncSession = Depends(get_db)) -> IdentityService:
    return IdentityService(db)

async def get_batch_service(db: AsyncSession = Depends(get_db)) -> BatchService:
    return BatchService(db)

async def get_announcement_service(db: AsyncSession = Depends(get_db)) -> AnnouncementService:
    return AnnouncementService(db)

async def get_timetable_service(db: AsyncSession = Depends(get_db)) -> TimetableService:
    return TimetableService(db)

async def get_test_result_service(db: AsyncSession = Depends(get_db)) -> TestResultService:
    return TestResultService(db)

async def get_fee_service(db: AsyncSession = Depends(get_db)) -> FeeService:
    return FeeService(db)

async def get_attendance_service(db: AsyncSession = Depends(get_db)) -> AttendanceService:
    return AttendanceService(db)


# Caller authentication
async def get_current_caller(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> CallerContext:
    """Validate the bearer token and expose the caller's identity and role"""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError("No token provided", error_code="TOKEN_MISSING")

    caller = TokenService.validate(credentials.credentials)
    request.state.user_id = caller.identity
    return caller


async def get_current_account(
    caller: CallerContext = Depends(get_current_caller),
    identity_service: IdentityService = Depends(get_identity_service)
) -> User:
    """Caller's account row; rejects tokens of deleted or disabled accounts"""
    try:
        account = await identity_service.get_account(caller.identity)
    except NotFoundError:
        raise AuthenticationError("Account no longer exists")
    if not account.is_active:
        raise AuthenticationError("Account is disabled", error_code="ACCOUNT_INACTIVE")
    return account


class RoleChecker:
    """Dependency admitting only active accounts of the given roles"""

    def __init__(self, allowed_roles: List[UserRole]):
        self.allowed_roles = list(allowed_roles)

    async def __call__(
        self,
        caller: CallerContext = Depends(get_current_caller),
        account: User = Depends(get_current_account)
    ) -> CallerContext:
        ensure_role(caller, *self.allowed_roles)
        return caller


require_teacher = RoleChecker([UserRole.TEACHER])
require_student = RoleChecker([UserRole.STUDENT])
require_parent = RoleChecker([UserRole.PARENT])
