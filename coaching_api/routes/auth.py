from typing import Optional
from fastapi import APIRouter, Depends, status

from coaching_api.core.dependencies import get_current_account, get_identity_service
from coaching_api.models import User
from coaching_api.schemas import (
    AccountResponse,
    APIResponse,
    AuthResponse,
    LinkedStudent,
    LoginRequest,
    ParentRegisterRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    success_response,
)
from coaching_api.schemas.enums import UserRole
from coaching_api.services import IdentityService, TokenService

router = APIRouter(tags=["Authentication"])


async def _auth_payload(
    identity_service: IdentityService,
    user: User,
    surface: str
) -> AuthResponse:
    linked = None
    if user.is_parent:
        students = await identity_service.get_linked_students(user)
        linked = [LinkedStudent.model_validate(s) for s in students]
    return AuthResponse(
        token=TokenService.issue(user, surface),
        user=AccountResponse.model_validate(user),
        linked_students=linked
    )


async def _login(
    identity_service: IdentityService,
    request: LoginRequest,
    surface: str,
    role: Optional[UserRole] = None
) -> dict:
    user = await identity_service.verify_credentials(request.email, request.password, role=role)
    payload = await _auth_payload(identity_service, user, surface)
    return success_response("Login successful", payload)


@router.post("/register", response_model=APIResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
async def register_student(
    request: RegisterRequest,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Student self-registration"""
    user = await identity_service.create_account(UserRole.STUDENT, request.name, request.email, request.password)
    payload = await _auth_payload(identity_service, user, "register")
    return success_response("Student registration successful", payload)


@router.post("/register/parent", response_model=APIResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
async def register_parent(
    request: ParentRegisterRequest,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Parent registration linked to an existing student account"""
    user = await identity_service.register_parent(
        request.name, request.email, request.password, request.student_email
    )
    payload = await _auth_payload(identity_service, user, "parent_register")
    return success_response("Parent registration successful", payload)


@router.post("/register/teacher", response_model=APIResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
async def register_teacher(
    request: RegisterRequest,
    identity_service: IdentityService = Depends(get_identity_service)
):
    user = await identity_service.create_account(UserRole.TEACHER, request.name, request.email, request.password)
    payload = await _auth_payload(identity_service, user, "teacher_register")
    return success_response("Teacher registration successful", payload)


@router.post("/login", response_model=APIResponse[AuthResponse])
async def login(
    request: LoginRequest,
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Login for any role"""
    return await _login(identity_service, request, "login")


@router.post("/login/student", response_model=APIResponse[AuthResponse])
async def login_student(
    request: LoginRequest,
    identity_service: IdentityService = Depends(get_identity_service)
):
    return await _login(identity_service, request, "student_login", UserRole.STUDENT)


@router.post("/login/parent", response_model=APIResponse[AuthResponse])
async def login_parent(
    request: LoginRequest,
    identity_service: IdentityService = Depends(get_identity_service)
):
    return await _login(identity_service, request, "parent_login", UserRole.PARENT)


@router.post("/login/teacher", response_model=APIResponse[AuthResponse])
async def login_teacher(
    request: LoginRequest,
    identity_service: IdentityService = Depends(get_identity_service)
):
    return await _login(identity_service, request, "teacher_login", UserRole.TEACHER)


@router.get("/me", response_model=APIResponse[AccountResponse])
async def read_me(current_user: User = Depends(get_current_account)):
    return success_response("Profile retrieved", AccountResponse.model_validate(current_user))


@router.put("/profile", response_model=APIResponse[AccountResponse])
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_account),
    identity_service: IdentityService = Depends(get_identity_service)
):
    """Change name, email or password of the calling account"""
    user = await identity_service.update_profile(
        current_user,
        name=request.name,
        email=request.email,
        current_password=request.current_password,
        new_password=request.new_password
    )
    return success_response("Profile updated successfully", AccountResponse.model_validate(user))
