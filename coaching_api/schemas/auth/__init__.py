from .tokens import TokenData, CallerContext
from .responses import AccountResponse, AuthResponse, LinkedStudent, TeacherSummary
from .requests import RegisterRequest, ParentRegisterRequest, LoginRequest, ProfileUpdateRequest
