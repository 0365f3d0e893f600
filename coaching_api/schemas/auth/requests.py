from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional

from coaching_api.core.config import settings


def _check_password(value: str) -> str:
    if len(value) < settings.MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long"
        )
    return value


def _check_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    return value


# Register Request Model - student and teacher sign-up
class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return _check_password(v)


# Parent sign-up names the student account to link
class ParentRegisterRequest(RegisterRequest):
    student_email: EmailStr


# Login Request Model
class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_present(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


# Profile Update Model - every field optional
class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_name(v)

    @field_validator("new_password")
    @classmethod
    def new_password_length(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_password(v)
