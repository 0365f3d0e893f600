from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from ..enums import UserRole


class AccountResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    parent_email: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LinkedStudent(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class TeacherSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


# Returned by every register and login surface
class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: AccountResponse
    linked_students: Optional[List[LinkedStudent]] = None
