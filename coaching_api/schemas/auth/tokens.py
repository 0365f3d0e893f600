from pydantic import BaseModel
from ..enums import UserRole


# Claims embedded in an access token
class TokenData(BaseModel):
    sub: str
    role: UserRole
    email: str
    type: str
    iss: str
    jti: str


# Decoded identity handed to every service call
class CallerContext(BaseModel):
    identity: int
    role: UserRole
    email: str

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    @property
    def is_parent(self) -> bool:
        return self.role == UserRole.PARENT
