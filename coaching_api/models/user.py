from sqlalchemy import Column, Integer, String, Boolean
from .base import Base, TimestampMixin, value_enum
from coaching_api.schemas.enums import UserRole


class User(TimestampMixin, Base):
    """An account of any role. Emails are stored lowercased."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(value_enum(UserRole), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Set on student accounts only
    parent_email = Column(String, nullable=True, index=True)

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    @property
    def is_parent(self) -> bool:
        return self.role == UserRole.PARENT

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.TEACHER

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
