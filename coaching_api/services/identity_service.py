# coaching_api/services/identity_service.py
from typing import List, Optional

from sqlalchemy import select, update

from coaching_api.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidCredentialsException,
    NotFoundError,
)
from coaching_api.core.logging import logger
from coaching_api.core.security import SecurityLogging, get_password_hash, verify_password
from coaching_api.models import User
from coaching_api.schemas.enums import UserRole
from coaching_api.services.base_service import BaseService


class IdentityService(BaseService):
    """Accounts of every role, registration flows and profile updates"""

    async def _validate_unique_email(self, email: str, exclude_user_id: Optional[int] = None) -> None:
        stmt = select(User).where(User.email == email)
        if exclude_user_id:
            stmt = stmt.where(User.id != exclude_user_id)
        result = await self.db.execute(stmt)
        if result.scalar_one_or_none():
            raise ConflictError("Email already exists")

    async def create_account(self, role: UserRole, name: str, email: str, password: str) -> User:
        email = email.strip().lower()
        await self._validate_unique_email(email)

        async with self.transaction():
            user = User(
                name=name.strip(),
                email=email,
                password_hash=get_password_hash(password),
                role=role,
                is_active=True
            )
            self.db.add(user)

        SecurityLogging.log_auth_event("register", email=email, details=f"role={role.value}")
        return user

    async def register_parent(self, name: str, email: str, password: str, student_email: str) -> User:
        """
        Create a parent account and link it to an existing student.

        Raises:
            NotFoundError: No student account has `student_email`
            ConflictError: The email is taken, or the student is already
                linked to a different existing parent
        """
        email = email.strip().lower()
        student = await self._get_user_by_email(student_email)
        if not student or not student.is_student:
            raise NotFoundError("Student not found with the provided email")

        if student.parent_email and student.parent_email != email:
            current_parent = await self._get_user_by_email(student.parent_email)
            if current_parent and current_parent.is_parent:
                raise ConflictError("Student is already linked to another parent")

        await self._validate_unique_email(email)

        async with self.transaction():
            parent = User(
                name=name.strip(),
                email=email,
                password_hash=get_password_hash(password),
                role=UserRole.PARENT,
                is_active=True
            )
            self.db.add(parent)
            student.parent_email = email

        SecurityLogging.log_auth_event("parent_register", email=email, details=f"student_id={student.id}")
        return parent

    async def verify_credentials(self, email: str, password: str, role: Optional[UserRole] = None) -> User:
        """
        Resolve an account from email and password.

        When `role` is given only an account of that role matches, so a
        teacher cannot sign in through the student surface.
        """
        email = email.strip().lower()
        stmt = select(User).where(User.email == email)
        if role is not None:
            stmt = stmt.where(User.role == role)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user:
            SecurityLogging.log_auth_event("login", email=email, success=False, details="unknown account")
            label = role.value.capitalize() if role else "User"
            raise NotFoundError(f"{label} not found")

        if not verify_password(password, user.password_hash):
            SecurityLogging.log_auth_event("login", email=email, success=False, details="bad password")
            raise InvalidCredentialsException("Invalid password")

        if not user.is_active:
            SecurityLogging.log_auth_event("login", email=email, success=False, details="inactive")
            raise AuthenticationError("Account is disabled", error_code="ACCOUNT_INACTIVE")

        SecurityLogging.log_auth_event("login", email=email)
        return user

    async def get_account(self, user_id: int) -> User:
        user = await self._get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_linked_students(self, parent: User) -> List[User]:
        result = await self.db.execute(
            select(User)
            .where(User.role == UserRole.STUDENT, User.parent_email == parent.email)
            .order_by(User.name, User.id)
        )
        return list(result.scalars().all())

    async def list_teachers(self) -> List[User]:
        result = await self.db.execute(
            select(User)
            .where(User.role == UserRole.TEACHER, User.is_active.is_(True))
            .order_by(User.name, User.id)
        )
        return list(result.scalars().all())

    async def update_profile(
        self,
        user: User,
        name: Optional[str] = None,
        email: Optional[str] = None,
        current_password: Optional[str] = None,
        new_password: Optional[str] = None
    ) -> User:
        old_email = user.email
        new_email = email.strip().lower() if email else None

        if new_email and new_email != old_email:
            await self._validate_unique_email(new_email, exclude_user_id=user.id)

        if new_password:
            if not current_password or not verify_password(current_password, user.password_hash):
                raise InvalidCredentialsException("Current password is incorrect")

        async with self.transaction():
            if name:
                user.name = name.strip()
            if new_password:
                user.password_hash = get_password_hash(new_password)
            if new_email and new_email != old_email:
                user.email = new_email
                if user.is_parent:
                    # Keep linked students pointing at the parent
                    await self.db.execute(
                        update(User)
                        .where(User.role == UserRole.STUDENT, User.parent_email == old_email)
                        .values(parent_email=new_email)
                        .execution_options(synchronize_session="fetch")
                    )
                    logger.info(f"Parent {user.id} email change carried over to linked students")

        if new_password:
            SecurityLogging.log_auth_event("password_change", email=user.email)
        return user
