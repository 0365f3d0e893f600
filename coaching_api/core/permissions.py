# coaching_api/core/permissions.py
"""
Relational authorization checks evaluated before a batch-scoped read or
write. Each check either returns quietly or raises PermissionDenied.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from coaching_api.core.errors import PermissionDenied, ValidationError
from coaching_api.core.logging import logger
from coaching_api.models import Batch, User
from coaching_api.schemas.auth import CallerContext
from coaching_api.schemas.enums import UserRole


def ensure_role(caller: CallerContext, *roles: UserRole, message: Optional[str] = None) -> None:
    if caller.role not in roles:
        logger.warning(
            f"Permission denied: user {caller.identity} with role {caller.role.value} "
            f"attempted an action requiring {[r.value for r in roles]}"
        )
        allowed = " or ".join(f"{r.value}s" for r in roles)
        raise PermissionDenied(message or f"Only {allowed} can perform this action")


def ensure_teacher_owns_batch(caller: CallerContext, batch: Batch) -> None:
    ensure_role(caller, UserRole.TEACHER)
    if batch.teacher_id != caller.identity:
        logger.warning(f"Teacher {caller.identity} denied access to batch {batch.id}")
        raise PermissionDenied("You are not authorized to manage this batch")


def ensure_student_enrolled(batch: Batch, student_id: int) -> None:
    if not batch.has_student(student_id):
        raise PermissionDenied("Student is not enrolled in this batch")


def ensure_parent_linked(parent: Optional[User], student: Optional[User]) -> None:
    if (
        parent is None
        or student is None
        or not student.is_student
        or not student.parent_email
        or student.parent_email.lower() != parent.email.lower()
    ):
        raise PermissionDenied("Not authorized to view this student's records")


async def authorize_batch_reader(
    db: AsyncSession,
    caller: CallerContext,
    batch: Batch,
    student_id: Optional[int] = None
) -> Optional[int]:
    """
    Decide whether the caller may read records of `batch`.

    Teachers must own the batch and may optionally narrow the read to one
    enrolled student. Students read only their own rows and must be
    enrolled. Parents must name a linked, enrolled student.

    Returns:
        The student id the read is narrowed to, or None for a full
        teacher view.
    """
    if caller.is_teacher:
        ensure_teacher_owns_batch(caller, batch)
        if student_id is not None:
            ensure_student_enrolled(batch, student_id)
        return student_id

    if caller.is_student:
        if student_id is not None and student_id != caller.identity:
            raise PermissionDenied("Students can only view their own records")
        ensure_student_enrolled(batch, caller.identity)
        return caller.identity

    if caller.is_parent:
        if student_id is None:
            raise ValidationError("student_id is required for parent access")
        # Current parent email, not the one captured in the token
        parent = await db.get(User, caller.identity)
        student = await db.get(User, student_id)
        ensure_parent_linked(parent, student)
        ensure_student_enrolled(batch, student_id)
        return student_id

    raise PermissionDenied()
