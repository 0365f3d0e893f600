# coaching_api/services/batch_service.py
from typing import Dict, List, Optional

from sqlalchemy import select

from coaching_api.core.errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from coaching_api.core.logging import logger, log_function_call
from coaching_api.core.permissions import (
    authorize_batch_reader,
    ensure_parent_linked,
    ensure_role,
    ensure_teacher_owns_batch,
)
from coaching_api.models import AttendanceRecord, Batch, User, batch_students
from coaching_api.schemas.auth import CallerContext
from coaching_api.schemas.batch import normalize_batch_code
from coaching_api.schemas.enums import UserRole
from coaching_api.services.base_service import BaseService


class BatchService(BaseService):
    """Batch lifecycle, membership and code-based enrollment"""

    async def _get_by_code(self, code: str) -> Optional[Batch]:
        result = await self.db.execute(select(Batch).where(Batch.batch_code == code))
        return result.scalar_one_or_none()

    async def get_owned_batch(self, caller: CallerContext, batch_id: int) -> Batch:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        return batch

    @log_function_call(logger)
    async def create_batch(self, caller: CallerContext, code: str, name: str, class_name: str) -> Batch:
        ensure_role(caller, UserRole.TEACHER, message="Only teachers can create batches")
        teacher = await self._get_user(caller.identity)
        if not teacher or not teacher.is_teacher:
            raise NotFoundError("Teacher not found")

        code = normalize_batch_code(code)
        if await self._get_by_code(code):
            raise ConflictError("Batch code already exists")

        async with self.transaction():
            batch = Batch(
                batch_code=code,
                name=name.strip(),
                class_name=class_name.strip(),
                teacher=teacher,
                students=[],
                announcements=[],
                timetable_entries=[],
                tests=[],
                fee_payments=[]
            )
            self.db.add(batch)

        logger.info(f"Batch {batch.batch_code} created by teacher {teacher.id}", extra={"batch_id": batch.id})
        return batch

    async def join_by_code(self, caller: CallerContext, code: str) -> Batch:
        ensure_role(caller, UserRole.STUDENT, message="Only students can join batches")
        student = await self._get_user(caller.identity)
        if not student or not student.is_student:
            raise PermissionDenied("Only students can join batches")

        batch = await self._get_by_code(normalize_batch_code(code))
        if not batch:
            raise NotFoundError("Invalid batch code")
        if batch.has_student(student.id):
            raise ConflictError("Already enrolled in this batch")

        async with self.transaction():
            batch.students.append(student)
            self._touch(batch)

        logger.info(f"Student {student.id} joined batch {batch.batch_code}", extra={"batch_id": batch.id})
        return batch

    async def add_students(self, caller: CallerContext, batch_id: int, student_ids: List[int]) -> Batch:
        """
        Enroll several students at once.

        Every id must resolve to a student account before any is admitted.
        Ids already enrolled and repeated ids are skipped.
        """
        batch = await self.get_owned_batch(caller, batch_id)
        wanted = list(dict.fromkeys(student_ids))

        result = await self.db.execute(
            select(User).where(User.id.in_(wanted), User.role == UserRole.STUDENT)
        )
        found: Dict[int, User] = {user.id: user for user in result.scalars().all()}
        missing = [sid for sid in wanted if sid not in found]
        if missing:
            raise ValidationError("Some student IDs are invalid", details={"invalid_ids": missing})

        new_students = [found[sid] for sid in wanted if not batch.has_student(sid)]
        if not new_students:
            return batch

        async with self.transaction():
            batch.students.extend(new_students)
            self._touch(batch)

        logger.info(f"Added {len(new_students)} students to batch {batch.id}", extra={"batch_id": batch.id})
        return batch

    async def remove_student(self, caller: CallerContext, batch_id: int, student_id: int) -> Batch:
        batch = await self.get_owned_batch(caller, batch_id)
        student = next((s for s in batch.students if s.id == student_id), None)
        if not student:
            raise NotFoundError("Student not found in this batch")

        async with self.transaction():
            batch.students.remove(student)
            self._touch(batch)
        return batch

    async def update_fields(
        self,
        caller: CallerContext,
        batch_id: int,
        name: Optional[str] = None,
        class_name: Optional[str] = None
    ) -> Batch:
        batch = await self.get_owned_batch(caller, batch_id)
        if name is not None and not name.strip():
            raise ValidationError("Batch name cannot be empty")
        if class_name is not None and not class_name.strip():
            raise ValidationError("Class name cannot be empty")

        async with self.transaction():
            if name is not None:
                batch.name = name.strip()
            if class_name is not None:
                batch.class_name = class_name.strip()
            self._touch(batch)
        return batch

    @log_function_call(logger)
    async def delete_batch(self, caller: CallerContext, batch_id: int) -> None:
        """Remove a batch, its child collections and its attendance"""
        batch = await self.get_owned_batch(caller, batch_id)

        async with self.transaction():
            result = await self.db.execute(
                select(AttendanceRecord).where(AttendanceRecord.batch_id == batch.id)
            )
            for record in result.scalars().all():
                await self.db.delete(record)
            await self.db.flush()
            await self.db.delete(batch)

        logger.info(f"Batch {batch_id} deleted by teacher {caller.identity}", extra={"batch_id": batch_id})

    async def get_batch(self, caller: CallerContext, batch_id: int, student_id: Optional[int] = None) -> Batch:
        batch = await self._get_batch(batch_id)
        await authorize_batch_reader(self.db, caller, batch, student_id)
        return batch

    async def list_teacher_batches(self, teacher_id: int) -> List[Batch]:
        result = await self.db.execute(
            select(Batch).where(Batch.teacher_id == teacher_id).order_by(Batch.created_at.desc(), Batch.id.desc())
        )
        return list(result.scalars().all())

    async def list_student_batches(self, student_id: int) -> List[Batch]:
        result = await self.db.execute(
            select(Batch)
            .join(batch_students, batch_students.c.batch_id == Batch.id)
            .where(batch_students.c.student_id == student_id)
            .order_by(Batch.created_at.desc(), Batch.id.desc())
        )
        return list(result.scalars().all())

    async def list_parent_student_batches(self, caller: CallerContext) -> List[Dict]:
        """Each student linked to the calling parent with their batches"""
        ensure_role(caller, UserRole.PARENT)
        parent = await self._get_user(caller.identity)
        if not parent:
            raise NotFoundError("Parent not found")

        result = await self.db.execute(
            select(User)
            .where(User.role == UserRole.STUDENT, User.parent_email == parent.email)
            .order_by(User.name, User.id)
        )
        linked = []
        for student in result.scalars().all():
            ensure_parent_linked(parent, student)
            linked.append({"student": student, "batches": await self.list_student_batches(student.id)})
        return linked

    async def list_for_caller(self, caller: CallerContext) -> List[Batch]:
        if caller.is_teacher:
            return await self.list_teacher_batches(caller.identity)
        if caller.is_student:
            return await self.list_student_batches(caller.identity)
        raise PermissionDenied("Parents view batches through their linked students")
