# coaching_api/services/exam_service.py
from datetime import date
from typing import List, Optional

from coaching_api.core.errors import NotFoundError, ValidationError
from coaching_api.core.logging import logger, log_function_call
from coaching_api.core.permissions import authorize_batch_reader, ensure_teacher_owns_batch
from coaching_api.models import Batch, StudentMark, TestResult
from coaching_api.schemas.auth import CallerContext
from coaching_api.schemas.exam import ExamResponse, ExamUpdate, MarkEntry
from coaching_api.services.base_service import BaseService


class TestResultService(BaseService):
    """Tests of a batch and the per-student marks recorded against them"""
    __test__ = False

    @staticmethod
    def _find(batch: Batch, test_id: int) -> TestResult:
        test = next((t for t in batch.tests if t.id == test_id), None)
        if not test:
            raise NotFoundError("Test not found")
        return test

    @staticmethod
    def _validate_marks(batch: Batch, maximum_marks: float, entries: List[MarkEntry]) -> None:
        seen = set()
        for entry in entries:
            if entry.student_id in seen:
                raise ValidationError(f"Student {entry.student_id} appears more than once")
            seen.add(entry.student_id)
            if not batch.has_student(entry.student_id):
                raise ValidationError(
                    f"Student {entry.student_id} is not enrolled in this batch",
                    details={"student_id": entry.student_id}
                )
            if entry.marks < 0 or entry.marks > maximum_marks:
                raise ValidationError(
                    f"Marks must be between 0 and {maximum_marks:g}",
                    details={"student_id": entry.student_id, "marks": entry.marks}
                )

    @staticmethod
    def _apply_marks(test: TestResult, entries: List[MarkEntry]) -> None:
        """Upsert by student; one row per student per test"""
        for entry in entries:
            mark = test.mark_for(entry.student_id)
            if mark:
                mark.marks = entry.marks
                mark.remarks = entry.remarks
            else:
                test.student_marks.append(
                    StudentMark(student_id=entry.student_id, marks=entry.marks, remarks=entry.remarks)
                )

    @staticmethod
    def _view(test: TestResult, student_id: Optional[int]) -> ExamResponse:
        view = ExamResponse.model_validate(test)
        if student_id is not None:
            view.student_marks = [m for m in view.student_marks if m.student_id == student_id]
        return view

    async def create(
        self,
        caller: CallerContext,
        batch_id: int,
        exam_name: str,
        subject: str,
        maximum_marks: float,
        exam_date: Optional[date] = None
    ) -> TestResult:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        if not exam_name.strip() or not subject.strip():
            raise ValidationError("Exam name and subject are required")
        if maximum_marks <= 0:
            raise ValidationError("Maximum marks must be greater than 0")

        async with self.transaction():
            test = TestResult(
                exam_name=exam_name.strip(),
                subject=subject.strip(),
                maximum_marks=maximum_marks,
                exam_date=exam_date,
                created_by=caller.identity,
                student_marks=[]
            )
            batch.tests.append(test)
            self._touch(batch)

        logger.info(f"Test {test.id} created", extra={"batch_id": batch.id})
        return test

    async def update(self, caller: CallerContext, batch_id: int, test_id: int, fields: ExamUpdate) -> TestResult:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        test = self._find(batch, test_id)

        changes = fields.model_dump(exclude_unset=True, exclude_none=True, exclude={"student_marks"})
        maximum_marks = changes.get("maximum_marks", test.maximum_marks)
        incoming = fields.student_marks or []
        self._validate_marks(batch, maximum_marks, incoming)

        if maximum_marks < test.maximum_marks:
            overwritten = {entry.student_id for entry in incoming}
            for mark in test.student_marks:
                if mark.student_id not in overwritten and mark.marks > maximum_marks:
                    raise ValidationError(
                        "Maximum marks cannot be lower than marks already recorded",
                        details={"student_id": mark.student_id, "marks": mark.marks}
                    )

        async with self.transaction():
            for key, value in changes.items():
                setattr(test, key, value.strip() if isinstance(value, str) else value)
            self._apply_marks(test, incoming)
            self._touch(batch)
        return test

    @log_function_call(logger)
    async def record_marks(self, caller: CallerContext, batch_id: int, test_id: int, entries: List[MarkEntry]) -> TestResult:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        test = self._find(batch, test_id)
        self._validate_marks(batch, test.maximum_marks, entries)

        async with self.transaction():
            self._apply_marks(test, entries)
            self._touch(batch)
        return test

    async def delete(self, caller: CallerContext, batch_id: int, test_id: int) -> None:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        test = self._find(batch, test_id)

        async with self.transaction():
            batch.tests.remove(test)
            self._touch(batch)

    async def list(self, caller: CallerContext, batch_id: int, student_id: Optional[int] = None) -> List[ExamResponse]:
        """Newest first; student and parent readers see only their own marks"""
        batch = await self._get_batch(batch_id)
        scope = await authorize_batch_reader(self.db, caller, batch, student_id)
        tests = sorted(batch.tests, key=lambda t: t.id, reverse=True)
        return [self._view(test, scope) for test in tests]

    async def get(self, caller: CallerContext, batch_id: int, test_id: int, student_id: Optional[int] = None) -> ExamResponse:
        batch = await self._get_batch(batch_id)
        scope = await authorize_batch_reader(self.db, caller, batch, student_id)
        return self._view(self._find(batch, test_id), scope)

