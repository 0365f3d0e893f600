# coaching_api/services/attendance_service.py
from datetime import date
from typing import List, Optional

from sqlalchemy import select

from coaching_api.core.errors import ConflictError, NotFoundError, ValidationError
from coaching_api.core.logging import logger, log_function_call
from coaching_api.core.permissions import authorize_batch_reader, ensure_teacher_owns_batch
from coaching_api.models import AttendanceEntry, AttendanceRecord, Batch
from coaching_api.schemas.attendance import (
    AttendanceEntryIn,
    AttendanceRecordResponse,
    AttendanceReport,
    AttendanceStatistics,
    StudentAttendanceRow,
)
from coaching_api.schemas.auth import CallerContext
from coaching_api.schemas.enums import AttendanceStatus
from coaching_api.services.base_service import BaseService


def attendance_statistics(statuses: List[AttendanceStatus]) -> AttendanceStatistics:
    total = len(statuses)
    present = sum(1 for s in statuses if s == AttendanceStatus.PRESENT)
    percentage = round(present / total * 100, 2) if total else 0
    return AttendanceStatistics(
        total_classes=total,
        present=present,
        absent=total - present,
        attendance_percentage=percentage
    )


class AttendanceService(BaseService):
    """Attendance per (batch, date); kept outside the batch aggregate"""

    @staticmethod
    def _validate_entries(batch: Batch, entries: List[AttendanceEntryIn]) -> None:
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

    @staticmethod
    def _build_entries(entries: List[AttendanceEntryIn]) -> List[AttendanceEntry]:
        return [
            AttendanceEntry(student_id=e.student_id, status=e.status, remarks=e.remarks)
            for e in entries
        ]

    async def _get_record(self, batch: Batch, attendance_id: int) -> AttendanceRecord:
        record = await self.db.get(AttendanceRecord, attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if record.batch_id != batch.id:
            raise ValidationError("Attendance record does not belong to this batch")
        return record

    @log_function_call(logger)
    async def mark(
        self,
        caller: CallerContext,
        batch_id: int,
        attendance_date: date,
        entries: List[AttendanceEntryIn]
    ) -> AttendanceRecord:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        if not entries:
            raise ValidationError("At least one attendance entry is required")
        self._validate_entries(batch, entries)

        existing = await self.db.execute(
            select(AttendanceRecord.id).where(
                AttendanceRecord.batch_id == batch.id,
                AttendanceRecord.date == attendance_date
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("Attendance already marked for this date")

        async with self.transaction():
            record = AttendanceRecord(
                batch_id=batch.id,
                date=attendance_date,
                marked_by=caller.identity,
                entries=self._build_entries(entries)
            )
            self.db.add(record)

        logger.info(
            f"Attendance for {attendance_date} marked with {len(entries)} entries",
            extra={"batch_id": batch.id}
        )
        return record

    async def update(
        self,
        caller: CallerContext,
        batch_id: int,
        attendance_id: int,
        entries: List[AttendanceEntryIn]
    ) -> AttendanceRecord:
        """Replace the entries of a record wholesale"""
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        record = await self._get_record(batch, attendance_id)
        if not entries:
            raise ValidationError("At least one attendance entry is required")
        self._validate_entries(batch, entries)

        async with self.transaction():
            record.entries.clear()
            # Old rows must be gone before the same students are inserted again
            await self.db.flush()
            record.entries.extend(self._build_entries(entries))
            record.marked_by = caller.identity
        return record

    async def delete(self, caller: CallerContext, batch_id: int, attendance_id: int) -> None:
        batch = await self._get_batch(batch_id)
        ensure_teacher_owns_batch(caller, batch)
        record = await self._get_record(batch, attendance_id)

        async with self.transaction():
            await self.db.delete(record)

    async def query(
        self,
        caller: CallerContext,
        batch_id: int,
        student_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> AttendanceReport:
        """
        Attendance of a batch, newest first.

        When the read is narrowed to one student, each record is reduced to
        that student's status and statistics are attached.
        """
        batch = await self._get_batch(batch_id)
        scope = await authorize_batch_reader(self.db, caller, batch, student_id)
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must not be after end_date")

        stmt = select(AttendanceRecord).where(AttendanceRecord.batch_id == batch.id)
        if start_date:
            stmt = stmt.where(AttendanceRecord.date >= start_date)
        if end_date:
            stmt = stmt.where(AttendanceRecord.date <= end_date)
        stmt = stmt.order_by(AttendanceRecord.date.desc(), AttendanceRecord.id.desc())
        records = (await self.db.execute(stmt)).scalars().all()

        if scope is None:
            return AttendanceReport(
                records=[AttendanceRecordResponse.model_validate(r) for r in records]
            )

        rows = []
        for record in records:
            entry = record.entry_for(scope)
            if entry is None:
                continue
            rows.append(
                StudentAttendanceRow(id=record.id, date=record.date, status=entry.status, remarks=entry.remarks)
            )
        return AttendanceReport(
            student_id=scope,
            student_records=rows,
            statistics=attendance_statistics([row.status for row in rows])
        )
