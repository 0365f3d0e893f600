# coaching_api/schemas/attendance/responses.py
from pydantic import BaseModel
from datetime import date
from typing import List, Optional

from ..enums import AttendanceStatus


class AttendanceEntryOut(BaseModel):
    student_id: int
    status: AttendanceStatus
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class AttendanceRecordResponse(BaseModel):
    id: int
    batch_id: int
    date: date
    marked_by: int
    entries: List[AttendanceEntryOut] = []

    class Config:
        from_attributes = True


# A record narrowed to a single student's status
class StudentAttendanceRow(BaseModel):
    id: int
    date: date
    status: AttendanceStatus
    remarks: Optional[str] = None


class AttendanceStatistics(BaseModel):
    total_classes: int
    present: int
    absent: int
    attendance_percentage: float


class AttendanceReport(BaseModel):
    student_id: Optional[int] = None
    records: List[AttendanceRecordResponse] = []
    student_records: List[StudentAttendanceRow] = []
    statistics: Optional[AttendanceStatistics] = None
