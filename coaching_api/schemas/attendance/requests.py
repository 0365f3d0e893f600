# coaching_api/schemas/attendance/requests.py
from pydantic import BaseModel, Field
from datetime import date
from typing import List, Optional

from ..enums import AttendanceStatus


class AttendanceEntryIn(BaseModel):
    student_id: int
    status: AttendanceStatus
    remarks: Optional[str] = None


class AttendanceMarkRequest(BaseModel):
    date: date
    records: List[AttendanceEntryIn] = Field(..., min_length=1)


class AttendanceUpdateRequest(BaseModel):
    records: List[AttendanceEntryIn] = Field(..., min_length=1)
