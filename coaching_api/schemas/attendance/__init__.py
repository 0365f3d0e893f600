# coaching_api/schemas/attendance/__init__.py
from .requests import AttendanceEntryIn, AttendanceMarkRequest, AttendanceUpdateRequest
from .responses import (
    AttendanceEntryOut,
    AttendanceRecordResponse,
    StudentAttendanceRow,
    AttendanceStatistics,
    AttendanceReport
)

__all__ = [
    'AttendanceEntryIn',
    'AttendanceMarkRequest',
    'AttendanceUpdateRequest',
    'AttendanceEntryOut',
    'AttendanceRecordResponse',
    'StudentAttendanceRow',
    'AttendanceStatistics',
    'AttendanceReport',
]
