from .base import Base
from .user import User
from .batch import (
    Batch,
    batch_students,
    Announcement,
    TimetableEntry,
    TestResult,
    StudentMark,
    FeePayment,
)
from .attendance import AttendanceRecord, AttendanceEntry

__all__ = [
    'Base',
    'User',
    'Batch',
    'batch_students',
    'Announcement',
    'TimetableEntry',
    'TestResult',
    'StudentMark',
    'FeePayment',
    'AttendanceRecord',
    'AttendanceEntry',
]
