from .identity_service import IdentityService
from .token_service import TokenService
from .batch_service import BatchService
from .announcement_service import AnnouncementService
from .timetable_service import TimetableService
from .exam_service import TestResultService
from .fee_service import FeeService
from .attendance_service import AttendanceService

__all__ = [
    "IdentityService",
    "TokenService",
    "BatchService",
    "AnnouncementService",
    "TimetableService",
    "TestResultService",
    "FeeService",
    "AttendanceService"
]
