# coaching_api/schemas/__init__.py

# Import enums
from .enums import UserRole, Weekday, AttendanceStatus, PaymentMethod, PaymentStatus

# Import common schemas
from .common import APIResponse, ErrorResponse, success_response

# Import auth schemas
from .auth import (
    TokenData,
    CallerContext,
    AccountResponse,
    AuthResponse,
    LinkedStudent,
    TeacherSummary,
    RegisterRequest,
    ParentRegisterRequest,
    LoginRequest,
    ProfileUpdateRequest
)

# Import batch-scoped schemas
from .batch import BatchCreate, BatchUpdate, JoinBatchRequest, AddStudentsRequest, BatchResponse, BatchSummary, StudentBatches
from .announcement import AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse
from .timetable import TimetableSlot, DayScheduleRequest, SlotUpdate, TimetableEntryResponse, TimetableResponse
from .exam import MarkEntry, ExamCreate, ExamUpdate, MarksRequest, StudentMarkResponse, ExamResponse
from .fees import FeePaymentRequest, FeePaymentResponse
from .attendance import (
    AttendanceEntryIn,
    AttendanceMarkRequest,
    AttendanceUpdateRequest,
    AttendanceRecordResponse,
    AttendanceReport,
    AttendanceStatistics,
    StudentAttendanceRow
)
