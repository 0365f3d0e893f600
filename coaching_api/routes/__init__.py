from .auth import router as auth_router
from .teacher import router as teacher_router
from .batches import router as batch_router
from .announcements import router as announcement_router
from .timetable import router as timetable_router
from .exams import router as exam_router
from .fees import router as fee_router
from .attendance import router as attendance_router
from .parent import router as parent_router


__all__ = [
    "auth_router",
    "teacher_router",
    "batch_router",
    "announcement_router",
    "timetable_router",
    "exam_router",
    "fee_router",
    "attendance_router",
    "parent_router"
]
