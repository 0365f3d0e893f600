# coaching_api/schemas/enums.py
from enum import Enum


class UserRole(str, Enum):
    STUDENT = "student"
    PARENT = "parent"
    TEACHER = "teacher"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Accept full day names or three-letter abbreviations, any case"""
        cleaned = (value or "").strip().lower()
        for day in cls:
            if cleaned == day.value or cleaned == day.value[:3]:
                return day
        raise ValueError(
            "Invalid day. Must be one of: " + ", ".join(day.value for day in cls)
        )


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class PaymentMethod(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
