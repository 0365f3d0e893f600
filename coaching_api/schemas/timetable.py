from pydantic import BaseModel
from typing import Dict, List, Optional

from .enums import Weekday


class TimetableSlot(BaseModel):
    """One period of a day; hour and subject are checked by the service"""
    hour: int
    subject: str
    teacher: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class DayScheduleRequest(BaseModel):
    entries: List[TimetableSlot]


class SlotUpdate(BaseModel):
    subject: Optional[str] = None
    teacher: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class TimetableEntryResponse(BaseModel):
    id: int
    day: Weekday
    hour: int
    subject: str
    teacher: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    class Config:
        from_attributes = True


class TimetableResponse(BaseModel):
    batch_id: int
    days: Dict[Weekday, List[TimetableEntryResponse]]
