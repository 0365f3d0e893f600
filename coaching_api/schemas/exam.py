from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime


class MarkEntry(BaseModel):
    student_id: int
    marks: float
    remarks: Optional[str] = None


class ExamCreate(BaseModel):
    exam_name: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    maximum_marks: float = Field(..., gt=0)
    exam_date: Optional[date] = None


class ExamUpdate(BaseModel):
    exam_name: Optional[str] = Field(None, min_length=1)
    subject: Optional[str] = Field(None, min_length=1)
    maximum_marks: Optional[float] = Field(None, gt=0)
    exam_date: Optional[date] = None
    student_marks: Optional[List[MarkEntry]] = None


class MarksRequest(BaseModel):
    student_marks: List[MarkEntry] = Field(..., min_length=1)


class StudentMarkResponse(BaseModel):
    student_id: int
    marks: float
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class ExamResponse(BaseModel):
    id: int
    batch_id: int
    exam_name: str
    subject: str
    maximum_marks: float
    exam_date: Optional[date] = None
    created_by: int
    student_marks: List[StudentMarkResponse] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
