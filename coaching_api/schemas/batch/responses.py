from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from ..auth.responses import LinkedStudent, TeacherSummary


class BatchResponse(BaseModel):
    id: int
    name: str
    batch_code: str
    class_name: str
    teacher_id: int
    teacher: Optional[TeacherSummary] = None
    students: List[LinkedStudent] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BatchSummary(BaseModel):
    id: int
    name: str
    batch_code: str
    class_name: str
    teacher: Optional[TeacherSummary] = None

    class Config:
        from_attributes = True


# A parent's view: each linked student with the batches they attend
class StudentBatches(BaseModel):
    student: LinkedStudent
    batches: List[BatchSummary]
