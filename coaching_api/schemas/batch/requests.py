from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


def normalize_batch_code(value: str) -> str:
    code = (value or "").strip().upper()
    if not code:
        raise ValueError("Batch code is required")
    return code


class BatchCreate(BaseModel):
    batch_code: str
    name: str
    class_name: str

    @field_validator("batch_code")
    @classmethod
    def code_upper(cls, v: str) -> str:
        return normalize_batch_code(v)

    @field_validator("name", "class_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v


class BatchUpdate(BaseModel):
    name: Optional[str] = None
    class_name: Optional[str] = None


class JoinBatchRequest(BaseModel):
    batch_code: str

    @field_validator("batch_code")
    @classmethod
    def code_upper(cls, v: str) -> str:
        return normalize_batch_code(v)


class AddStudentsRequest(BaseModel):
    student_ids: List[int] = Field(..., min_length=1)
