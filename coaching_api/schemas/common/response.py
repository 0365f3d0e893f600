from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Envelope wrapping every successful response"""
    success: bool = True
    message: str
    data: Optional[T] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error_code: str
    message: str
    status_code: int
    details: Optional[Dict[str, Any]] = None


def success_response(message: str, data: Any = None) -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data}
