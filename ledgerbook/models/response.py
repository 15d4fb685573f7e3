"""
Response Models
Pydantic models for API responses
"""

from typing import Any, Optional
from pydantic import BaseModel


class SuccessResponse(BaseModel):
    status: str = "success"
    message: str = ""
    data: Optional[Any] = None


class ErrorResponse(BaseModel):
    error: bool = True
    code: str
    message: str
    details: Optional[Any] = None
    timestamp: str
