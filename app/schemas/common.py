"""
Common schemas for API responses.
"""
from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str
    error: Optional[str] = None
