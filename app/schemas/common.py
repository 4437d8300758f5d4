"""
Common Pydantic schemas
"""

from typing import Any, Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Base schema exchanged with the client in camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None
