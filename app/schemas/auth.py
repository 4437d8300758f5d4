"""
Authentication and employee schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from app.schemas.common import CamelModel

class RegisterRequest(CamelModel):
    """Self-registration; always creates a plain employee"""
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    team: str = "General"

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

class SessionUser(CamelModel):
    """Identity attached to an authenticated request"""
    id: str
    email: str
    name: str
    role: str
    team: str

class EmployeeResponse(CamelModel):
    id: str
    name: str
    email: str
    team: str
    role: str
    created_at: Optional[datetime] = None

class TokenResponse(CamelModel):
    token: str
    user: SessionUser
