"""
Task-related Pydantic schemas
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import EmailStr, Field

from app.schemas.common import CamelModel

TaskStatus = Literal["Pending", "In Progress", "Completed"]

class TaskInput(CamelModel):
    """Task created together with its event"""
    task_name: str = Field(min_length=1)
    description: str = ""
    assignee: EmailStr
    deadline: Optional[datetime] = None
    budget: Optional[float] = Field(default=None, ge=0)

class CommentCreate(CamelModel):
    message: str = Field(min_length=1)

class CommentResponse(CamelModel):
    author: str
    message: str
    timestamp: datetime

class TaskResponse(CamelModel):
    id: str
    task_name: str
    description: str
    event_name: str
    event_id: str
    status: str
    budget: Optional[float] = None
    creator: str
    assignee: str
    deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    comments: List[CommentResponse] = []

class TaskStatusSummary(CamelModel):
    id: str
    event_id: str
    status: str

class StatusUpdate(CamelModel):
    status: TaskStatus
