"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional
from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.task import TaskInput

EventType = Literal["firm-wide", "limited-entry", "team-specific"]

class EventCreate(CamelModel):
    """Schema for creating an event with its tasks"""
    event_name: str = Field(min_length=1)
    event_type: EventType
    date: Optional[datetime] = None
    venue: Optional[str] = None
    description: str = Field(min_length=1)
    available_slots: Optional[int] = Field(default=None, ge=0)
    ticket_price: Optional[float] = Field(default=None, ge=0)
    total_budget: float = Field(default=0, ge=0)
    team: Optional[str] = ""
    tasks: List[TaskInput] = []

class EventResponse(CamelModel):
    """Event as returned to clients"""
    id: str
    event_name: str
    event_type: str
    date: Optional[datetime] = None
    venue: Optional[str] = None
    description: str
    available_slots: Optional[int] = None
    ticket_price: Optional[float] = None
    total_budget: float = 0
    attendees: List[str] = []
    team: str = ""
    is_paid: bool = False
    creator: str
    created_at: Optional[datetime] = None

class CreatedEventSummary(CamelModel):
    id: str
    event_name: str

class CompiledReportRow(CamelModel):
    """Events grouped by year and event type"""
    year: Optional[int] = None
    event_type: str
    event_count: int
    total_budget: float
    event_names: List[str] = []
    budget_by_team: Dict[str, float] = {}

class DetailedReportRow(CamelModel):
    """Per-event attendance and task completion metrics"""
    event_id: str
    event_name: str
    event_type: str
    year: Optional[int] = None
    team: str
    total_rsvp: int = Field(serialization_alias="totalRSVP")
    total_attended: int
    attendance_percentage: float
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    task_completion_rate: float
    total_budget: float
