"""
Event model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.db import Base

EVENT_TYPES = ("firm-wide", "limited-entry", "team-specific")

class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_name = Column(String(255), nullable=False)
    event_type = Column(String(20), nullable=False)
    date = Column(DateTime, nullable=True)
    venue = Column(String(255), nullable=True)
    description = Column(Text, nullable=False)
    # Only meaningful for limited-entry events
    available_slots = Column(Integer, nullable=True)
    ticket_price = Column(Float, nullable=True)
    total_budget = Column(Float, nullable=False, default=0)
    # Only meaningful for team-specific events
    team = Column(String(100), nullable=False, default="")
    is_paid = Column(Boolean, nullable=False, default=False)
    creator = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    attendee_rows = relationship(
        "EventAttendee",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventAttendee.id",
    )
    tasks = relationship("Task", back_populates="event")

    @property
    def attendees(self):
        return [row.identifier for row in self.attendee_rows]


class EventAttendee(Base):
    __tablename__ = "event_attendees"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    identifier = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    event = relationship("Event", back_populates="attendee_rows")

    # One RSVP per employee per event
    __table_args__ = (UniqueConstraint("event_id", "identifier", name="uq_event_attendee"),)
