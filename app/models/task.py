"""
Task model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.db import Base

TASK_STATUSES = ("Pending", "In Progress", "Completed")

class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    task_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    event_name = Column(String(255), nullable=False)  # denormalized from the owning event
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="Pending")
    budget = Column(Float, nullable=True)
    creator = Column(String(255), nullable=False, index=True)
    assignee = Column(String(255), nullable=False, index=True)
    deadline = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    event = relationship("Event", back_populates="tasks")
    comments = relationship(
        "TaskComment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskComment.id",
    )


class TaskComment(Base):
    __tablename__ = "task_comments"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(String(36), ForeignKey("tasks.id"), nullable=False, index=True)
    author = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)

    # Relationships
    task = relationship("Task", back_populates="comments")
