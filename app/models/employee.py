"""
Employee model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime

from app.core.db import Base

ROLES = ("employee", "manager", "admin")

class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    team = Column(String(100), nullable=False, default="General")
    role = Column(String(20), nullable=False, default="employee")  # employee, manager, admin
    created_at = Column(DateTime, default=datetime.utcnow)
