"""
Database models package
"""

from .employee import Employee
from .event import Event, EventAttendee
from .task import Task, TaskComment
from .payment import Payment, PaymentOrder

__all__ = ["Employee", "Event", "EventAttendee", "Task", "TaskComment", "Payment", "PaymentOrder"]
