"""
Pydantic schemas package
"""

from .common import *
from .auth import *
from .task import *
from .event import *
from .payment import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "RegisterRequest",
    "LoginRequest",
    "SessionUser",
    "EmployeeResponse",
    "TokenResponse",
    "TaskInput",
    "TaskResponse",
    "TaskStatusSummary",
    "StatusUpdate",
    "CommentCreate",
    "CommentResponse",
    "EventCreate",
    "EventResponse",
    "CreatedEventSummary",
    "CompiledReportRow",
    "DetailedReportRow",
    "CreateOrderRequest",
    "ConfirmPaymentRequest"
]
