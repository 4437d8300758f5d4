"""
Payment order and confirmation models
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey

from app.core.db import Base

class PaymentOrder(Base):
    """Gateway order as created by this service, used to bind a confirmation to its event"""
    __tablename__ = "payment_orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(100), unique=True, nullable=False, index=True)
    # Null for free-amount orders not tied to an event
    event_id = Column(String(36), ForeignKey("events.id"), nullable=True)
    amount = Column(Integer, nullable=False)  # minor units
    currency = Column(String(10), nullable=False)
    employee_email = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    # Gateway payment id; unique so a replayed confirmation cannot RSVP twice
    payment_id = Column(String(100), unique=True, nullable=False, index=True)
    order_id = Column(String(100), nullable=False)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False)
    employee_email = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
