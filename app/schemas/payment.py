"""
Payment schemas
"""

from typing import Optional
from pydantic import Field

from app.schemas.common import CamelModel

class CreateOrderRequest(CamelModel):
    # Major currency units; the event's ticket price wins when eventId is given
    amount: Optional[float] = Field(default=None, gt=0)
    event_id: Optional[str] = None

class ConfirmPaymentRequest(CamelModel):
    event_id: str
    razorpay_order_id: str = Field(min_length=1)
    razorpay_payment_id: str = Field(min_length=1)
    razorpay_signature: str = Field(min_length=1)
