"""
Ticket payment routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.auth import SessionUser
from app.schemas.event import EventResponse
from app.schemas.payment import CreateOrderRequest, ConfirmPaymentRequest
from app.services.payment_gateway import RazorpayClient, get_payment_gateway
from app.services.payment_service import PaymentService
from app.utils.security import get_current_employee
from app.utils.responses import success_response

router = APIRouter()

@router.post("/create-order")
async def create_order(
    order_data: CreateOrderRequest,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee),
    gateway: RazorpayClient = Depends(get_payment_gateway)
):
    """Create a payment order for an event ticket"""
    order = PaymentService(gateway).create_order(db, order_data, user)
    return success_response(
        message="Order created",
        data=order
    )

@router.post("/confirm-payment")
async def confirm_payment(
    payment: ConfirmPaymentRequest,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee),
    gateway: RazorpayClient = Depends(get_payment_gateway)
):
    """Verify a completed payment and RSVP the payer"""
    event, already_confirmed = PaymentService(gateway).confirm_payment(db, payment, user)
    message = "Payment already confirmed" if already_confirmed else "Payment successful! RSVP confirmed."
    return success_response(
        message=message,
        data={
            "event": EventResponse.model_validate(event),
            "already_confirmed": already_confirmed
        }
    )
