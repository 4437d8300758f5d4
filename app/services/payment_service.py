"""
Ticket payment service built on the gateway client
"""

import logging
import uuid
from typing import Any, Dict, Tuple

import requests
from fastapi import HTTPException, status
from razorpay.errors import BadRequestError, GatewayError, ServerError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models import Event
from app.schemas.auth import SessionUser
from app.schemas.payment import ConfirmPaymentRequest, CreateOrderRequest
from app.services.event_service import EventService
from app.services.payment_gateway import RazorpayClient
from app.services.repositories import EventRepo, PaymentRepo
from app.utils.responses import bad_request_error, forbidden_error

logger = logging.getLogger(__name__)

GATEWAY_ERRORS = (BadRequestError, GatewayError, ServerError, requests.RequestException)


def _minor_units(amount: float) -> int:
    return int(round(amount * 100))


class PaymentService:
    """Service for paid-event orders and confirmations"""

    def __init__(self, gateway: RazorpayClient):
        self.gateway = gateway

    def create_order(self, db: Session, order_data: CreateOrderRequest, user: SessionUser) -> Dict[str, Any]:
        """Create a gateway order for a ticket and remember what it was for"""
        amount = order_data.amount
        notes = {"employee": user.email}
        event_id = None

        if order_data.event_id:
            event = EventService.get_event(db, order_data.event_id)
            if event.ticket_price:
                amount = event.ticket_price
            event_id = event.id
            notes["eventId"] = event.id

        if not amount:
            bad_request_error("amount or a paid eventId is required")

        minor_amount = _minor_units(amount)
        try:
            order = self.gateway.create_order(
                amount=minor_amount,
                currency=settings.PAYMENT_CURRENCY,
                receipt=f"rcpt_{uuid.uuid4().hex[:20]}",
                notes=notes,
            )
        except GATEWAY_ERRORS as e:
            logger.error(f"Payment gateway order creation failed: {e}")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Payment gateway error")

        PaymentRepo.add_order(
            db,
            order_id=order["id"],
            event_id=event_id,
            amount=minor_amount,
            currency=settings.PAYMENT_CURRENCY,
            employee_email=user.email,
        )
        db.commit()
        logger.info(f"Order {order['id']} created for {user.email} ({amount} {settings.PAYMENT_CURRENCY})")
        return order

    def confirm_payment(self, db: Session, payment: ConfirmPaymentRequest, user: SessionUser) -> Tuple[Event, bool]:
        """Verify a checkout and RSVP the payer.

        The order must be one this service created, for the same event and
        payer, and for at least the event's ticket price. Returns the event
        and whether this payment id had already been confirmed, in which
        case nothing is written.
        """
        if not self.gateway.verify_payment_signature(
            payment.razorpay_order_id,
            payment.razorpay_payment_id,
            payment.razorpay_signature,
        ):
            logger.warning(f"Signature mismatch for payment {payment.razorpay_payment_id} from {user.email}")
            bad_request_error("Payment verification failed")

        event = EventService.get_event(db, payment.event_id)

        if PaymentRepo.get_by_payment_id(db, payment.razorpay_payment_id):
            logger.info(f"Payment {payment.razorpay_payment_id} already confirmed")
            return event, True

        order = PaymentRepo.get_order(db, payment.razorpay_order_id)
        if order is None or order.event_id != event.id:
            logger.warning(f"Order {payment.razorpay_order_id} does not belong to event {event.id}")
            bad_request_error("Order does not match this event")
        if order.employee_email != user.email:
            forbidden_error("Order belongs to another employee")
        if not event.is_paid:
            bad_request_error("This event does not require payment")
        if order.amount < _minor_units(event.ticket_price or 0):
            logger.warning(f"Order {order.order_id} amount {order.amount} is below the ticket price of event {event.id}")
            bad_request_error("Order amount does not cover the ticket price")

        if event.event_type == "team-specific" and event.team != user.team:
            forbidden_error(f"This event is limited to team {event.team}")
        if EventRepo.get_attendee(db, event.id, user.email):
            bad_request_error("Already RSVP'd to this event")

        try:
            PaymentRepo.add(
                db,
                payment_id=payment.razorpay_payment_id,
                order_id=payment.razorpay_order_id,
                event_id=event.id,
                employee_email=user.email,
            )
            EventService.register_attendee(db, event, user.email)
            db.commit()
        except IntegrityError:
            db.rollback()
            if PaymentRepo.get_by_payment_id(db, payment.razorpay_payment_id):
                return event, True
            bad_request_error("Already RSVP'd to this event")

        db.refresh(event)
        logger.info(f"Payment {payment.razorpay_payment_id} confirmed; {user.email} RSVP'd to event {event.id}")
        return event, False
