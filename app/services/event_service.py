"""
Event creation and RSVP service
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Event, Task
from app.schemas.auth import SessionUser
from app.schemas.event import EventCreate
from app.services.repositories import EventRepo
from app.utils.responses import bad_request_error, forbidden_error, not_found_error
from app.utils.security import is_valid_id

logger = logging.getLogger(__name__)


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store datetimes as naive UTC"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class EventService:
    """Service for event operations"""

    @staticmethod
    def get_event(db: Session, event_id: str) -> Event:
        """Load an event or fail with 400/404"""
        if not is_valid_id(event_id):
            bad_request_error("Invalid Event ID format")
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            not_found_error("Event")
        return event

    @staticmethod
    def list_events(db: Session) -> List[Event]:
        return EventRepo.list_all(db)

    @staticmethod
    def create_event(db: Session, event_data: EventCreate, creator: SessionUser) -> Event:
        """Create an event and the tasks submitted with it"""
        event_type = event_data.event_type
        available_slots = None
        ticket_price = None
        team = ""

        if event_type == "limited-entry":
            if event_data.available_slots is None:
                bad_request_error("availableSlots is required for limited-entry events")
            available_slots = event_data.available_slots
            ticket_price = event_data.ticket_price
        elif event_type == "team-specific":
            team = (event_data.team or "").strip()
            if not team:
                bad_request_error("team is required for team-specific events")

        event_date = _naive_utc(event_data.date)
        if event_date is not None:
            for task_data in event_data.tasks:
                deadline = _naive_utc(task_data.deadline)
                if deadline is not None and deadline >= event_date:
                    bad_request_error(
                        f'Task deadline for "{task_data.task_name}" must be before the event date'
                    )

        event = Event(
            event_name=event_data.event_name,
            event_type=event_type,
            date=event_date,
            venue=event_data.venue,
            description=event_data.description,
            available_slots=available_slots,
            ticket_price=ticket_price,
            total_budget=event_data.total_budget,
            team=team,
            is_paid=bool(ticket_price and ticket_price > 0),
            creator=creator.email,
        )
        db.add(event)
        db.flush()

        for task_data in event_data.tasks:
            db.add(Task(
                task_name=task_data.task_name,
                description=task_data.description,
                event_name=event.event_name,
                event_id=event.id,
                budget=task_data.budget,
                creator=creator.email,
                assignee=task_data.assignee.lower(),
                deadline=_naive_utc(task_data.deadline),
            ))

        db.commit()
        db.refresh(event)
        logger.info(f"Event {event.id} '{event.event_name}' created by {creator.email} with {len(event_data.tasks)} tasks")
        return event

    @staticmethod
    def register_attendee(db: Session, event: Event, identifier: str) -> None:
        """Add an attendee inside the caller's transaction.

        Limited-entry events take a slot with a conditional update so two
        concurrent RSVPs can never drive the count below zero. A duplicate
        attendee surfaces as an IntegrityError from the unique constraint.
        """
        if event.event_type == "limited-entry" and not EventRepo.claim_slot(db, event.id):
            db.rollback()
            logger.warning(f"No slots left on event {event.id} for {identifier}")
            bad_request_error("No slots available for this event")
        EventRepo.add_attendee(db, event.id, identifier)

    @staticmethod
    def rsvp(db: Session, event_id: str, user: SessionUser) -> Event:
        """RSVP the current employee to a free event"""
        event = EventService.get_event(db, event_id)

        if event.is_paid:
            bad_request_error("This event requires payment; use the payment flow to RSVP")
        if event.event_type == "team-specific" and event.team != user.team:
            forbidden_error(f"This event is limited to team {event.team}")
        if EventRepo.get_attendee(db, event.id, user.email):
            bad_request_error("Already RSVP'd to this event")

        try:
            EventService.register_attendee(db, event, user.email)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"Duplicate RSVP by {user.email} for event {event.id}")
            bad_request_error("Already RSVP'd to this event")

        db.refresh(event)
        logger.info(f"{user.email} RSVP'd to event {event.id}")
        return event

    @staticmethod
    def unrsvp(db: Session, event_id: str, user: SessionUser) -> Event:
        """Withdraw the current employee's RSVP"""
        event = EventService.get_event(db, event_id)

        attendee = EventRepo.get_attendee(db, event.id, user.email)
        if not attendee:
            bad_request_error("Not RSVP'd to this event")

        db.delete(attendee)
        if event.event_type == "limited-entry":
            EventRepo.release_slot(db, event.id)
        db.commit()
        db.refresh(event)
        logger.info(f"{user.email} withdrew RSVP from event {event.id}")
        return event

    @staticmethod
    def list_created_events(db: Session, creator: str, page: int, page_size: int) -> List[Event]:
        offset = (page - 1) * page_size
        return EventRepo.list_by_creator(db, creator, offset, page_size)

