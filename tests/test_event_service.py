"""
Tests for event creation and RSVP handling
"""

import pytest
from datetime import datetime
from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.models import Event, EventAttendee, Task
from app.schemas.auth import SessionUser
from app.schemas.event import EventCreate
from app.services.event_service import EventService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_events.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

MANAGER = SessionUser(id="m-1", email="manager@example.com", name="Maya Manager", role="manager", team="Events")
ALICE = SessionUser(id="e-1", email="alice@example.com", name="Alice", role="employee", team="Engineering")
BOB = SessionUser(id="e-2", email="bob@example.com", name="Bob", role="employee", team="Sales")

@pytest.fixture
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)

def make_event(db_session, **overrides):
    """Helper to insert an event directly"""
    fields = {
        "event_name": "Hackathon",
        "event_type": "firm-wide",
        "date": datetime(2024, 11, 5),
        "description": "Two day hackathon",
        "total_budget": 1000,
        "creator": MANAGER.email,
    }
    fields.update(overrides)
    event = Event(**fields)
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event

def test_create_event_with_tasks(db_session):
    """Test that tasks are created with the event and denormalized fields"""
    event_data = EventCreate(
        eventName="Winter Gala",
        eventType="firm-wide",
        date="2024-12-20",
        description="End of year party",
        totalBudget=20000,
        tasks=[
            {"taskName": "Catering", "assignee": "Alice@Example.com", "deadline": "2024-12-01", "budget": 8000},
            {"taskName": "Decor", "assignee": "bob@example.com"},
        ]
    )

    event = EventService.create_event(db_session, event_data, MANAGER)

    assert event.creator == MANAGER.email
    assert event.attendees == []
    assert event.is_paid is False
    tasks = db_session.query(Task).filter(Task.event_id == event.id).order_by(Task.task_name).all()
    assert [t.task_name for t in tasks] == ["Catering", "Decor"]
    assert all(t.event_name == "Winter Gala" for t in tasks)
    assert all(t.creator == MANAGER.email for t in tasks)
    assert all(t.status == "Pending" for t in tasks)
    assert tasks[0].assignee == "alice@example.com"
    assert tasks[0].budget == 8000
    assert tasks[1].deadline is None

def test_create_event_clears_fields_for_other_types(db_session):
    """Test that slots, price and team are kept only for the matching event type"""
    event_data = EventCreate(
        eventName="Town Hall",
        eventType="firm-wide",
        description="Quarterly update",
        availableSlots=50,
        ticketPrice=10,
        team="Sales"
    )

    event = EventService.create_event(db_session, event_data, MANAGER)

    assert event.available_slots is None
    assert event.ticket_price is None
    assert event.team == ""
    assert event.is_paid is False

def test_create_limited_entry_event(db_session):
    """Test that a priced limited-entry event is marked as paid"""
    event_data = EventCreate(
        eventName="Concert",
        eventType="limited-entry",
        description="Live music",
        availableSlots=20,
        ticketPrice=499,
        team="Sales"
    )

    event = EventService.create_event(db_session, event_data, MANAGER)

    assert event.available_slots == 20
    assert event.ticket_price == 499
    assert event.is_paid is True
    assert event.team == ""

def test_create_limited_entry_requires_slots(db_session):
    """Test that limited-entry events must declare their capacity"""
    event_data = EventCreate(eventName="Workshop", eventType="limited-entry", description="Hands-on")

    with pytest.raises(HTTPException) as exc_info:
        EventService.create_event(db_session, event_data, MANAGER)
    assert exc_info.value.status_code == 400
    assert db_session.query(Event).count() == 0

def test_create_team_event_requires_team(db_session):
    """Test that team-specific events must name a team"""
    event_data = EventCreate(eventName="Team Lunch", eventType="team-specific", description="Lunch", team="  ")

    with pytest.raises(HTTPException) as exc_info:
        EventService.create_event(db_session, event_data, MANAGER)
    assert exc_info.value.status_code == 400

def test_task_deadline_must_precede_event(db_session):
    """Test that no task may be due on or after the event date"""
    event_data = EventCreate(
        eventName="Launch",
        eventType="firm-wide",
        date="2024-06-10",
        description="Product launch",
        tasks=[{"taskName": "Press kit", "assignee": "alice@example.com", "deadline": "2024-06-10"}]
    )

    with pytest.raises(HTTPException) as exc_info:
        EventService.create_event(db_session, event_data, MANAGER)
    assert exc_info.value.status_code == 400
    assert db_session.query(Event).count() == 0
    assert db_session.query(Task).count() == 0

def test_rsvp_and_unrsvp_free_event(db_session):
    """Test RSVP appends the employee and un-RSVP removes them"""
    event = make_event(db_session)

    event = EventService.rsvp(db_session, event.id, ALICE)
    event = EventService.rsvp(db_session, event.id, BOB)
    assert event.attendees == [ALICE.email, BOB.email]

    event = EventService.unrsvp(db_session, event.id, ALICE)
    assert event.attendees == [BOB.email]

def test_duplicate_rsvp_is_rejected(db_session):
    """Test that the same employee cannot RSVP twice to a one-slot event"""
    event = make_event(db_session, event_type="limited-entry", available_slots=1)

    EventService.rsvp(db_session, event.id, ALICE)
    with pytest.raises(HTTPException) as exc_info:
        EventService.rsvp(db_session, event.id, ALICE)
    assert exc_info.value.status_code == 400

    db_session.expire_all()
    event = EventService.get_event(db_session, event.id)
    assert event.attendees == [ALICE.email]
    assert event.available_slots == 0

def test_duplicate_attendee_row_blocked_by_constraint(db_session):
    """Test the uniqueness constraint that backs the duplicate check"""
    event = make_event(db_session, event_type="limited-entry", available_slots=5)
    EventService.rsvp(db_session, event.id, ALICE)

    # Simulate a racing request that passed the pre-check
    event = EventService.get_event(db_session, event.id)
    with pytest.raises(IntegrityError):
        EventService.register_attendee(db_session, event, ALICE.email)
        db_session.commit()
    db_session.rollback()

    event = EventService.get_event(db_session, event.id)
    assert event.available_slots == 4
    assert db_session.query(EventAttendee).count() == 1

def test_rsvp_stops_when_slots_run_out(db_session):
    """Test slot consumption on limited-entry events"""
    event = make_event(db_session, event_type="limited-entry", available_slots=1)

    EventService.rsvp(db_session, event.id, ALICE)
    with pytest.raises(HTTPException) as exc_info:
        EventService.rsvp(db_session, event.id, BOB)
    assert exc_info.value.status_code == 400

    db_session.expire_all()
    event = EventService.get_event(db_session, event.id)
    assert event.attendees == [ALICE.email]
    assert event.available_slots == 0

def test_unrsvp_returns_slot(db_session):
    """Test that withdrawing frees the slot for someone else"""
    event = make_event(db_session, event_type="limited-entry", available_slots=1)

    EventService.rsvp(db_session, event.id, ALICE)
    event = EventService.unrsvp(db_session, event.id, ALICE)
    assert event.available_slots == 1

    event = EventService.rsvp(db_session, event.id, BOB)
    assert event.attendees == [BOB.email]
    assert event.available_slots == 0

def test_unrsvp_without_rsvp(db_session):
    """Test that withdrawing without an RSVP is rejected"""
    event = make_event(db_session)

    with pytest.raises(HTTPException) as exc_info:
        EventService.unrsvp(db_session, event.id, ALICE)
    assert exc_info.value.status_code == 400

def test_paid_event_requires_payment_flow(db_session):
    """Test that paid events cannot be joined through plain RSVP"""
    event = make_event(db_session, event_type="limited-entry", available_slots=10, ticket_price=250, is_paid=True)

    with pytest.raises(HTTPException) as exc_info:
        EventService.rsvp(db_session, event.id, ALICE)
    assert exc_info.value.status_code == 400

    db_session.expire_all()
    assert EventService.get_event(db_session, event.id).available_slots == 10

def test_team_event_restricted_to_team(db_session):
    """Test that team-specific events only accept their own team"""
    event = make_event(db_session, event_type="team-specific", team="Engineering")

    event = EventService.rsvp(db_session, event.id, ALICE)
    assert event.attendees == [ALICE.email]

    with pytest.raises(HTTPException) as exc_info:
        EventService.rsvp(db_session, event.id, BOB)
    assert exc_info.value.status_code == 403

def test_get_event_errors(db_session):
    """Test malformed and unknown event ids"""
    with pytest.raises(HTTPException) as exc_info:
        EventService.get_event(db_session, "abc")
    assert exc_info.value.status_code == 400

    with pytest.raises(HTTPException) as exc_info:
        EventService.get_event(db_session, "1b4e28ba-2fa1-11d2-883f-0016d3cca427")
    assert exc_info.value.status_code == 404

def test_list_created_events_paginates(db_session):
    """Test creator event listing order and page size"""
    for month in range(1, 13):
        make_event(db_session, event_name=f"Event {month:02d}", date=datetime(2024, month, 1))
    make_event(db_session, event_name="Someone else's", creator="other@example.com")

    first = EventService.list_created_events(db_session, MANAGER.email, page=1, page_size=10)
    second = EventService.list_created_events(db_session, MANAGER.email, page=2, page_size=10)

    assert [e.event_name for e in first] == [f"Event {m:02d}" for m in range(1, 11)]
    assert [e.event_name for e in second] == ["Event 11", "Event 12"]
