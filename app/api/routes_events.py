"""
Event routes: creation, listing, RSVP and reports
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.auth import SessionUser
from app.schemas.event import EventCreate, EventResponse
from app.services.event_service import EventService
from app.services.report_service import ReportService
from app.services.notification_service import NotificationService
from app.api.ws import websocket_manager
from app.utils.security import get_current_employee, require_roles
from app.utils.responses import success_response

router = APIRouter()

notification_service = NotificationService(websocket_manager)

@router.post("")
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_roles("manager", "admin"))
):
    """Create an event together with its tasks"""
    event = EventService.create_event(db, event_data, user)

    await notification_service.notify_new_event(event)
    await notification_service.notify_new_tasks(event.tasks)

    return success_response(
        message="Event created successfully",
        data=EventResponse.model_validate(event),
        status_code=201
    )

@router.get("")
async def list_events(
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """List all current events"""
    events = EventService.list_events(db)
    return success_response(
        message="Events retrieved successfully",
        data=[EventResponse.model_validate(event) for event in events]
    )

@router.get("/compiledReport")
async def compiled_report(
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_roles("manager", "admin"))
):
    """Events grouped by year and event type"""
    return success_response(
        message="Compiled report generated",
        data=ReportService.compiled_report(db)
    )

@router.get("/detailedReport")
async def detailed_report(
    eventName: Optional[str] = Query(None),
    team: Optional[str] = Query(None),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_roles("manager", "admin"))
):
    """Per-event attendance and task completion metrics"""
    return success_response(
        message="Detailed report generated",
        data=ReportService.detailed_report(db, event_name=eventName, team=team, year=year)
    )

@router.get("/{event_id}")
async def get_event(
    event_id: str,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Get a single event"""
    event = EventService.get_event(db, event_id)
    return success_response(
        message="Event retrieved",
        data=EventResponse.model_validate(event)
    )

@router.post("/{event_id}/rsvp")
async def rsvp(
    event_id: str,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """RSVP the current employee to an event"""
    event = EventService.rsvp(db, event_id, user)
    return success_response(
        message="RSVP confirmed",
        data=EventResponse.model_validate(event)
    )

@router.post("/{event_id}/unrsvp")
async def unrsvp(
    event_id: str,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Withdraw the current employee's RSVP"""
    event = EventService.unrsvp(db, event_id, user)
    return success_response(
        message="RSVP withdrawn",
        data=EventResponse.model_validate(event)
    )
