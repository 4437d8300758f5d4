"""
Creator-facing routes for events and the tasks they own
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.schemas.auth import SessionUser
from app.schemas.event import CreatedEventSummary
from app.schemas.task import TaskResponse, CommentCreate, CommentResponse, TaskStatus
from app.services.event_service import EventService
from app.services.task_service import TaskService
from app.services.notification_service import NotificationService
from app.api.ws import websocket_manager
from app.utils.security import get_current_employee
from app.utils.responses import success_response

router = APIRouter()

notification_service = NotificationService(websocket_manager)

@router.get("")
async def list_created_tasks(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Tasks created by the current employee, one page at a time"""
    page_size = settings.TASK_PAGE_SIZE
    tasks = TaskService.list_created(db, user.email, page, page_size)
    return success_response(
        message="Tasks retrieved successfully",
        data={
            "tasks": [TaskResponse.model_validate(task) for task in tasks],
            "pagination": {
                "page": page,
                "per_page": page_size
            }
        }
    )

@router.get("/filter")
async def filter_tasks(
    status: Optional[TaskStatus] = Query(None),
    assignee: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Filter the current employee's created tasks by status or assignee"""
    tasks = TaskService.filter_tasks(
        db,
        user,
        status=status,
        assignee=assignee.lower() if assignee else None
    )
    return success_response(
        message="Tasks filtered successfully",
        data=[TaskResponse.model_validate(task) for task in tasks]
    )

@router.get("/created-events")
async def list_created_events(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Events created by the current employee"""
    events = EventService.list_created_events(db, user.email, page, settings.TASK_PAGE_SIZE)
    return success_response(
        message="Events retrieved successfully",
        data=[CreatedEventSummary.model_validate(event) for event in events]
    )

@router.get("/tasks")
async def list_event_tasks(
    eventID: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Tasks belonging to one event"""
    tasks = TaskService.list_for_event(db, eventID)
    return success_response(
        message="Tasks retrieved successfully",
        data=[TaskResponse.model_validate(task) for task in tasks]
    )

@router.get("/{task_id}")
async def get_task_details(
    task_id: str,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Details of one task"""
    task = TaskService.get_task_for(db, task_id, user)
    return success_response(
        message="Task retrieved",
        data=TaskResponse.model_validate(task)
    )

@router.get("/{task_id}/comments")
async def get_task_comments(
    task_id: str,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Comments on one task in the order they were added"""
    task = TaskService.get_task_for(db, task_id, user)
    return success_response(
        message="Comments retrieved",
        data={"comments": [CommentResponse.model_validate(comment) for comment in task.comments]}
    )

@router.post("/{task_id}/comments")
async def add_task_comment(
    task_id: str,
    comment: CommentCreate,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Comment on a task as its creator"""
    task = TaskService.add_comment(db, task_id, comment.message, user)
    await notification_service.notify_new_comment(task)
    return success_response(
        message="Comment added successfully",
        data=TaskResponse.model_validate(task),
        status_code=201
    )
