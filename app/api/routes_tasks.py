"""
Assignee-facing task routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.auth import SessionUser
from app.schemas.task import TaskResponse, TaskStatusSummary, StatusUpdate, CommentCreate
from app.services.task_service import TaskService
from app.services.notification_service import NotificationService
from app.api.ws import websocket_manager
from app.utils.security import get_current_employee
from app.utils.responses import success_response

router = APIRouter()

notification_service = NotificationService(websocket_manager)

@router.get("")
async def list_task_statuses(
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """All tasks with only their event and status"""
    tasks = TaskService.list_all(db)
    return success_response(
        message="Tasks retrieved successfully",
        data=[TaskStatusSummary.model_validate(task) for task in tasks]
    )

@router.get("/assigned")
async def list_assigned_tasks(
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Tasks assigned to the current employee"""
    tasks = TaskService.list_assigned(db, user.email)
    return success_response(
        message=f"Fetched {len(tasks)} tasks",
        data=[TaskResponse.model_validate(task) for task in tasks]
    )

@router.get("/assigned/{task_id}")
async def get_assigned_task(
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

@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: str,
    status_update: StatusUpdate,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Set the status of an assigned task"""
    task = TaskService.update_status(db, task_id, status_update.status, user)
    return success_response(
        message="Task status updated",
        data=TaskResponse.model_validate(task)
    )

@router.post("/assigned/{task_id}/comments")
async def add_assigned_task_comment(
    task_id: str,
    comment: CommentCreate,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(get_current_employee)
):
    """Comment on an assigned task"""
    task = TaskService.add_comment(db, task_id, comment.message, user)
    await notification_service.notify_new_comment(task)
    return success_response(
        message="Comment added successfully",
        data=TaskResponse.model_validate(task),
        status_code=201
    )
