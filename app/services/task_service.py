"""
Task listing, status and comment service
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models import Task
from app.schemas.auth import SessionUser
from app.services.repositories import TaskRepo
from app.utils.responses import bad_request_error, forbidden_error, not_found_error
from app.utils.security import is_valid_id

logger = logging.getLogger(__name__)

class TaskService:
    """Service for task operations seen by assignees and creators"""

    @staticmethod
    def get_task(db: Session, task_id: str) -> Task:
        """Load a task or fail with 400/404"""
        if not is_valid_id(task_id):
            logger.warning(f"Invalid Task ID: {task_id}")
            bad_request_error("Invalid Task ID format")
        task = TaskRepo.get_by_id(db, task_id)
        if not task:
            logger.warning(f"Task not found for ID: {task_id}")
            not_found_error("Task")
        return task

    @staticmethod
    def get_task_for(db: Session, task_id: str, user: SessionUser) -> Task:
        """Load a task visible to its creator, its assignee or an admin"""
        task = TaskService.get_task(db, task_id)
        if user.role != "admin" and user.email not in (task.creator, task.assignee):
            forbidden_error("Only the task creator or assignee can access this task")
        return task

    @staticmethod
    def list_all(db: Session) -> List[Task]:
        return TaskRepo.list_all(db)

    @staticmethod
    def list_assigned(db: Session, assignee: str) -> List[Task]:
        return TaskRepo.list_by_assignee(db, assignee)

    @staticmethod
    def list_created(db: Session, creator: str, page: int, page_size: int) -> List[Task]:
        offset = (page - 1) * page_size
        return TaskRepo.list_by_creator(db, creator, offset, page_size)

    @staticmethod
    def list_for_event(db: Session, event_id: Optional[str]) -> List[Task]:
        if not is_valid_id(event_id):
            bad_request_error("Invalid eventID format")
        return TaskRepo.list_by_event(db, event_id)

    @staticmethod
    def filter_tasks(
        db: Session,
        user: SessionUser,
        status: Optional[str] = None,
        assignee: Optional[str] = None,
    ) -> List[Task]:
        """Equality filter on status and assignee over the caller's created tasks"""
        creator = None if user.role == "admin" else user.email
        return TaskRepo.filter(db, status=status, assignee=assignee, creator=creator)

    @staticmethod
    def update_status(db: Session, task_id: str, status: str, user: SessionUser) -> Task:
        """Set a task's status; every transition is allowed"""
        task = TaskService.get_task(db, task_id)
        if user.role != "admin" and user.email != task.assignee:
            forbidden_error("Only the assignee can update this task's status")

        previous = task.status
        task = TaskRepo.set_status(db, task, status)
        logger.info(f"Task {task.id} status changed from '{previous}' to '{status}' by {user.email}")
        return task

    @staticmethod
    def add_comment(db: Session, task_id: str, message: str, user: SessionUser) -> Task:
        """Append a comment authored by the current employee"""
        task = TaskService.get_task_for(db, task_id, user)
        task = TaskRepo.add_comment(db, task, author=user.email, message=message)
        logger.info(f"Comment added by {user.email} on Task ID: {task.id}")
        return task
