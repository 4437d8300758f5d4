"""
Tests for task listing, status updates and comments
"""

import itertools
import random
import pytest
from datetime import datetime, timedelta
from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base
from app.models import Event, Task
from app.schemas.auth import SessionUser
from app.services.task_service import TaskService

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_tasks.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

MANAGER = SessionUser(id="m-1", email="manager@example.com", name="Maya Manager", role="manager", team="Events")
ASSIGNEE = SessionUser(id="e-1", email="dev@example.com", name="Dev Worker", role="employee", team="General")
STRANGER = SessionUser(id="e-2", email="other@example.com", name="Other Person", role="employee", team="General")
ADMIN = SessionUser(id="a-1", email="admin@example.com", name="Ada Admin", role="admin", team="General")

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

@pytest.fixture
def sample_event(db_session):
    """Create an event owned by the manager"""
    event = Event(
        event_name="Annual Offsite",
        event_type="firm-wide",
        date=datetime(2024, 9, 1),
        description="Company offsite",
        total_budget=5000,
        creator=MANAGER.email
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event

@pytest.fixture
def sample_task(db_session, sample_event):
    """Create a single pending task assigned to the employee"""
    task = Task(
        task_name="Book venue",
        description="Find and book the venue",
        event_name=sample_event.event_name,
        event_id=sample_event.id,
        creator=MANAGER.email,
        assignee=ASSIGNEE.email,
        deadline=datetime(2024, 8, 1)
    )
    db_session.add(task)
    db_session.commit()
    db_session.refresh(task)
    return task

def test_new_task_defaults_to_pending(sample_task):
    """Test default status and empty comment thread"""
    assert sample_task.status == "Pending"
    assert sample_task.comments == []

@pytest.mark.parametrize(
    "first,second",
    list(itertools.permutations(["Pending", "In Progress", "Completed"], 2))
)
def test_status_update_accepts_any_transition(db_session, sample_task, first, second):
    """Test that the stored status is always the last value set"""
    TaskService.update_status(db_session, sample_task.id, first, ASSIGNEE)
    task = TaskService.update_status(db_session, sample_task.id, second, ASSIGNEE)

    assert task.status == second
    db_session.expire_all()
    assert TaskService.get_task(db_session, sample_task.id).status == second

def test_status_update_forward_and_back(db_session, sample_task):
    """Test a full forward run followed by a reopen"""
    for status in ["In Progress", "Completed", "Pending"]:
        task = TaskService.update_status(db_session, sample_task.id, status, ASSIGNEE)
        assert task.status == status

def test_status_update_by_admin(db_session, sample_task):
    """Test that an admin can update any task"""
    task = TaskService.update_status(db_session, sample_task.id, "Completed", ADMIN)
    assert task.status == "Completed"

def test_status_update_rejects_non_assignee(db_session, sample_task):
    """Test that other employees cannot change the status"""
    with pytest.raises(HTTPException) as exc_info:
        TaskService.update_status(db_session, sample_task.id, "Completed", STRANGER)
    assert exc_info.value.status_code == 403

    db_session.expire_all()
    assert TaskService.get_task(db_session, sample_task.id).status == "Pending"

def test_invalid_task_id_format(db_session):
    """Test that malformed identifiers are rejected before lookup"""
    with pytest.raises(HTTPException) as exc_info:
        TaskService.get_task(db_session, "not-a-task-id")
    assert exc_info.value.status_code == 400

def test_unknown_task_id(db_session):
    """Test that a well-formed but unknown id is a 404"""
    with pytest.raises(HTTPException) as exc_info:
        TaskService.update_status(db_session, "1b4e28ba-2fa1-11d2-883f-0016d3cca427", "Completed", ASSIGNEE)
    assert exc_info.value.status_code == 404

def test_comments_keep_insertion_order(db_session, sample_task):
    """Test that comments are appended in order with non-decreasing timestamps"""
    TaskService.add_comment(db_session, sample_task.id, "Venue shortlisted", ASSIGNEE)
    task = TaskService.add_comment(db_session, sample_task.id, "Go with option B", MANAGER)

    assert [(c.author, c.message) for c in task.comments] == [
        (ASSIGNEE.email, "Venue shortlisted"),
        (MANAGER.email, "Go with option B"),
    ]
    assert task.comments[0].timestamp <= task.comments[1].timestamp

def test_comment_timestamp_never_goes_backwards(db_session, sample_task):
    """Test that a comment after a future-dated one keeps the thread ordered"""
    first = TaskService.add_comment(db_session, sample_task.id, "First", ASSIGNEE)
    first.comments[0].timestamp = datetime.utcnow() + timedelta(hours=1)
    db_session.commit()

    task = TaskService.add_comment(db_session, sample_task.id, "Second", MANAGER)
    assert task.comments[0].timestamp <= task.comments[1].timestamp

def test_comment_rejected_for_stranger(db_session, sample_task):
    """Test that only the creator or assignee can comment"""
    with pytest.raises(HTTPException) as exc_info:
        TaskService.add_comment(db_session, sample_task.id, "Hello", STRANGER)
    assert exc_info.value.status_code == 403

    db_session.expire_all()
    assert TaskService.get_task(db_session, sample_task.id).comments == []

def test_created_tasks_pagination(db_session, sample_event):
    """Test that page 2 of 25 tasks returns tasks 11-20 ordered by deadline"""
    days = list(range(1, 26))
    random.Random(7).shuffle(days)
    for day in days:
        db_session.add(Task(
            task_name=f"Task {day:02d}",
            description="",
            event_name=sample_event.event_name,
            event_id=sample_event.id,
            creator=MANAGER.email,
            assignee=ASSIGNEE.email,
            deadline=datetime(2024, 7, day)
        ))
    db_session.commit()

    page = TaskService.list_created(db_session, MANAGER.email, page=2, page_size=10)

    assert [task.task_name for task in page] == [f"Task {day:02d}" for day in range(11, 21)]

    last_page = TaskService.list_created(db_session, MANAGER.email, page=3, page_size=10)
    assert len(last_page) == 5

def test_assigned_tasks_sorted_by_deadline(db_session, sample_event):
    """Test assignee listing order and that other assignees are excluded"""
    rows = [
        ("Late", ASSIGNEE.email, datetime(2024, 8, 20)),
        ("Undated", ASSIGNEE.email, None),
        ("Early", ASSIGNEE.email, datetime(2024, 8, 1)),
        ("Not mine", STRANGER.email, datetime(2024, 7, 1)),
    ]
    for name, assignee, deadline in rows:
        db_session.add(Task(
            task_name=name,
            event_name=sample_event.event_name,
            event_id=sample_event.id,
            creator=MANAGER.email,
            assignee=assignee,
            deadline=deadline
        ))
    db_session.commit()

    tasks = TaskService.list_assigned(db_session, ASSIGNEE.email)
    assert [task.task_name for task in tasks] == ["Undated", "Early", "Late"]

def test_filter_tasks_by_status_and_assignee(db_session, sample_event):
    """Test the ad-hoc equality filter"""
    for name, assignee, status in [
        ("A", ASSIGNEE.email, "Pending"),
        ("B", ASSIGNEE.email, "Completed"),
        ("C", STRANGER.email, "Completed"),
    ]:
        db_session.add(Task(
            task_name=name,
            event_name=sample_event.event_name,
            event_id=sample_event.id,
            creator=MANAGER.email,
            assignee=assignee,
            status=status
        ))
    db_session.commit()

    completed = TaskService.filter_tasks(db_session, MANAGER, status="Completed")
    assert sorted(task.task_name for task in completed) == ["B", "C"]

    mine_completed = TaskService.filter_tasks(db_session, MANAGER, status="Completed", assignee=ASSIGNEE.email)
    assert [task.task_name for task in mine_completed] == ["B"]

    # Only tasks the caller created are visible to non-admins
    assert TaskService.filter_tasks(db_session, STRANGER, status="Completed") == []
    assert len(TaskService.filter_tasks(db_session, ADMIN)) == 3

def test_list_for_event(db_session, sample_event, sample_task):
    """Test listing tasks by event id"""
    tasks = TaskService.list_for_event(db_session, sample_event.id)
    assert [task.id for task in tasks] == [sample_task.id]

    with pytest.raises(HTTPException) as exc_info:
        TaskService.list_for_event(db_session, "12345")
    assert exc_info.value.status_code == 400
