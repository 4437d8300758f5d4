"""
Repository layer wrapping the SQLAlchemy queries for each collection.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Employee, Event, EventAttendee, Task, TaskComment, Payment, PaymentOrder


def _task_order():
    # Earliest deadline first, undated tasks ahead of dated ones, then oldest first
    return (Task.deadline.asc().nulls_first(), Task.created_at.asc(), Task.id.asc())


# -------- Employee repository --------

class EmployeeRepo:
    @staticmethod
    def get_by_id(db: Session, employee_id: str) -> Optional[Employee]:
        return db.query(Employee).filter(Employee.id == employee_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Employee]:
        return db.query(Employee).filter(Employee.email == email).first()

    @staticmethod
    def create(db: Session, name: str, email: str, password_hash: str, team: str = "General", role: str = "employee") -> Employee:
        employee = Employee(name=name, email=email, password_hash=password_hash, team=team, role=role)
        db.add(employee)
        db.commit()
        db.refresh(employee)
        return employee


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get_by_id(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def list_all(db: Session) -> List[Event]:
        return db.query(Event).order_by(Event.date.asc().nulls_first(), Event.created_at.asc()).all()

    @staticmethod
    def list_by_creator(db: Session, creator: str, offset: int, limit: int) -> List[Event]:
        return (
            db.query(Event)
            .filter(Event.creator == creator)
            .order_by(Event.date.asc().nulls_first(), Event.created_at.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def search(
        db: Session,
        event_name: Optional[str] = None,
        team: Optional[str] = None,
        year: Optional[int] = None,
    ) -> List[Event]:
        query = db.query(Event)
        if event_name:
            query = query.filter(Event.event_name.ilike(f"%{event_name}%"))
        if team:
            query = query.filter(Event.team == team)
        if year:
            query = query.filter(Event.date >= datetime(year, 1, 1), Event.date < datetime(year + 1, 1, 1))
        return query.order_by(Event.date.asc().nulls_first(), Event.created_at.asc()).all()

    @staticmethod
    def claim_slot(db: Session, event_id: str) -> bool:
        """Atomically take one slot; False when none are left"""
        updated = (
            db.query(Event)
            .filter(Event.id == event_id, Event.available_slots > 0)
            .update({Event.available_slots: Event.available_slots - 1}, synchronize_session=False)
        )
        return updated == 1

    @staticmethod
    def release_slot(db: Session, event_id: str) -> None:
        (
            db.query(Event)
            .filter(Event.id == event_id, Event.available_slots.isnot(None))
            .update({Event.available_slots: Event.available_slots + 1}, synchronize_session=False)
        )

    @staticmethod
    def get_attendee(db: Session, event_id: str, identifier: str) -> Optional[EventAttendee]:
        return db.query(EventAttendee).filter(
            EventAttendee.event_id == event_id,
            EventAttendee.identifier == identifier
        ).first()

    @staticmethod
    def add_attendee(db: Session, event_id: str, identifier: str) -> EventAttendee:
        attendee = EventAttendee(event_id=event_id, identifier=identifier)
        db.add(attendee)
        db.flush()
        return attendee


# -------- Task repository --------

class TaskRepo:
    @staticmethod
    def get_by_id(db: Session, task_id: str) -> Optional[Task]:
        return db.query(Task).filter(Task.id == task_id).first()

    @staticmethod
    def list_all(db: Session) -> List[Task]:
        return db.query(Task).order_by(Task.created_at.asc()).all()

    @staticmethod
    def list_by_assignee(db: Session, assignee: str) -> List[Task]:
        return db.query(Task).filter(Task.assignee == assignee).order_by(*_task_order()).all()

    @staticmethod
    def list_by_creator(db: Session, creator: str, offset: int, limit: int) -> List[Task]:
        return (
            db.query(Task)
            .filter(Task.creator == creator)
            .order_by(*_task_order())
            .offset(offset)
            .limit(limit)
            .all()
        )

    @staticmethod
    def list_by_event(db: Session, event_id: str) -> List[Task]:
        return db.query(Task).filter(Task.event_id == event_id).order_by(*_task_order()).all()

    @staticmethod
    def filter(
        db: Session,
        status: Optional[str] = None,
        assignee: Optional[str] = None,
        creator: Optional[str] = None,
    ) -> List[Task]:
        query = db.query(Task)
        if status:
            query = query.filter(Task.status == status)
        if assignee:
            query = query.filter(Task.assignee == assignee)
        if creator:
            query = query.filter(Task.creator == creator)
        return query.order_by(*_task_order()).all()

    @staticmethod
    def set_status(db: Session, task: Task, status: str) -> Task:
        task.status = status
        task.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def add_comment(db: Session, task: Task, author: str, message: str) -> Task:
        timestamp = datetime.utcnow()
        if task.comments and task.comments[-1].timestamp and task.comments[-1].timestamp > timestamp:
            # Keep the thread ordered even if the clock stepped back
            timestamp = task.comments[-1].timestamp
        task.comments.append(TaskComment(author=author, message=message, timestamp=timestamp))
        task.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def status_counts_by_event(db: Session, event_ids: List[str]) -> Dict[str, Dict[str, int]]:
        """Task counts per event and status, in one grouped query"""
        counts: Dict[str, Dict[str, int]] = defaultdict(dict)
        if not event_ids:
            return counts
        rows = (
            db.query(Task.event_id, Task.status, func.count(Task.id))
            .filter(Task.event_id.in_(event_ids))
            .group_by(Task.event_id, Task.status)
            .all()
        )
        for event_id, status, count in rows:
            counts[event_id][status] = count
        return counts


# -------- Payment repository --------

class PaymentRepo:
    @staticmethod
    def get_by_payment_id(db: Session, payment_id: str) -> Optional[Payment]:
        return db.query(Payment).filter(Payment.payment_id == payment_id).first()

    @staticmethod
    def add(db: Session, payment_id: str, order_id: str, event_id: str, employee_email: str) -> Payment:
        payment = Payment(
            payment_id=payment_id,
            order_id=order_id,
            event_id=event_id,
            employee_email=employee_email,
        )
        db.add(payment)
        db.flush()
        return payment

    @staticmethod
    def get_order(db: Session, order_id: str) -> Optional[PaymentOrder]:
        return db.query(PaymentOrder).filter(PaymentOrder.order_id == order_id).first()

    @staticmethod
    def add_order(
        db: Session,
        order_id: str,
        event_id: Optional[str],
        amount: int,
        currency: str,
        employee_email: str,
    ) -> PaymentOrder:
        order = PaymentOrder(
            order_id=order_id,
            event_id=event_id,
            amount=amount,
            currency=currency,
            employee_email=employee_email,
        )
        db.add(order)
        db.flush()
        return order
