"""
Live notification service broadcasting over the WebSocket manager
"""

from datetime import datetime
from typing import Iterable

from app.api.ws import WebSocketManager
from app.models import Event, Task

class NotificationService:
    """Service for pushing task, comment and event notifications"""

    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager

    async def notify_new_event(self, event: Event):
        """Announce a new event to every connected employee"""

        message = {
            "type": "newEvent",
            "data": {
                "id": event.id,
                "eventName": event.event_name,
                "eventType": event.event_type,
                "date": event.date.isoformat() if event.date else None,
                "creator": event.creator
            },
            "timestamp": datetime.utcnow().isoformat()
        }

        await self.websocket_manager.broadcast(message)

    async def notify_new_tasks(self, tasks: Iterable[Task]):
        """Tell each assignee about a task created for them"""
        for task in tasks:
            message = {
                "type": "newTask",
                "data": {
                    "id": task.id,
                    "taskName": task.task_name,
                    "eventName": task.event_name,
                    "eventId": task.event_id,
                    "creator": task.creator,
                    "deadline": task.deadline.isoformat() if task.deadline else None
                },
                "timestamp": datetime.utcnow().isoformat()
            }
            await self.websocket_manager.send_to_employee(task.assignee, message)

    async def notify_new_comment(self, task: Task):
        """Tell the other party of a task about its latest comment"""
        if not task.comments:
            return
        comment = task.comments[-1]

        message = {
            "type": "newComment",
            "data": {
                "taskId": task.id,
                "taskName": task.task_name,
                "author": comment.author,
                "message": comment.message,
                "timestamp": comment.timestamp.isoformat()
            },
            "timestamp": datetime.utcnow().isoformat()
        }

        for recipient in {task.creator, task.assignee} - {comment.author}:
            await self.websocket_manager.send_to_employee(recipient, message)
