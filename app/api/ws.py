"""
WebSocket manager for live task, comment and event notifications
"""

import json
import logging
from collections import defaultdict
from typing import Dict, List, Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, HTTPException

from app.core.db import SessionLocal
from app.schemas.auth import SessionUser
from app.utils.security import load_session_user

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages WebSocket connections, one room per employee email.

    Delivery is at-most-once: a message sent while a client is disconnected
    is lost. Each employee has their own ``seq`` counter that advances for
    every message addressed to them, delivered or not, so a client that sees
    a jump knows it missed something and can refetch.
    """

    def __init__(self):
        # employee email -> list of websockets
        self.active_connections: Dict[str, List[WebSocket]] = {}
        # employee email -> last seq addressed to them
        self._seq: Dict[str, int] = defaultdict(int)

    async def connect(self, websocket: WebSocket, email: str):
        """Accept the socket and join the employee's room"""
        await websocket.accept()
        room = self.active_connections.setdefault(email, [])
        room.append(websocket)
        self._seq.setdefault(email, 0)
        logger.info(f"WebSocket connected for {email}. Total connections: {len(room)}")

    def disconnect(self, websocket: WebSocket, email: str):
        """Leave the employee's room; unknown sockets are ignored"""
        room = self.active_connections.get(email)
        if not room or websocket not in room:
            return
        room.remove(websocket)
        logger.info(f"WebSocket disconnected for {email}. Remaining connections: {len(room)}")
        if not room:
            del self.active_connections[email]

    def stamp(self, email: str, message: dict) -> dict:
        """Attach the recipient's next sequence number"""
        self._seq[email] += 1
        return {**message, "seq": self._seq[email]}

    def last_seq(self, email: str) -> int:
        return self._seq.get(email, 0)

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def _send_all(self, email: str, payload: str):
        # Copy so a disconnect during iteration is safe
        connections = self.active_connections.get(email, []).copy()

        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(payload)
            except Exception as e:
                logger.error(f"Error sending to websocket of {email}: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, email)

    async def send_to_employee(self, email: str, message: dict):
        """Send message to every connection of one employee"""
        stamped = self.stamp(email, message)
        if email not in self.active_connections:
            logger.debug(f"No active connections for {email}; seq {stamped['seq']} dropped")
            return
        await self._send_all(email, json.dumps(stamped))

    async def broadcast(self, message: dict):
        """Send message to every employee seen by this process"""
        for email in list(self._seq):
            stamped = self.stamp(email, message)
            if email in self.active_connections:
                await self._send_all(email, json.dumps(stamped))

    def get_connection_count(self, email: str) -> int:
        """Get number of active connections for an employee"""
        return len(self.active_connections.get(email, []))

# Global WebSocket manager instance
websocket_manager = WebSocketManager()

# Router for WebSocket endpoints
router = APIRouter()

def _authenticate(token: str) -> Optional[SessionUser]:
    """Resolve the token with a session released before the socket is held open"""
    if not token:
        return None
    db = SessionLocal()
    try:
        return load_session_user(token, db)
    except HTTPException as exc:
        logger.info(f"WebSocket rejected: {exc.detail}")
        return None
    finally:
        db.close()

def _reply_to(data: str) -> Optional[dict]:
    """Response to a client frame; only heartbeats get one"""
    try:
        client_message = json.loads(data)
    except json.JSONDecodeError:
        logger.warning(f"Invalid JSON received from WebSocket: {data}")
        return None
    if isinstance(client_message, dict) and client_message.get("type") == "ping":
        return {"type": "pong", "timestamp": client_message.get("timestamp")}
    return None

@router.websocket("/notifications")
async def websocket_endpoint(websocket: WebSocket, token: str = ""):
    """Live notifications for the employee the token was issued to"""
    user = _authenticate(token)
    if user is None:
        await websocket.close(code=4401, reason="Unauthorized")
        return

    email = user.email
    await websocket_manager.connect(websocket, email)
    await websocket_manager.send_personal_message({
        "type": "connection",
        "message": f"Connected as {email}",
        "connection_count": websocket_manager.get_connection_count(email),
        "last_seq": websocket_manager.last_seq(email)
    }, websocket)

    try:
        while True:
            reply = _reply_to(await websocket.receive_text())
            if reply is not None:
                await websocket_manager.send_personal_message(reply, websocket)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"Error in WebSocket loop for {email}: {e}")
    finally:
        websocket_manager.disconnect(websocket, email)
