"""
WebSocket Manager.
"""
from fastapi import WebSocket
from typing import Any, Dict, List
import json
import logging

logger = logging.getLogger("websocket")

class ConnectionManager:
    """Open notification sockets, keyed by user id (a user may have several tabs)."""

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        await websocket.accept()
        self.active_connections.setdefault(user_id, []).append(websocket)
        logger.info(f"User {user_id} connected")

    def disconnect(self, websocket: WebSocket, user_id: str):
        if user_id in self.active_connections:
            if websocket in self.active_connections[user_id]:
                self.active_connections[user_id].remove(websocket)
            if not self.active_connections[user_id]:
                del self.active_connections[user_id]
        logger.info(f"User {user_id} disconnected")

    def is_online(self, user_id: str) -> bool:
        return user_id in self.active_connections

    async def send_to_user(self, user_id: str, payload: Dict[str, Any]):
        """Send payload to every open socket of user_id. Offline users are skipped."""
        message_json = json.dumps(payload, default=str)

        for connection in list(self.active_connections.get(user_id, [])):
            try:
                await connection.send_text(message_json)
            except Exception as e:
                logger.error(f"Error sending to {user_id}: {e}")

manager = ConnectionManager()
