

from fastapi import WebSocket
from typing import List
import json
import logging
import asyncio

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks dashboard sockets that receive recognition and attendance events"""

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"Dashboard connected. Total connections: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        logger.info(f"Dashboard disconnected. Total connections: {len(self.active_connections)}")

    async def broadcast(self, event_type: str, data: dict):
        message = {"type": event_type, "data": data}
        await asyncio.gather(
            *(self._safe_send(connection, message) for connection in list(self.active_connections))
        )

    async def _safe_send(self, connection: WebSocket, message: dict):
        try:
            await connection.send_text(json.dumps(message, default=str))
        except Exception as e:
            logger.error(f"Failed to send to dashboard: {str(e)}")
            self.disconnect(connection)
