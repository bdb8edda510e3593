from typing import Dict, Set
import structlog
from fastapi import WebSocket

logger = structlog.get_logger(__name__)

class ConnectionManager:
    def __init__(self):
        # Active connections by channel, e.g. "dashboard" or "tracking:ORD-001"
        self.connections: Dict[str, Set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, channel: str):
        """Accept a websocket and subscribe it to a channel"""
        await websocket.accept()
        if channel not in self.connections:
            self.connections[channel] = set()
        self.connections[channel].add(websocket)

    def disconnect(self, websocket: WebSocket, channel: str):
        """Remove a websocket from a channel"""
        if channel in self.connections:
            self.connections[channel].discard(websocket)
            if not self.connections[channel]:
                del self.connections[channel]

    def has_subscribers(self, channel: str) -> bool:
        return bool(self.connections.get(channel))

    async def broadcast(self, channel: str, message: dict):
        """Send a message to every websocket on a channel"""
        for connection in list(self.connections.get(channel, ())):
            try:
                await connection.send_json(message)
            except Exception:
                # Connection might be closed
                logger.warning("websocket_send_failed", channel=channel)
                self.disconnect(connection, channel)
