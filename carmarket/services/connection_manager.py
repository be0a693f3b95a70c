# carmarket/services/connection_manager.py
from datetime import datetime, timezone

from anyio.from_thread import run as run_from_thread
from fastapi import WebSocket

from carmarket.utils.logging import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """
    Open notification sockets, one per authenticated user, plus online status.

    Lives on app.state and is only mutated from the event loop. Sync request
    handlers reach it through push(), which hops onto the loop.
    Delivery is best effort: a failed send drops the socket, nothing is queued.
    """

    def __init__(self):
        self.connections: dict[int, WebSocket] = {}
        self.status: dict[int, dict] = {}

    def is_online(self, user_id: int) -> bool:
        return user_id in self.connections

    def status_snapshot(self) -> dict[int, dict]:
        return {user_id: dict(s) for user_id, s in self.status.items()}

    async def register(self, user_id: int, websocket: WebSocket):
        previous = self.connections.get(user_id)
        self.connections[user_id] = websocket
        self.status[user_id] = {"is_online": True, "last_seen": datetime.now(timezone.utc)}
        if previous is not None and previous is not websocket:
            logger.info(f"User {user_id} opened a new socket, the previous one is replaced")
        logger.info(f"User {user_id} connected to WebSocket")
        await self.broadcast_status(user_id)

    async def unregister(self, websocket: WebSocket):
        for user_id, connection in list(self.connections.items()):
            if connection is websocket:
                del self.connections[user_id]
                self.status[user_id] = {"is_online": False, "last_seen": datetime.now(timezone.utc)}
                logger.info(f"User {user_id} disconnected from WebSocket")
                await self.broadcast_status(user_id)

    async def send(self, user_id: int, payload: dict) -> bool:
        connection = self.connections.get(user_id)
        if connection is None:
            return False

        try:
            await connection.send_json(payload)
        except Exception as e:
            logger.warning(f"Failed to notify user {user_id}, dropping socket: {e}")
            if self.connections.get(user_id) is connection:
                del self.connections[user_id]
                self.status[user_id] = {"is_online": False, "last_seen": datetime.now(timezone.utc)}
            return False

        return True

    async def broadcast(self, payload: dict):
        for user_id in list(self.connections):
            await self.send(user_id, payload)

    async def broadcast_status(self, user_id: int):
        status = self.status[user_id]
        await self.broadcast(
            {
                "type": "user_status_update",
                "data": {
                    "userId": user_id,
                    "isOnline": status["is_online"],
                    "lastSeen": status["last_seen"].isoformat(),
                },
            }
        )

    def push(self, user_id: int, payload: dict) -> bool:
        """send() for code running in a worker thread (sync route handlers)."""
        if not self.is_online(user_id):
            return False
        return run_from_thread(self.send, user_id, payload)
