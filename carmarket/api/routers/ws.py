# carmarket/api/routers/ws.py
import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from carmarket.api.deps import SESSION_USER_KEY
from carmarket.services.connection_manager import ConnectionManager
from carmarket.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["notifications"])


def _claimed_user_id(frame: dict) -> int | None:
    try:
        return int(frame.get("userId"))
    except (TypeError, ValueError):
        return None


@router.websocket("/ws")
async def notifications_socket(websocket: WebSocket):
    """
    Push channel for new_message and user_status_update events.
    The client identifies itself with {"type": "authenticate", "userId": ...};
    the id has to match the session cookie sent with the handshake.
    """
    manager: ConnectionManager = websocket.app.state.connections
    session_user_id = websocket.session.get(SESSION_USER_KEY)

    await websocket.accept()
    logger.info("New WebSocket connection")

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except ValueError:
                logger.warning("Ignoring WebSocket frame that is not JSON")
                continue

            if not isinstance(frame, dict) or frame.get("type") != "authenticate":
                continue

            claimed = _claimed_user_id(frame)
            if session_user_id is None or claimed != session_user_id:
                logger.warning(f"WebSocket authentication rejected for user id {frame.get('userId')!r}")
                await websocket.send_json({"type": "error", "message": "Authentication failed"})
                continue

            await manager.register(session_user_id, websocket)
    except WebSocketDisconnect:
        logger.info("WebSocket closed by client")
    finally:
        await manager.unregister(websocket)
