"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from grid_snake.server.models import DirectionMessage
from grid_snake.server.session_manager import SessionManager
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}

# Browser ``KeyboardEvent.key`` values.
_KEY_MAP: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
}


def parse_direction(raw: str) -> Direction | None:
    """Map a raw input message to a direction, or ``None`` to drop it."""
    try:
        msg = DirectionMessage.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError):
        return None
    if msg.key is not None:
        return _KEY_MAP.get(msg.key)
    if msg.direction is not None:
        return _DIRECTION_MAP.get(msg.direction.lower())
    return None


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Send directions, receive a state snapshot every tick."""
    session = _get_manager(websocket).get_session(game_id)
    if session is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    # Send the current snapshot so the client can draw immediately.
    await websocket.send_text(json.dumps(
        {"type": "state", **session.engine.get_state()},
        separators=(",", ":"),
    ))
    if not session.loop.running:
        await websocket.close(code=1000, reason="Game finished.")
        return

    session.renderer.attach(websocket)
    logger.info("Player connected to game %s.", game_id)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            # Binary frames carry no direction.
            if raw is None:
                continue
            direction = parse_direction(raw)
            if direction is None:
                continue
            await session.loop.redirect(direction)
    except WebSocketDisconnect:
        logger.info("Player disconnected from game %s.", game_id)
    finally:
        session.renderer.detach(websocket)
