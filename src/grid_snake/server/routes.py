"""REST API route handlers for game lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from grid_snake.server.models import CreateGameRequest, GameSummary
from grid_snake.server.session_manager import SessionManager

router = APIRouter(prefix="/games", tags=["games"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> GameSummary:
    """Create a game and start ticking it."""
    session = _get_manager(request).create_session(seed=body.seed)
    return session.summary()


@router.get("")
async def list_games(request: Request) -> list[GameSummary]:
    """List running and retained finished games."""
    return _get_manager(request).list_sessions()


@router.get("/{game_id}")
async def get_game(game_id: str, request: Request) -> dict:
    """Get game status and the current render state."""
    session = _get_manager(request).get_session(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    return {
        "game_id": session.game_id,
        "status": session.status.value,
        "state": session.engine.get_state(),
    }


@router.delete("/{game_id}")
async def stop_game(game_id: str, request: Request) -> GameSummary:
    """Stop a running game."""
    try:
        session = await _get_manager(request).stop_session(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return session.summary()
