"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from grid_snake.loop import LoopState


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    seed: int | None = Field(default=None, ge=0)


class GameSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: LoopState
    score: int
    tick: int
    outcome: str


class DirectionMessage(BaseModel):
    """Input event sent over the play socket.

    Either a raw key name (``ArrowUp``) or a direction name (``up``).
    """

    key: str | None = None
    direction: str | None = None
