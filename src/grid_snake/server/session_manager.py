"""In-memory session registry and WebSocket rendering."""

from __future__ import annotations

import dataclasses
import json
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from grid_snake.config import GameConfig
from grid_snake.engine import GameEngine, RenderState
from grid_snake.loop import GameLoop, LoopState
from grid_snake.server.models import GameSummary

logger = logging.getLogger(__name__)

_MAX_FINISHED_GAMES = 100


class WebSocketRenderer:
    """Pushes render snapshots to every socket attached to a session."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        self.sockets: list[WebSocket] = []
        self.on_game_over: Callable[[], None] | None = None

    def attach(self, ws: WebSocket) -> None:
        self.sockets.append(ws)

    def detach(self, ws: WebSocket) -> None:
        if ws in self.sockets:
            self.sockets.remove(ws)

    async def render(self, state: RenderState) -> None:
        await self._broadcast({"type": "state", **state.to_dict()})

    async def game_over(self, state: RenderState) -> None:
        await self._broadcast({
            "type": "game_over",
            "score": state.score,
            "outcome": state.outcome.value,
            "state": state.to_dict(),
        })
        await self.close()
        if self.on_game_over is not None:
            self.on_game_over()

    async def _broadcast(self, message: dict) -> None:
        payload = json.dumps(message, separators=(",", ":"))
        dead: list[WebSocket] = []
        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(self.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)
        for ws in dead:
            self.detach(ws)

    async def close(self) -> None:
        for ws in list(self.sockets):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Game finished.")
            except Exception:
                logger.warning("Failed closing socket in game %s.", self.game_id)
        self.sockets.clear()


@dataclass
class GameSession:
    """All state for a single game."""

    game_id: str
    engine: GameEngine
    loop: GameLoop
    renderer: WebSocketRenderer
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None

    @property
    def status(self) -> LoopState:
        return self.loop.state

    def summary(self) -> GameSummary:
        return GameSummary(
            game_id=self.game_id,
            status=self.status,
            score=self.engine.score,
            tick=self.engine.tick_count,
            outcome=self.engine.outcome.value,
        )


class SessionManager:
    """Central registry of single-player game sessions."""

    def __init__(
        self,
        config: GameConfig | None = None,
        max_finished_games: int = _MAX_FINISHED_GAMES,
    ) -> None:
        if max_finished_games < 0:
            raise ValueError("max_finished_games must be >= 0.")
        self.config = config if config is not None else GameConfig()
        self._sessions: dict[str, GameSession] = {}
        self._max_finished_games = max_finished_games

    def create_session(self, seed: int | None = None) -> GameSession:
        """Create a game and start its tick loop on the running event loop."""
        config = self.config
        if seed is not None:
            config = dataclasses.replace(config, seed=seed)

        game_id = uuid.uuid4().hex[:12]
        engine = GameEngine(config)
        renderer = WebSocketRenderer(game_id)
        loop = GameLoop(engine, renderer)
        session = GameSession(
            game_id=game_id, engine=engine, loop=loop, renderer=renderer,
        )
        renderer.on_game_over = lambda: self._mark_finished(session)
        self._sessions[game_id] = session
        loop.start()
        logger.info("Game %s created (seed=%s).", game_id, config.seed)
        return session

    def get_session(self, game_id: str) -> GameSession | None:
        return self._sessions.get(game_id)

    def list_sessions(self) -> list[GameSummary]:
        return [s.summary() for s in self._sessions.values()]

    async def stop_session(self, game_id: str) -> GameSession:
        """Stop a game's loop on external request."""
        session = self._sessions.get(game_id)
        if session is None:
            raise KeyError(f"Game {game_id} not found.")
        await session.loop.stop()
        await session.renderer.close()
        self._mark_finished(session)
        return session

    def _mark_finished(self, session: GameSession) -> None:
        """Record the finish time exactly once and prune old games."""
        if session.finished_at is not None:
            return
        session.finished_at = time.monotonic()
        self._prune_finished_games()

    def _prune_finished_games(self) -> None:
        """Bound retained finished games to avoid unbounded registry growth."""
        finished = [
            s for s in self._sessions.values() if s.finished_at is not None
        ]
        overflow = len(finished) - self._max_finished_games
        if overflow <= 0:
            return

        finished.sort(key=lambda s: s.finished_at)
        for stale in finished[:overflow]:
            self._sessions.pop(stale.game_id, None)
        logger.info(
            "Pruned %d finished games (retaining up to %d).",
            overflow,
            self._max_finished_games,
        )

    async def cleanup(self) -> None:
        """Stop every running loop and close its sockets."""
        for session in list(self._sessions.values()):
            await session.loop.stop()
            await session.renderer.close()
            self._mark_finished(session)
        logger.info("SessionManager cleanup complete.")
