"""Async tick loop serializing timer ticks and input events on one engine."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Protocol

from grid_snake.engine import GameEngine, GameOutcome, RenderState
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Collaborator that draws snapshots produced by the loop."""

    async def render(self, state: RenderState) -> None: ...

    async def game_over(self, state: RenderState) -> None: ...


class LoggingRenderer:
    """Renderer that only logs; used for headless runs."""

    def __init__(self, level: int = logging.DEBUG) -> None:
        self.level = level
        self.final_state: RenderState | None = None

    async def render(self, state: RenderState) -> None:
        logger.log(
            self.level, "tick=%d score=%d head=%s food=%s",
            state.tick, state.score, state.snake[0], state.food,
        )

    async def game_over(self, state: RenderState) -> None:
        self.final_state = state
        logger.info(
            "Game over: %s, final score %d.", state.outcome.value, state.score,
        )


class LoopState(str, enum.Enum):
    """Lifecycle states for a game loop."""

    RUNNING = "running"
    GAME_OVER = "game_over"


class GameLoop:
    """Drives a :class:`GameEngine` from a periodic timer and input events.

    All engine access goes through :meth:`redirect` and the internal tick
    task, both of which hold ``lock``, so the engine is never touched by
    two callers at once. The loop stops on the first terminal outcome or on
    :meth:`stop`, whichever comes first; ``GAME_OVER`` is absorbing.
    """

    def __init__(
        self,
        engine: GameEngine,
        renderer: Renderer,
        tick_period: float | None = None,
    ) -> None:
        period = (
            tick_period if tick_period is not None
            else engine.config.tick_period
        )
        if period <= 0:
            raise ValueError("tick_period must be positive.")
        self.engine = engine
        self.renderer = renderer
        self.tick_period = period
        self.state = LoopState.RUNNING
        self.lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self.state == LoopState.RUNNING

    def start(self) -> None:
        """Schedule the tick task on the running event loop."""
        if self._task is not None or not self.running:
            return
        self._task = asyncio.create_task(self._tick_loop())

    async def redirect(self, direction: Direction) -> bool:
        """Forward a direction event and push an immediate refresh."""
        async with self.lock:
            if not self.running:
                return False
            accepted = self.engine.redirect(direction)
            state = self.engine.snapshot()
        await self.renderer.render(state)
        return accepted

    async def step(self) -> GameOutcome:
        """Run one tick now. Returns the outcome, terminal ones included."""
        async with self.lock:
            if not self.running:
                return self.engine.outcome
            outcome = self.engine.tick()
            state = self.engine.snapshot()
            if outcome.terminal:
                self.state = LoopState.GAME_OVER
        if outcome.terminal:
            await self.renderer.game_over(state)
        else:
            await self.renderer.render(state)
        return outcome

    async def _tick_loop(self) -> None:
        try:
            while self.running:
                await asyncio.sleep(self.tick_period)
                outcome = await self.step()
                if outcome.terminal:
                    break
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled.")
        except Exception:
            logger.exception("Tick loop error.")
            self.state = LoopState.GAME_OVER
        finally:
            self._stopped = True

    async def stop(self) -> None:
        """Cancel the tick timer and send the final snapshot.

        Calling this more than once is a no-op, as is calling it after the
        game already ended on its own.
        """
        if self._stopped:
            return
        self._stopped = True
        was_running = self.running
        self.state = LoopState.GAME_OVER
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        if was_running:
            async with self.lock:
                state = self.engine.snapshot()
            await self.renderer.game_over(state)

    async def wait(self) -> None:
        """Wait until the tick task has finished."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
