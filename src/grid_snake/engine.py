"""Step-based game engine composing grid, snake, and food logic."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.food import FoodSpawner
from grid_snake.grid import Cell, Grid
from grid_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)


class GameOutcome(enum.Enum):
    """Result of a single tick."""

    CONTINUE = "continue"
    OUT_OF_BOUNDS = "out_of_bounds"
    SELF_COLLISION = "self_collision"
    BOARD_FULL = "board_full"

    @property
    def terminal(self) -> bool:
        return self is not GameOutcome.CONTINUE


@dataclass(frozen=True)
class RenderState:
    """Immutable snapshot handed to the renderer."""

    snake: tuple[Cell, ...]
    food: Cell | None
    score: int
    tick: int
    outcome: GameOutcome
    grid_size: int

    @property
    def game_over(self) -> bool:
        return self.outcome.terminal

    def to_dict(self) -> dict:
        """Serialize the snapshot to a JSON-friendly dictionary."""
        return {
            "tick": self.tick,
            "score": self.score,
            "game_over": self.game_over,
            "outcome": self.outcome.value,
            "grid_size": self.grid_size,
            "snake": [list(c) for c in self.snake],
            "food": list(self.food) if self.food is not None else None,
        }


class GameEngine:
    """Single-snake, step-based game engine.

    The engine owns the snake, the food cell, and the score. :meth:`redirect`
    only changes the heading used by the next :meth:`tick`; each tick moves
    the snake by one cell and returns a :class:`GameOutcome`. Once a terminal
    outcome is returned, further ticks and redirects are no-ops until
    :meth:`reset`.
    """

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config if config is not None else GameConfig()
        self.grid = Grid(self.config.grid_size)
        self.rng = np.random.default_rng(self.config.seed)
        self.food_spawner = FoodSpawner(
            self.grid, rng=self.rng, max_attempts=self.config.spawn_attempts,
        )
        self.reset()

    def reset(self) -> None:
        """Start a new game: fresh snake, fresh food, zero score."""
        half = self.config.grid_size // 2
        self.snake = Snake.in_row(
            Cell(self.config.initial_length, half),
            length=self.config.initial_length,
            heading=Direction.RIGHT,
        )
        self.score = 0
        self.tick_count = 0
        self.outcome = GameOutcome.CONTINUE
        self._pending_direction: Direction | None = None
        self.food = self.food_spawner.spawn(self.snake)
        if self.food is None:
            self.outcome = GameOutcome.BOARD_FULL

    @property
    def game_over(self) -> bool:
        return self.outcome.terminal

    @property
    def heading(self) -> Direction:
        """Direction the next tick will move in."""
        if self._pending_direction is not None:
            return self._pending_direction
        return self.snake.heading

    def redirect(self, direction: Direction) -> bool:
        """Set the heading for the next tick, ignoring 180° reversals.

        Returns whether the direction was accepted. Between two ticks the
        last accepted direction wins.
        """
        if self.game_over or self.snake.would_reverse(direction):
            return False
        self._pending_direction = direction
        return True

    def tick(self) -> GameOutcome:
        """Advance the game by one cell in the current heading."""
        if self.game_over:
            return self.outcome

        direction = self.heading
        new_head = self.snake.propose_move(direction)

        if not self.grid.in_bounds(new_head):
            return self._finish(GameOutcome.OUT_OF_BOUNDS)

        grow = new_head == self.food
        # The tail moves away unless the snake is about to grow.
        if self.snake.occupies(new_head, exclude_tail=not grow):
            return self._finish(GameOutcome.SELF_COLLISION)

        self.snake.advance(new_head, grow, heading=direction)
        self._pending_direction = None
        self.tick_count += 1

        if grow:
            self.score += 1
            self.food = self.food_spawner.spawn(self.snake)
            if self.food is None:
                return self._finish(GameOutcome.BOARD_FULL)

        return self.outcome

    def snapshot(self) -> RenderState:
        """Return the current state as an immutable render snapshot."""
        return RenderState(
            snake=tuple(self.snake.body),
            food=self.food,
            score=self.score,
            tick=self.tick_count,
            outcome=self.outcome,
            grid_size=self.grid.size,
        )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return self.snapshot().to_dict()

    def _finish(self, outcome: GameOutcome) -> GameOutcome:
        """Record a terminal outcome and end the game."""
        self.outcome = outcome
        logger.info(
            "Game over (%s) at tick %d with score %d.",
            outcome.value, self.tick_count, self.score,
        )
        return outcome
