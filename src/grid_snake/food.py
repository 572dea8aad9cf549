"""Food spawning logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from grid_snake.config import SPAWN_ATTEMPTS
from grid_snake.grid import Cell

if TYPE_CHECKING:
    from grid_snake.grid import Grid
    from grid_snake.snake import Snake

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Chooses food cells that the snake does not occupy.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    Random draws are capped at *max_attempts*; after that the free cells
    are enumerated once and one is picked uniformly, so :meth:`spawn`
    always terminates.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
        max_attempts: int = SPAWN_ATTEMPTS,
    ) -> None:
        if max_attempts < 0:
            raise ValueError("max_attempts must be >= 0.")
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts

    def spawn(self, snake: Snake) -> Cell | None:
        """Return a free cell, or ``None`` if the snake fills the grid."""
        if len(snake) >= self.grid.area:
            logger.warning("No free cells available for food spawning.")
            return None

        for _ in range(self.max_attempts):
            x, y = self.rng.integers(0, self.grid.size, size=2).tolist()
            cell = Cell(x, y)
            if not snake.occupies(cell):
                return cell

        free = self.grid.free_cells(snake.body)
        if not free:
            logger.warning("No free cells available for food spawning.")
            return None
        return free[int(self.rng.integers(len(free)))]
