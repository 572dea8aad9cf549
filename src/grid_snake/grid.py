"""Grid coordinate model for the snake game."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

import numpy as np

from grid_snake.config import GRID_SIZE


class Cell(NamedTuple):
    """An immutable (x, y) grid coordinate.

    ``x`` grows to the right and ``y`` grows downwards.
    """

    x: int
    y: int


class Grid:
    """Square N×N coordinate space.

    The grid holds no game state; occupancy belongs to the snake. A NumPy
    mask is built on demand when the free cells have to be enumerated.
    """

    def __init__(self, size: int = GRID_SIZE) -> None:
        if size < 4:
            raise ValueError("Grid size must be at least 4.")
        self.size = size

    @property
    def area(self) -> int:
        return self.size * self.size

    def in_bounds(self, cell: Cell) -> bool:
        """Check whether a cell lies within the grid."""
        return 0 <= cell.x < self.size and 0 <= cell.y < self.size

    def free_cells(self, occupied: Iterable[Cell]) -> list[Cell]:
        """Return every in-bounds cell not listed in *occupied*, row by row."""
        mask = np.ones((self.size, self.size), dtype=bool)
        for x, y in occupied:
            mask[y, x] = False
        ys, xs = np.nonzero(mask)
        return [Cell(x, y) for y, x in zip(ys.tolist(), xs.tolist(), strict=True)]
