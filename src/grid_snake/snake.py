"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque

from grid_snake.grid import Cell


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of cells.

    The head is ``body[0]``; the tail is ``body[-1]``. ``heading`` is the
    direction of the last applied move, which is what a reversal is
    checked against.
    """

    def __init__(self, cells: list[Cell], heading: Direction = Direction.RIGHT) -> None:
        if not cells:
            raise ValueError("Snake length must be at least 1.")
        if len(set(cells)) != len(cells):
            raise ValueError("Snake cells must not overlap.")
        self.body: deque[Cell] = deque(Cell(*c) for c in cells)
        self.heading = heading

    @classmethod
    def in_row(
        cls,
        head: Cell,
        length: int = 3,
        heading: Direction = Direction.RIGHT,
    ) -> Snake:
        """Build a straight snake trailing behind *head* against *heading*."""
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dx, dy = heading.value
        cells = [Cell(head.x - dx * i, head.y - dy * i) for i in range(length)]
        return cls(cells, heading)

    def __len__(self) -> int:
        return len(self.body)

    @property
    def head(self) -> Cell:
        """Return the head cell."""
        return self.body[0]

    def occupies(self, cell: Cell, exclude_tail: bool = False) -> bool:
        """Check whether the snake occupies a given cell.

        With *exclude_tail* the tail is ignored, since it is vacated by a
        move that does not grow the snake.
        """
        if exclude_tail and cell == self.body[-1]:
            return False
        return cell in self.body

    def propose_move(self, direction: Direction) -> Cell:
        """Compute the next head cell without moving."""
        dx, dy = direction.value
        return Cell(self.head.x + dx, self.head.y + dy)

    def would_reverse(self, direction: Direction) -> bool:
        """Check whether *direction* turns the head back into its neck."""
        return len(self.body) > 1 and direction is self.heading.opposite

    def advance(
        self,
        new_head: Cell,
        grow: bool = False,
        heading: Direction | None = None,
    ) -> Cell | None:
        """Move the head to *new_head*.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.appendleft(new_head)
        if heading is not None:
            self.heading = heading
        if grow:
            return None
        return self.body.pop()
