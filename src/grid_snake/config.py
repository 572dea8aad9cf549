"""Game constants and configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Cells along each edge of the square board.
GRID_SIZE = 16
# Seconds between ticks.
TICK_PERIOD = 1.0
INITIAL_LENGTH = 3
# Random draws tried before falling back to a full free-cell scan.
SPAWN_ATTEMPTS = 64


@dataclass(frozen=True)
class GameConfig:
    """Settings for a single game session.

    Supports JSON serialization so a run can be reproduced with the same
    seed.
    """

    grid_size: int = GRID_SIZE
    tick_period: float = TICK_PERIOD
    initial_length: int = INITIAL_LENGTH
    spawn_attempts: int = SPAWN_ATTEMPTS
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_size < 4:
            raise ValueError("grid_size must be at least 4.")
        if self.tick_period <= 0:
            raise ValueError("tick_period must be positive.")
        if self.initial_length < 1:
            raise ValueError("initial_length must be at least 1.")
        # The snake spawns heading right with its head at x = initial_length.
        if self.initial_length >= self.grid_size:
            raise ValueError(
                "initial_length does not fit the grid; "
                "increase grid_size or reduce initial_length."
            )
        if self.spawn_attempts < 0:
            raise ValueError("spawn_attempts must be >= 0.")

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
