"""Grid Snake — core game engine."""

from grid_snake.config import GameConfig
from grid_snake.engine import GameEngine, GameOutcome, RenderState
from grid_snake.food import FoodSpawner
from grid_snake.grid import Cell, Grid
from grid_snake.loop import GameLoop, LoggingRenderer, LoopState, Renderer
from grid_snake.snake import Direction, Snake

__all__ = [
    "Cell",
    "Direction",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "GameLoop",
    "GameOutcome",
    "Grid",
    "LoggingRenderer",
    "LoopState",
    "RenderState",
    "Renderer",
    "Snake",
]
