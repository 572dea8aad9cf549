"""Tests for the GameEngine module."""

import json

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.engine import GameEngine, GameOutcome
from grid_snake.grid import Cell
from grid_snake.snake import Direction, Snake

# Far from every snake used below.
_PARKED_FOOD = Cell(0, 0)


def _engine(seed: int = 0, **kwargs) -> GameEngine:
    return GameEngine(GameConfig(seed=seed, **kwargs))


class TestEngineInit:
    def test_default_init(self):
        engine = _engine()
        assert engine.score == 0
        assert engine.tick_count == 0
        assert engine.outcome == GameOutcome.CONTINUE
        assert not engine.game_over

    def test_snake_starts_in_row(self):
        engine = _engine()
        assert list(engine.snake.body) == [(3, 8), (2, 8), (1, 8)]
        assert engine.heading == Direction.RIGHT

    def test_food_spawned_off_snake(self):
        engine = _engine()
        assert engine.food is not None
        assert engine.grid.in_bounds(engine.food)
        assert not engine.snake.occupies(engine.food)


class TestEngineMovement:
    def test_basic_tick(self):
        engine = _engine()
        engine.food = _PARKED_FOOD
        assert engine.tick() == GameOutcome.CONTINUE
        assert list(engine.snake.body) == [(4, 8), (3, 8), (2, 8)]
        assert engine.tick_count == 1

    def test_redirect_changes_next_tick_only(self):
        engine = _engine()
        engine.food = _PARKED_FOOD
        assert engine.redirect(Direction.UP)
        assert engine.snake.head == (3, 8)
        engine.tick()
        assert engine.snake.head == (3, 7)
        assert engine.snake.heading == Direction.UP

    def test_last_redirect_wins(self):
        engine = _engine()
        engine.food = _PARKED_FOOD
        engine.redirect(Direction.UP)
        engine.redirect(Direction.DOWN)
        engine.tick()
        assert engine.snake.head == (3, 9)

    def test_reverse_rejected_with_neck(self):
        engine = _engine()
        engine.food = _PARKED_FOOD
        assert not engine.redirect(Direction.LEFT)
        engine.tick()
        assert engine.snake.head == (4, 8)
        assert engine.snake.heading == Direction.RIGHT

    def test_rejected_reverse_keeps_pending_turn(self):
        engine = _engine()
        engine.food = _PARKED_FOOD
        engine.redirect(Direction.UP)
        engine.redirect(Direction.LEFT)
        engine.tick()
        assert engine.snake.head == (3, 7)

    def test_reverse_accepted_for_single_cell(self):
        engine = _engine()
        engine.snake = Snake([Cell(5, 5)], Direction.RIGHT)
        engine.food = _PARKED_FOOD
        assert engine.redirect(Direction.LEFT)
        assert engine.tick() == GameOutcome.CONTINUE
        assert list(engine.snake.body) == [(4, 5)]
        assert engine.snake.heading == Direction.LEFT


class TestEngineWallCollision:
    def test_out_of_bounds_on_right_edge(self):
        engine = _engine()
        engine.snake = Snake.in_row(Cell(15, 5), length=3)
        engine.food = _PARKED_FOOD
        assert engine.tick() == GameOutcome.OUT_OF_BOUNDS
        assert engine.game_over
        # The losing move is not applied.
        assert engine.snake.head == (15, 5)

    def test_out_of_bounds_on_top_edge(self):
        engine = _engine()
        engine.snake = Snake.in_row(Cell(7, 0), length=2, heading=Direction.UP)
        engine.food = _PARKED_FOOD
        assert engine.tick() == GameOutcome.OUT_OF_BOUNDS

    def test_runs_into_wall(self):
        engine = _engine(seed=7)
        for _ in range(20):
            outcome = engine.tick()
            if outcome.terminal:
                break
        assert outcome == GameOutcome.OUT_OF_BOUNDS
        assert engine.snake.head.x == 15


class TestEngineSelfCollision:
    def test_coiled_snake_hits_body(self):
        engine = _engine()
        # Head at (5,5) moving right lands on (6,5), which is not the tail.
        engine.snake = Snake(
            [Cell(5, 5), Cell(5, 6), Cell(6, 6), Cell(6, 5), Cell(6, 4)],
            Direction.UP,
        )
        engine.food = _PARKED_FOOD
        engine.redirect(Direction.RIGHT)
        assert engine.tick() == GameOutcome.SELF_COLLISION
        assert len(engine.snake) == 5

    def test_moving_into_vacated_tail_is_allowed(self):
        engine = _engine()
        engine.snake = Snake(
            [Cell(5, 5), Cell(6, 5), Cell(6, 6), Cell(5, 6)], Direction.LEFT,
        )
        engine.food = _PARKED_FOOD
        engine.redirect(Direction.DOWN)
        assert engine.tick() == GameOutcome.CONTINUE
        assert list(engine.snake.body) == [(5, 6), (5, 5), (6, 5), (6, 6)]

    def test_neck_collision_when_heading_disagrees(self):
        engine = _engine()
        # A snake whose stored heading points back into its neck.
        engine.snake = Snake([Cell(5, 5), Cell(6, 5), Cell(7, 5), Cell(8, 5)], Direction.RIGHT)
        engine.food = _PARKED_FOOD
        assert engine.tick() == GameOutcome.SELF_COLLISION


class TestEngineFoodConsumption:
    def test_first_tick_eats_food(self):
        engine = _engine()
        engine.food = Cell(4, 8)
        assert engine.tick() == GameOutcome.CONTINUE
        # Growth keeps the old tail in place.
        assert list(engine.snake.body) == [(4, 8), (3, 8), (2, 8), (1, 8)]
        assert engine.score == 1
        assert engine.food is not None
        assert not engine.snake.occupies(engine.food)

    def test_length_unchanged_without_food(self):
        engine = _engine()
        engine.food = _PARKED_FOOD
        engine.tick()
        assert len(engine.snake) == 3
        assert engine.score == 0

    def test_board_full(self):
        engine = _engine(grid_size=4)
        path = []
        for y in range(4):
            xs = range(4) if y % 2 == 0 else range(3, -1, -1)
            path.extend(Cell(x, y) for x in xs)
        engine.snake = Snake(list(reversed(path[:-1])), Direction.LEFT)
        engine.food = path[-1]
        assert engine.tick() == GameOutcome.BOARD_FULL
        assert len(engine.snake) == 16
        assert engine.score == 1
        assert engine.food is None


class TestEngineTerminalIdempotence:
    def test_tick_after_game_over(self):
        engine = _engine()
        engine.snake = Snake.in_row(Cell(15, 5), length=3)
        engine.food = _PARKED_FOOD
        engine.tick()
        before = engine.snapshot()
        assert engine.tick() == GameOutcome.OUT_OF_BOUNDS
        assert engine.tick() == GameOutcome.OUT_OF_BOUNDS
        assert engine.snapshot() == before

    def test_redirect_after_game_over(self):
        engine = _engine()
        engine.snake = Snake.in_row(Cell(15, 5), length=3)
        engine.food = _PARKED_FOOD
        engine.tick()
        assert not engine.redirect(Direction.UP)
        assert engine.heading == Direction.RIGHT

    def test_reset_starts_new_game(self):
        engine = _engine()
        engine.food = Cell(4, 8)
        engine.tick()
        engine.snake = Snake.in_row(Cell(15, 5), length=3)
        engine.tick()
        assert engine.game_over
        engine.reset()
        assert engine.outcome == GameOutcome.CONTINUE
        assert engine.score == 0
        assert engine.tick_count == 0
        assert list(engine.snake.body) == [(3, 8), (2, 8), (1, 8)]


class TestEngineInvariants:
    def test_random_play_keeps_invariants(self):
        rng = np.random.default_rng(11)
        directions = list(Direction)
        for seed in range(20):
            engine = _engine(seed=seed)
            last_score = 0
            for _ in range(300):
                engine.redirect(directions[int(rng.integers(4))])
                outcome = engine.tick()
                body = list(engine.snake.body)
                assert all(engine.grid.in_bounds(c) for c in body)
                assert len(set(body)) == len(body)
                assert engine.score >= last_score
                assert engine.score - last_score <= 1
                assert len(body) == 3 + engine.score
                if engine.food is not None:
                    assert not engine.snake.occupies(engine.food)
                last_score = engine.score
                if outcome.terminal:
                    break


class TestEngineSerialization:
    def test_state_is_json_serializable(self):
        engine = _engine(seed=42)
        engine.tick()
        serialized = json.dumps(engine.get_state())
        assert isinstance(serialized, str)

    def test_state_structure(self):
        state = _engine().get_state()
        assert state["tick"] == 0
        assert state["score"] == 0
        assert state["game_over"] is False
        assert state["outcome"] == "continue"
        assert state["grid_size"] == 16
        assert state["snake"] == [[3, 8], [2, 8], [1, 8]]
        assert len(state["food"]) == 2


class TestEngineDeterminism:
    def test_same_seed_same_outcome(self):
        actions = [
            Direction.RIGHT, Direction.RIGHT, Direction.DOWN,
            Direction.DOWN, Direction.LEFT,
        ]
        assert self._run_game(123, actions) == self._run_game(123, actions)

    @staticmethod
    def _run_game(seed: int, actions: list[Direction]) -> dict:
        engine = _engine(seed=seed)
        for action in actions:
            engine.redirect(action)
            engine.tick()
        return engine.get_state()
