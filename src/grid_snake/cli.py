"""Command-line launcher for Grid Snake."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys

import numpy as np

from grid_snake.config import GameConfig
from grid_snake.engine import GameEngine
from grid_snake.loop import GameLoop, LoggingRenderer
from grid_snake.snake import Direction

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-snake",
        description="Grid Snake game server and headless runner.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the HTTP/WebSocket server.")
    serve_p.add_argument("--host", type=str, default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)
    serve_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON game config file.",
    )

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play one game with a random autopilot.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON game config file.",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--tick-period", type=float, default=0.01,
        help="Seconds between ticks (the game default is 1.0).",
    )
    sim_p.add_argument(
        "--turn-chance", type=float, default=0.2,
        help="Probability of a random turn before each tick.",
    )
    sim_p.add_argument("--max-ticks", type=int, default=1_000)

    return parser


def _load_config(path: str | None) -> GameConfig:
    return GameConfig.load(path) if path else GameConfig()


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from grid_snake.server.app import create_app

    app = create_app(_load_config(args.config))
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


async def _autopilot(
    loop: GameLoop, rng: np.random.Generator, turn_chance: float, max_ticks: int,
) -> None:
    directions = list(Direction)
    for _ in range(max_ticks):
        if not loop.running:
            break
        if rng.random() < turn_chance:
            await loop.redirect(directions[int(rng.integers(len(directions)))])
        await asyncio.sleep(loop.tick_period)
    await loop.stop()


async def simulate(
    config: GameConfig,
    tick_period: float,
    turn_chance: float = 0.2,
    max_ticks: int = 1_000,
) -> GameEngine:
    """Run one game driven by random input events until it ends."""
    engine = GameEngine(config)
    renderer = LoggingRenderer()
    loop = GameLoop(engine, renderer, tick_period=tick_period)
    rng = np.random.default_rng(config.seed)
    loop.start()
    await asyncio.gather(
        loop.wait(), _autopilot(loop, rng, turn_chance, max_ticks),
    )
    return engine


def _run_simulate(args: argparse.Namespace) -> int:
    config = _load_config(args.config)
    if args.seed is not None:
        config = dataclasses.replace(config, seed=args.seed)

    engine = asyncio.run(simulate(
        config,
        tick_period=args.tick_period,
        turn_chance=args.turn_chance,
        max_ticks=args.max_ticks,
    ))
    print(  # noqa: T201
        f"outcome={engine.outcome.value} score={engine.score} "
        f"ticks={engine.tick_count}"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``grid-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "serve": _run_serve,
        "simulate": _run_simulate,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
