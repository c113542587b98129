"""Entry point: ``python -m shadow_ai``.

Supports two modes:
  - ``python -m shadow_ai``        → Launch FastAPI server with live visualization
  - ``python -m shadow_ai cli``    → Headless run with a scripted target and a replay file
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shadow Escape enemy AI simulation")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI visualization server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--level", type=int, default=1)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless simulation")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--level", type=int, default=1)
    cli.add_argument("--frames", type=int, default=3600)
    cli.add_argument("--replay", type=str, default="replay.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from shadow_ai.api.app import create_app
    from shadow_ai.config import SimulationConfig

    config = SimulationConfig(
        world_seed=args.seed,
        level=args.level,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.world_builder import build_world
    from shadow_ai.engine.world_loop import WorldLoop
    from shadow_ai.systems.rng import DeterministicRNG
    from shadow_ai.systems.target_script import TargetScript
    from shadow_ai.utils.logging import setup_logging
    from shadow_ai.utils.replay import ReplayRecorder

    config = SimulationConfig(
        world_seed=args.seed,
        level=args.level,
        max_frames=args.frames,
        replay_file=args.replay,
        log_level=args.log_level,
    )

    setup_logging(config.log_level)

    rng = DeterministicRNG(config.world_seed)
    world = build_world(config.level, config, rng)
    recorder = ReplayRecorder(config.replay_file, config.world_seed, config.level)
    loop = WorldLoop(config, world, recorder=recorder)
    loop.target_script = TargetScript(config, rng, world, loop.pathfinder)

    loop.run()

    logger.info("Keys collected: %d, escaped: %s", world.keys_collected, world.escaped)
    logger.info("Done. Replay written to %s", config.replay_file)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
