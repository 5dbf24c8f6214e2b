"""Command line entry point: generate a map and print it as text."""

from __future__ import annotations

import argparse
import logging

from . import config
from .environment import metrics
from .environment.generators.pipeline.factory import Algorithm
from .environment.world import World
from .view.ascii import render_ascii


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delve", description="Generate a tile map and print it"
    )
    parser.add_argument(
        "algorithm",
        choices=[algorithm.value for algorithm in Algorithm],
        help="Generation algorithm",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=config.DEFAULT_MAP_WIDTH,
        help=f"Map width in tiles (default: {config.DEFAULT_MAP_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=config.DEFAULT_MAP_HEIGHT,
        help=f"Map height in tiles (default: {config.DEFAULT_MAP_HEIGHT})",
    )
    parser.add_argument(
        "--seed", type=int, help="Generation seed (default: current time)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log generation steps"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    world = World.generate(args.algorithm, args.width, args.height, args.seed)

    print(render_ascii(world))
    print()
    print(f"algorithm: {world.algorithm}  seed: {world.seed}")
    print(f"density: {metrics.density(world.grid):.3f}")
    length = metrics.path_length(
        world.grid, world.player_position, world.exit_position
    )
    print(f"path length: {length if length is not None else 'unreachable'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
