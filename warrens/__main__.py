"""Print a generated level as ASCII.

Usage:
    python -m warrens --seed burrito1 --depth 3
    python -m warrens --width 60 --height 30 --history -v
"""

from __future__ import annotations

import argparse
import logging

from warrens import config
from warrens.environment.generators.pipeline import generate_level

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="warrens", description="Generate a dungeon level and print it"
    )
    parser.add_argument(
        "--seed",
        type=str,
        default=config.RANDOM_SEED,
        help=f"Master seed (default: {config.RANDOM_SEED})",
    )
    parser.add_argument(
        "--depth", type=int, default=1, help="Level depth (default: 1)"
    )
    parser.add_argument(
        "--width",
        type=int,
        default=config.MAP_WIDTH,
        help=f"Map width in tiles (default: {config.MAP_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=config.MAP_HEIGHT,
        help=f"Map height in tiles (default: {config.MAP_HEIGHT})",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Record generation snapshots and report how many were taken",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log layer-level detail"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.history:
        config.SHOW_MAPGEN_VISUALIZER = True

    generator, map_data = generate_level(
        args.depth, args.seed, args.width, args.height
    )
    logger.info("Built level with: %s", " -> ".join(generator.layer_names))

    overlays = {}
    if map_data.starting_position is not None:
        overlays[map_data.starting_position] = "@"
    print(map_data.game_map.to_ascii(overlays))
    print()
    print(f"Layers: {' -> '.join(generator.layer_names)}")
    print(f"Start: {map_data.starting_position}  Exit: {map_data.exit_position}")
    print(f"Spawns: {len(map_data.spawn_list)}")
    if args.history:
        print(f"Snapshots: {len(map_data.history)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
