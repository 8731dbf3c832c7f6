from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .config import Settings, apply_env, load_settings, parse_seed, user_settings_path
from .errors import ConfigurationError, UnreachableError
from .fov.fog_of_war import FogOfWar
from .generation import generate, spawn_point
from .logging_config import configure_logging
from .map.geometry import Point, Size
from .pathfinding import find_path
from .rng import RNGManager

logger = logging.getLogger(__name__)


def _point(text: str) -> Point:
    try:
        x, y = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {text!r}")
    return Point(x, y)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dungeon-crawler",
        description="Generate a dungeon level and print it as ASCII.",
        epilog=f"User settings are read from {user_settings_path()} when present.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=None, help="Settings YAML to use instead of the defaults.")
    parser.add_argument("--seed", default=None, help="Master seed; same seed and depth give the same level.")
    parser.add_argument("--depth", type=int, default=None, help="Level ordinal.")
    parser.add_argument("--width", type=int, default=None, help="Map width in tiles.")
    parser.add_argument("--height", type=int, default=None, help="Map height in tiles.")
    parser.add_argument("--rooms", type=int, default=None, help="Number of room placement attempts.")
    parser.add_argument("--fov", action="store_true", help="Only show what the viewer at the spawn point sees.")
    parser.add_argument("--path", type=_point, default=None, metavar="X,Y", help="Draw a route from the spawn point.")
    parser.add_argument("--reveal-all", action="store_true", help="Reveal the whole map (with --fov).")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging.")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    settings = apply_env(load_settings(args.config))
    gen = settings.generator
    if args.seed is not None:
        gen = replace(gen, seed=parse_seed(args.seed))
    if args.depth is not None:
        gen = replace(gen, depth=args.depth)
    if args.width is not None or args.height is not None:
        gen = replace(
            gen,
            map_size=Size(
                args.width if args.width is not None else gen.map_size.width,
                args.height if args.height is not None else gen.map_size.height,
            ),
        )
    if args.rooms is not None:
        gen = replace(gen, room_count=args.rooms)
    return replace(settings, generator=gen)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.WARNING)

    try:
        settings = build_settings(args)
        rngm = RNGManager(settings.generator.seed)
        grid, rooms = generate(settings.generator, rngm.level_rng(settings.generator.depth))
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    spawn = spawn_point(rooms)
    overlay: Dict[Point, str] = {}

    if args.path is not None:
        try:
            route = find_path(grid, spawn, args.path)
        except UnreachableError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        overlay.update({p: "*" for p in route})

    hide_unrevealed = False
    if args.fov:
        fog = FogOfWar(grid, settings.fov)
        fog.update(spawn)
        if args.reveal_all:
            grid.reveal_all()
        hide_unrevealed = not fog.global_vision
    overlay[spawn] = "@"

    print(
        f"# seed=0x{rngm.get_master_seed_hex()} depth={grid.depth} size={grid.width}x{grid.height} "
        f"rooms={len(rooms)} spawn={spawn.x},{spawn.y}"
    )
    for line in grid.to_ascii(overlay, hide_unrevealed=hide_unrevealed):
        print(line)
    return 0
