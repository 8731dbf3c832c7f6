from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

from .config import GeneratorSettings
from .errors import ConfigurationError
from .map.geometry import Point, Rect
from .map.grid import Grid
from .map.tiles import Surface
from .rng import RNGManager

logger = logging.getLogger(__name__)


class MapGenerator:
    """Rooms + corridors level generator.

    Tries ``room_count`` random rooms, keeps those that do not touch an earlier
    room, and joins each kept room to the previous one with an L-shaped corridor.
    The first kept room is the spawn room.

    Randomness comes from the injected ``rng``; without one, the stream is derived
    from ``settings.seed`` and ``settings.depth`` so a (seed, depth) pair always
    produces the same level.
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None, rng: Optional[random.Random] = None) -> None:
        self.settings = settings or GeneratorSettings()
        self.settings.validate()
        self.rng = rng if rng is not None else RNGManager(self.settings.seed).level_rng(self.settings.depth)

    def generate(self) -> Tuple[Grid, List[Rect]]:
        s = self.settings
        width, height = s.map_size.width, s.map_size.height
        logger.debug("Generating map with size: x: %d, y: %d (depth %d)", width, height, s.depth)

        grid = Grid(s.map_size, default=Surface.WALL, depth=s.depth)
        rooms: List[Rect] = []

        for _ in range(s.room_count):
            w = self.rng.randrange(*s.room_width_range)
            h = self.rng.randrange(*s.room_height_range)
            x = self.rng.randrange(1, width - w - 1)
            y = self.rng.randrange(1, height - h - 1)
            new_room = Rect.from_size(x, y, w, h)

            if any(new_room.intersects(other) for other in rooms):
                continue

            logger.debug("Creating room: %s", new_room)
            self._carve_room(grid, new_room)
            if rooms:
                self._connect(grid, rooms[-1].center(), new_room.center())
            rooms.append(new_room)

        if not rooms:
            raise ConfigurationError(
                f"No rooms could be placed on a {width}x{height} map after {s.room_count} attempts"
            )
        logger.debug("MapGenerator: generated %d rooms from %d attempts", len(rooms), s.room_count)
        return grid, rooms

    def build_all_floors(self) -> Tuple[Grid, List[Rect]]:
        """An open arena with no rooms; handy for debugging movement and FOV."""
        s = self.settings
        logger.debug("Generating map with all floors with size: x: %d, y: %d", s.map_size.width, s.map_size.height)
        return Grid(s.map_size, default=Surface.FLOOR, depth=s.depth), []

    def _connect(self, grid: Grid, prev: Point, new: Point) -> None:
        if self.rng.randrange(2) == 1:
            # horizontal then vertical
            self._carve_h_corridor(grid, prev.x, new.x, prev.y)
            self._carve_v_corridor(grid, prev.y, new.y, new.x)
        else:
            # vertical then horizontal
            self._carve_v_corridor(grid, prev.y, new.y, prev.x)
            self._carve_h_corridor(grid, prev.x, new.x, new.y)

    @staticmethod
    def _carve_room(grid: Grid, room: Rect) -> None:
        for p in room.points():
            grid.set_surface(p, Surface.FLOOR)

    @staticmethod
    def _carve_h_corridor(grid: Grid, x1: int, x2: int, y: int) -> None:
        for x in range(min(x1, x2), max(x1, x2) + 1):
            grid.set_surface(Point(x, y), Surface.FLOOR)

    @staticmethod
    def _carve_v_corridor(grid: Grid, y1: int, y2: int, x: int) -> None:
        for y in range(min(y1, y2), max(y1, y2) + 1):
            grid.set_surface(Point(x, y), Surface.FLOOR)


def generate(settings: Optional[GeneratorSettings] = None, rng: Optional[random.Random] = None) -> Tuple[Grid, List[Rect]]:
    """Generate one level. Raises ConfigurationError for settings that cannot yield a room."""
    return MapGenerator(settings, rng).generate()


def spawn_point(rooms: Sequence[Rect]) -> Point:
    """Center of the spawn (first) room."""
    if not rooms:
        raise ConfigurationError("Cannot choose a spawn point: the level has no rooms")
    return rooms[0].center()
