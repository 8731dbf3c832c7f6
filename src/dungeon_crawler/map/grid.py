from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from .geometry import Direction, Point, Size
from .tiles import Surface, Tile

logger = logging.getLogger(__name__)


class Grid:
    """
    Flat tile storage for one level.

    Tiles live in a single list indexed row-major by x (``index = x * height + y``);
    everything else refers to them by Point. Coordinates are 0-based:
    x in [0, width), y in [0, height). Point lookups never raise; off-grid
    points simply have no tile.
    """

    def __init__(self, size: Size, default: Surface = Surface.WALL, depth: int = 0) -> None:
        if size.width <= 0 or size.height <= 0:
            raise ValueError("Grid width/height must be > 0")
        self._size = size
        self.depth = depth
        self._tiles: List[Tile] = [
            Tile(default, Point(x, y)) for x in range(size.width) for y in range(size.height)
        ]
        logger.debug("Grid created: %dx%d, default=%s, depth=%d", size.width, size.height, default.value, depth)

    @property
    def size(self) -> Size:
        return self._size

    @property
    def width(self) -> int:
        return self._size.width

    @property
    def height(self) -> int:
        return self._size.height

    @property
    def tiles(self) -> Sequence[Tile]:
        return self._tiles

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    # ---- Indexing --------------------------------------------------------
    def in_bounds(self, p: Point) -> bool:
        return 0 <= p.x < self.width and 0 <= p.y < self.height

    def translate(self, p: Point) -> Optional[int]:
        """Index of ``p`` in the tile list, or None when off the grid."""
        if not self.in_bounds(p):
            return None
        return p.x * self.height + p.y

    def index_to_point(self, index: int) -> Point:
        if not 0 <= index < len(self._tiles):
            raise IndexError(f"Tile index {index} out of range [0,{len(self._tiles)})")
        return Point(index // self.height, index % self.height)

    def get_tile(self, p: Point) -> Optional[Tile]:
        index = self.translate(p)
        if index is None:
            return None
        return self._tiles[index]

    # ---- Adjacency -------------------------------------------------------
    def neighbours(self, p: Point) -> List[Tile]:
        """Axis-aligned neighbours of ``p`` in the order left, right, up, down."""
        if not self.in_bounds(p):
            return []
        result: List[Tile] = []
        for dx, dy in ((-1, 0), (1, 0), (0, 1), (0, -1)):
            tile = self.get_tile(p + Point(dx, dy))
            if tile is not None:
                result.append(tile)
        return result

    def neighbour(self, p: Point, direction: Direction) -> Optional[Tile]:
        if not self.in_bounds(p):
            return None
        dx, dy = direction.delta
        return self.get_tile(p + Point(dx, dy))

    # ---- Mutation --------------------------------------------------------
    def set_surface(self, p: Point, surface: Surface) -> bool:
        tile = self.get_tile(p)
        if tile is None:
            # Carving never targets the border region, so this only guards regressions.
            logger.error("Attempt to carve out-of-bounds tile at (%d,%d)", p.x, p.y)
            return False
        tile.surface = surface
        return True

    def mark_revealed(self, points: Iterable[Point]) -> int:
        """Flag each listed tile as revealed; off-grid points are skipped. Returns the count marked."""
        marked = 0
        for p in points:
            tile = self.get_tile(p)
            if tile is None:
                continue
            tile.revealed = True
            marked += 1
        return marked

    def reveal_all(self) -> None:
        for tile in self._tiles:
            tile.revealed = True
        logger.debug("Grid: all %d tiles revealed", len(self._tiles))

    # ---- Queries ---------------------------------------------------------
    def walkable_count(self) -> int:
        return sum(1 for tile in self._tiles if tile.is_safe)

    def walkable_points(self) -> List[Point]:
        return [tile.position for tile in self._tiles if tile.is_safe]

    # ---- Export / Import -------------------------------------------------
    @classmethod
    def from_ascii(cls, rows: Sequence[str], depth: int = 0) -> "Grid":
        """
        Build a Grid from ASCII rows for tests/tools.
        '#' is a wall, anything else is floor. Row index is y, column index is x.
        """
        if not rows:
            raise ValueError("rows must not be empty")
        width = len(rows[0])
        for row in rows:
            if len(row) != width:
                raise ValueError("All rows must be same width")
        grid = cls(Size(width, len(rows)), default=Surface.FLOOR, depth=depth)
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                grid.set_surface(Point(x, y), Surface.from_glyph(ch))
        return grid

    def to_ascii(self, overlay: Optional[Dict[Point, str]] = None, hide_unrevealed: bool = False) -> List[str]:
        overlay = overlay or {}
        lines: List[str] = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                p = Point(x, y)
                tile = self._tiles[x * self.height + y]
                if p in overlay:
                    row.append(overlay[p])
                elif hide_unrevealed and not tile.revealed:
                    row.append(" ")
                else:
                    row.append(tile.surface.glyph)
            lines.append("".join(row))
        return lines

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, depth={self.depth})"
