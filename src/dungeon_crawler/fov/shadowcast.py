from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Set, Tuple

from ..errors import OutOfBoundsError
from ..map.geometry import Point
from ..map.grid import Grid

logger = logging.getLogger(__name__)

EPSILON = 1e-9

# (row, col) -> (dx, dy) as dx = row*a + col*b, dy = row*c + col*d.
# Row is the distance from the viewer, col the offset across the wedge.
OCTANT_TRANSFORMS: Tuple[Tuple[int, int, int, int], ...] = (
    (0, 1, 1, 0),    # 0: ( col,  row)
    (1, 0, 0, 1),    # 1: ( row,  col)
    (1, 0, 0, -1),   # 2: ( row, -col)
    (0, 1, -1, 0),   # 3: ( col, -row)
    (0, -1, -1, 0),  # 4: (-col, -row)
    (-1, 0, 0, -1),  # 5: (-row, -col)
    (-1, 0, 0, 1),   # 6: (-row,  col)
    (0, -1, 1, 0),   # 7: (-col,  row)
)


def rotate_for_octant(row: int, col: int, octant: int) -> Point:
    """Map octant-local (row, col) onto a grid offset from the viewer."""
    if not 0 <= octant < len(OCTANT_TRANSFORMS):
        raise ValueError(f"octant must be in range 0..7, got {octant}")
    a, b, c, d = OCTANT_TRANSFORMS[octant]
    return Point(row * a + col * b, row * c + col * d)


@dataclass(frozen=True)
class ShadowBorder:
    """A half-open slice [start, end) of an octant's arc, 0 <= start < end <= 1."""

    start: float
    end: float

    @classmethod
    def project(cls, row: int, col: int) -> "ShadowBorder":
        """
        Arc covered by the tile at (row, col).

        The start is the tile's near corner seen past the row (col / (row + 2)),
        the end its far corner at the row itself ((col + 1) / (row + 1)).
        """
        return cls(col / (row + 2), (col + 1) / (row + 1))

    def contains(self, other: "ShadowBorder") -> bool:
        return self.start <= other.start + EPSILON and self.end >= other.end - EPSILON


class BlockedFov:
    """Sorted, non-overlapping shadows cast so far within one octant."""

    def __init__(self) -> None:
        self.borders: List[ShadowBorder] = []

    def add_blocker(self, border: ShadowBorder) -> None:
        index = next((i for i, b in enumerate(self.borders) if b.start >= border.start), len(self.borders))
        self.borders.insert(index, border)

        merged: List[ShadowBorder] = []
        for b in self.borders:
            if merged and b.start <= merged[-1].end + EPSILON:
                if b.end > merged[-1].end:
                    merged[-1] = ShadowBorder(merged[-1].start, b.end)
            else:
                merged.append(b)
        self.borders = merged

    def is_not_viewable(self, border: ShadowBorder) -> bool:
        return any(b.contains(border) for b in self.borders)

    def is_fully_blocked(self) -> bool:
        return (
            len(self.borders) == 1
            and self.borders[0].start <= EPSILON
            and self.borders[0].end >= 1.0 - EPSILON
        )


def _scan_octant(grid: Grid, origin: Point, view_range: int, octant: int, visible: Set[Point]) -> None:
    blocked = BlockedFov()
    for row in range(1, view_range):
        if not grid.in_bounds(origin + rotate_for_octant(row, 0, octant)):
            return
        if blocked.is_fully_blocked():
            return

        for col in range(row + 1):
            pos = origin + rotate_for_octant(row, col, octant)
            tile = grid.get_tile(pos)
            if tile is None:
                break

            border = ShadowBorder.project(row, col)
            if blocked.is_not_viewable(border):
                continue

            visible.add(pos)
            if tile.is_wall:
                blocked.add_blocker(border)


def compute_visible(grid: Grid, origin: Point, view_range: int) -> Set[Point]:
    """
    Recursive shadowcasting field of view.

    Returns every point the viewer at ``origin`` can see, always including the
    origin. Walls are visible themselves but shadow the tiles behind them.
    Visible points lie within Chebyshev distance ``view_range - 1``.
    The grid is only read; revealing tiles is left to the caller.
    """
    if not grid.in_bounds(origin):
        raise OutOfBoundsError(f"FOV origin {origin} is outside the {grid.width}x{grid.height} grid")
    if view_range < 0:
        raise ValueError("view_range must be >= 0")

    visible: Set[Point] = {origin}
    for octant in range(len(OCTANT_TRANSFORMS)):
        _scan_octant(grid, origin, view_range, octant, visible)

    logger.debug("FOV from (%d,%d) range %d -> %d visible tiles", origin.x, origin.y, view_range, len(visible))
    return visible
