from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, Iterator, List, Optional

from .map.geometry import Direction, Point
from .map.grid import Grid
from .pathfinding import find_path


@dataclass
class MoveResult:
    new_pos: Point
    moved: bool


def try_move(grid: Grid, pos: Point, direction: Direction) -> MoveResult:
    """
    Attempt one step from pos. Off-grid and wall targets leave the mover where it
    is; STILL never counts as a move.
    """
    if direction is Direction.STILL:
        return MoveResult(new_pos=pos, moved=False)
    target = grid.neighbour(pos, direction)
    if target is None or not target.is_safe:
        return MoveResult(new_pos=pos, moved=False)
    return MoveResult(new_pos=target.position, moved=True)


class Path:
    """Steps still to walk. The first element is the next tile, the last one the goal."""

    def __init__(self, steps: Iterable[Point] = ()) -> None:
        self._steps: Deque[Point] = deque(steps)

    @classmethod
    def to(cls, grid: Grid, start: Point, goal: Point) -> "Path":
        """Route from start to goal; raises UnreachableError like ``find_path``."""
        return cls(find_path(grid, start, goal))

    def next_step(self) -> Optional[Point]:
        if not self._steps:
            return None
        return self._steps.popleft()

    def peek(self) -> Optional[Point]:
        return self._steps[0] if self._steps else None

    def clear(self) -> None:
        self._steps.clear()

    def steps(self) -> List[Point]:
        return list(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __bool__(self) -> bool:
        return bool(self._steps)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._steps)
