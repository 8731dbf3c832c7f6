from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


@dataclass(frozen=True, order=True)
class Point:
    """A grid coordinate. Ordered by x, then y."""

    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def manhattan(self, other: "Point") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def chebyshev(self, other: "Point") -> int:
        return max(abs(self.x - other.x), abs(self.y - other.y))


@dataclass(frozen=True)
class Size:
    width: int
    height: int


class Direction(Enum):
    """A single step on the board. UP grows y, DOWN shrinks it."""

    UP = (0, 1)
    DOWN = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    STILL = (0, 0)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value


@dataclass(frozen=True)
class Rect:
    """A room's closed extents: every x in [x1, x2] and y in [y1, y2] belongs to it."""

    x1: int
    y1: int
    x2: int
    y2: int

    def __post_init__(self) -> None:
        if self.x1 > self.x2 or self.y1 > self.y2:
            raise ValueError(f"Invalid rect extents: ({self.x1},{self.y1})-({self.x2},{self.y2})")

    @classmethod
    def from_size(cls, x: int, y: int, width: int, height: int) -> "Rect":
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    def intersects(self, other: "Rect") -> bool:
        # Touching edges count as overlap so rooms never merge into each other.
        return self.x1 <= other.x2 and self.x2 >= other.x1 and self.y1 <= other.y2 and self.y2 >= other.y1

    def center(self) -> Point:
        return Point((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def contains(self, p: Point) -> bool:
        return self.x1 <= p.x <= self.x2 and self.y1 <= p.y <= self.y2

    def points(self) -> Iterator[Point]:
        for x in range(self.x1, self.x2 + 1):
            for y in range(self.y1, self.y2 + 1):
                yield Point(x, y)
