from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .geometry import Point

TILE_SIZE = 32.0


class Surface(Enum):
    """What a tile is made of.

    - FLOOR: walkable, lets vision through
    - WALL: blocks both movement and vision
    """

    FLOOR = "floor"
    WALL = "wall"

    @property
    def glyph(self) -> str:
        return {Surface.FLOOR: ".", Surface.WALL: "#"}[self]

    @classmethod
    def from_glyph(cls, ch: str) -> "Surface":
        return cls.WALL if ch == "#" else cls.FLOOR


@dataclass
class Tile:
    """One cell of the grid. Only ``surface``, ``cost`` and ``revealed`` ever change."""

    surface: Surface
    position: Point
    cost: int = 1
    revealed: bool = False

    def __post_init__(self) -> None:
        if self.cost < 1:
            raise ValueError("Tile cost must be >= 1")

    @property
    def screen_position(self) -> Tuple[float, float]:
        return (self.position.x * TILE_SIZE, self.position.y * TILE_SIZE)

    @property
    def is_wall(self) -> bool:
        return self.surface is Surface.WALL

    @property
    def is_safe(self) -> bool:
        """Whether an entity may stand on this tile."""
        return not self.is_wall
