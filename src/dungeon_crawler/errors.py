from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .map.geometry import Point


class DungeonCrawlerError(Exception):
    """Base error for the dungeon crawler core."""


class ConfigurationError(DungeonCrawlerError):
    """Raised when generator or FOV settings are degenerate or cannot be loaded."""


class UnreachableError(DungeonCrawlerError):
    """Raised when no walkable route exists between two points."""

    def __init__(self, start: "Point", goal: "Point", reason: str = "no walkable route") -> None:
        self.start = start
        self.goal = goal
        self.reason = reason
        super().__init__(f"Cannot reach {goal} from {start}: {reason}")


class OutOfBoundsError(DungeonCrawlerError, ValueError):
    """Raised when a query needs an in-bounds anchor point and gets one off the grid."""
