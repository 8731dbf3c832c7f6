"""
Tile grid for a single level: geometry primitives, tiles, and the flat-array Grid
that generation, pathfinding and field-of-view all share.
"""
from .geometry import Direction, Point, Rect, Size
from .grid import Grid
from .tiles import TILE_SIZE, Surface, Tile

__all__ = ["Direction", "Point", "Rect", "Size", "Grid", "Surface", "Tile", "TILE_SIZE"]
