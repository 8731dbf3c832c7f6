from __future__ import annotations

import heapq
import itertools
import logging
from typing import Dict, List, Sequence, Tuple

from .errors import UnreachableError
from .map.geometry import Point
from .map.grid import Grid

logger = logging.getLogger(__name__)


def heuristic(a: Point, b: Point) -> int:
    """Manhattan distance; admissible for 4-way movement at unit cost."""
    return a.manhattan(b)


def find_path(grid: Grid, start: Point, goal: Point) -> List[Point]:
    """A* shortest walkable path on a 4-connected grid.

    Returns the steps after ``start`` up to and including ``goal`` (the list a
    mover consumes one tile per turn); ``start == goal`` yields ``[]``.
    Wall tiles are never entered. Equal-priority entries pop in insertion order.

    Raises UnreachableError when start or goal lies off the grid, the goal is a
    wall, or the search exhausts the frontier without reaching the goal.
    """
    if not grid.in_bounds(start):
        raise UnreachableError(start, goal, "start is out of bounds")
    goal_tile = grid.get_tile(goal)
    if goal_tile is None:
        raise UnreachableError(start, goal, "goal is out of bounds")
    if start == goal:
        return []
    if goal_tile.is_wall:
        raise UnreachableError(start, goal, "goal is a wall")

    counter = itertools.count()
    frontier: List[Tuple[int, int, Point]] = [(0, next(counter), start)]
    came_from: Dict[Point, Point] = {start: start}
    cost_so_far: Dict[Point, int] = {start: 0}
    reached = False

    while frontier:
        _, _, current = heapq.heappop(frontier)
        if current == goal:
            reached = True
            break

        for neighbour in grid.neighbours(current):
            if neighbour.is_wall:
                continue
            pos = neighbour.position
            new_cost = cost_so_far[current] + neighbour.cost
            if pos not in cost_so_far or new_cost < cost_so_far[pos]:
                cost_so_far[pos] = new_cost
                priority = new_cost + heuristic(pos, goal)
                heapq.heappush(frontier, (priority, next(counter), pos))
                came_from[pos] = current

    if not reached:
        logger.debug("A*: %s unreachable from %s after exploring %d tiles", goal, start, len(cost_so_far))
        raise UnreachableError(start, goal)

    path: List[Point] = []
    current = goal
    while current != start:
        path.append(current)
        current = came_from[current]
    path.reverse()
    logger.debug("A*: path %s -> %s has %d steps", start, goal, len(path))
    return path


def path_cost(grid: Grid, path: Sequence[Point]) -> int:
    """Sum of tile costs along ``path`` (the start tile is not part of a path)."""
    total = 0
    for p in path:
        tile = grid.get_tile(p)
        if tile is None:
            raise ValueError(f"Path leaves the grid at {p}")
        total += tile.cost
    return total
