import pytest

from dungeon_crawler.errors import UnreachableError
from dungeon_crawler.map import Direction, Grid, Point, Size, Surface
from dungeon_crawler.movement import Path, try_move
from dungeon_crawler.pathfinding import find_path


def test_try_move():
    grid = Grid.from_ascii(
        [
            "...",
            ".#.",
            "...",
        ]
    )
    assert try_move(grid, Point(0, 1), Direction.UP).new_pos == Point(0, 2)

    blocked = try_move(grid, Point(0, 1), Direction.RIGHT)
    assert not blocked.moved and blocked.new_pos == Point(0, 1)

    off_grid = try_move(grid, Point(0, 1), Direction.LEFT)
    assert not off_grid.moved and off_grid.new_pos == Point(0, 1)

    still = try_move(grid, Point(0, 1), Direction.STILL)
    assert not still.moved


def test_path_walks_the_route():
    grid = Grid(Size(5, 5), default=Surface.FLOOR)
    expected = find_path(grid, Point(0, 0), Point(4, 4))
    path = Path.to(grid, Point(0, 0), Point(4, 4))

    assert len(path) == 8
    assert path.steps() == expected
    assert path.peek() == expected[0]

    walked = []
    while path:
        walked.append(path.next_step())
    assert walked == expected
    assert path.next_step() is None
    assert path.peek() is None


def test_path_clear_and_iter():
    path = Path([Point(1, 0), Point(2, 0)])
    assert list(path) == [Point(1, 0), Point(2, 0)]
    path.clear()
    assert not path
    assert len(path) == 0


def test_path_to_unreachable_goal():
    grid = Grid.from_ascii([".#."])
    with pytest.raises(UnreachableError):
        Path.to(grid, Point(0, 0), Point(2, 0))
