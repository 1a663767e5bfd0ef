"""Grid legality rules.

``is_legal`` is the only place that decides whether a cell can be occupied.
The pathfinder, the session's move handling and the scan tool all go through
it so the maze never has two opinions about where a wall is.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from .schemas import Grid, Position

DEFAULT_GRID_SIZE = 4
DEFAULT_START: Tuple[int, int] = (0, 3)
DEFAULT_TARGET: Tuple[int, int] = (3, 0)
DEFAULT_WALLS: Tuple[Tuple[int, int], ...] = ((1, 0), (1, 1), (1, 2), (3, 1), (3, 2))


def is_legal(position: Position, grid: Grid) -> bool:
    """Return True if ``position`` is inside the grid and not a wall."""

    if not (0 <= position.x < grid.size and 0 <= position.y < grid.size):
        return False
    return position not in grid.walls


def manhattan_distance(a: Position, b: Position) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def build_grid(
    size: int,
    walls: Iterable[Tuple[int, int]],
    start: Tuple[int, int],
    target: Tuple[int, int],
) -> Grid:
    """Build a ``Grid`` from plain coordinate tuples."""

    return Grid(
        size=size,
        walls=frozenset(Position(x=x, y=y) for x, y in walls),
        start=Position(x=start[0], y=start[1]),
        target=Position(x=target[0], y=target[1]),
    )


def default_grid() -> Grid:
    """The reference 4x4 maze: a wall column forces a detour around x=1."""

    return build_grid(DEFAULT_GRID_SIZE, DEFAULT_WALLS, DEFAULT_START, DEFAULT_TARGET)
