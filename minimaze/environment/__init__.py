"""Maze environment: grid legality, movement and optimal-path search."""

from .schemas import Grid, Position
from .grid import (
    DEFAULT_GRID_SIZE,
    build_grid,
    default_grid,
    is_legal,
    manhattan_distance,
)
from .moves import DIRECTION_DELTAS, Direction, apply_direction
from .pathfinding import PathNode, find_optimal_path, optimal_path_length

__all__ = [
    "Grid",
    "Position",
    "DEFAULT_GRID_SIZE",
    "build_grid",
    "default_grid",
    "is_legal",
    "manhattan_distance",
    "DIRECTION_DELTAS",
    "Direction",
    "apply_direction",
    "PathNode",
    "find_optimal_path",
    "optimal_path_length",
]
