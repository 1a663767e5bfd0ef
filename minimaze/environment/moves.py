"""Directional movement shared by the pathfinder and the game loop."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

from .schemas import Position


class Direction(str, Enum):
    """The four moves a navigator may propose."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


DIRECTION_DELTAS: Dict[Direction, Tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


def apply_direction(position: Position, direction: Direction | str) -> Position:
    """Return the cell one step from ``position`` in ``direction``.

    Total over all inputs: the result may be off-grid or inside a wall.
    Callers check legality with ``is_legal``.
    """

    dx, dy = DIRECTION_DELTAS[Direction(direction)]
    return Position(x=position.x + dx, y=position.y + dy)
