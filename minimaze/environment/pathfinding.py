"""A* search over a maze grid.

Used once per episode to establish the optimal path length that navigation
efficiency is measured against.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Set

from .grid import is_legal, manhattan_distance
from .moves import Direction, apply_direction
from .schemas import Grid, Position


@dataclass(slots=True)
class PathNode:
    """A search node. ``parent`` is an index, never an object reference.

    Inside the search the index points into the node arena; in the list
    returned by ``find_optimal_path`` it points at the previous path entry.
    """

    position: Position
    g: int
    h: int
    parent: Optional[int] = None

    @property
    def f(self) -> int:
        return self.g + self.h


def find_optimal_path(start: Position, target: Position, grid: Grid) -> List[PathNode]:
    """Return the shortest legal path from ``start`` to ``target``.

    Classic A* with a Manhattan heuristic, which is admissible and consistent
    on a 4-directional unit-cost grid. Returns an empty list when the target is
    unreachable; that is a normal outcome, not an error.

    Ties on ``f`` are broken by lower ``h`` and then by discovery order, so the
    same grid always yields the same path.
    """

    # Every node the search creates lives in the arena; parents are arena indexes.
    arena: List[PathNode] = [PathNode(start, 0, manhattan_distance(start, target))]
    # Open set maps position -> arena index so relaxation updates in place
    # instead of inserting a duplicate.
    open_nodes: Dict[Position, int] = {start: 0}
    closed: Set[Position] = set()

    while open_nodes:
        # Linear scan over the frontier.
        current_index = min(
            open_nodes.values(),
            key=lambda idx: (arena[idx].f, arena[idx].h, idx),
        )
        current = arena[current_index]

        if current.position == target:
            return _reconstruct(arena, current_index)

        del open_nodes[current.position]
        closed.add(current.position)

        for direction in Direction:
            neighbor = apply_direction(current.position, direction)
            if not is_legal(neighbor, grid) or neighbor in closed:
                continue

            g = current.g + 1
            existing_index = open_nodes.get(neighbor)
            if existing_index is None:
                arena.append(
                    PathNode(neighbor, g, manhattan_distance(neighbor, target), current_index)
                )
                open_nodes[neighbor] = len(arena) - 1
            elif g < arena[existing_index].g:
                # Cheaper route to a frontier node: relax it where it stands.
                node = arena[existing_index]
                node.g = g
                node.parent = current_index

    return []


def _reconstruct(arena: List[PathNode], goal_index: int) -> List[PathNode]:
    """Walk parent links back to the root and re-index them into the path."""

    chain: List[PathNode] = []
    index: Optional[int] = goal_index
    while index is not None:
        node = arena[index]
        chain.append(node)
        index = node.parent
    chain.reverse()
    return [
        replace(node, parent=position - 1 if position else None)
        for position, node in enumerate(chain)
    ]


def optimal_path_length(start: Position, target: Position, grid: Grid) -> Optional[int]:
    """Number of moves on the optimal path, or None when no path exists."""

    path = find_optimal_path(start, target, grid)
    if not path:
        return None
    return len(path) - 1
