"""Console rendering for maze episodes.

Draws the maze (player, target, walls, trail), the current metrics and the
latest decision. Output is plain text plus optional ANSI colour; set
``MINIMAZE_NO_COLOR`` to disable colour.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Set

from .environment import Direction, Grid, Position, apply_direction
from .logging_utils import Color, colored
from .schemas import DecisionMetrics, MetricsSummary

CELL_WIDTH = 3

SYMBOLS = {
    "player": "P",
    "target": "T",
    "wall": "#",
    "trail": ".",
    "empty": " ",
}

ARROWS = {
    Direction.UP: "↑",
    Direction.DOWN: "↓",
    Direction.LEFT: "←",
    Direction.RIGHT: "→",
}


def trail_cells(start: Position, path: Sequence[Direction]) -> Set[Position]:
    """Cells stepped on by replaying ``path`` from ``start``."""

    cells = {start}
    current = start
    for direction in path:
        current = apply_direction(current, direction)
        cells.add(current)
    return cells


def _cell_symbol(cell: Position, grid: Grid, player: Position, trail: Set[Position]) -> str:
    if cell == player:
        return SYMBOLS["player"]
    if cell == grid.target:
        return SYMBOLS["target"]
    if cell in grid.walls:
        return SYMBOLS["wall"]
    if cell in trail:
        return SYMBOLS["trail"]
    return SYMBOLS["empty"]


def render_grid(grid: Grid, player: Position, path: Sequence[Direction] = ()) -> str:
    trail = trail_cells(grid.start, path)
    border = "+" + "-" * (CELL_WIDTH * grid.size) + "+"
    lines = [colored(border, Color.CYAN)]
    for y in range(grid.size):
        row = "".join(
            _cell_symbol(Position(x=x, y=y), grid, player, trail).center(CELL_WIDTH)
            for x in range(grid.size)
        )
        lines.append(colored("|", Color.CYAN) + row + colored("|", Color.CYAN))
    lines.append(colored(border, Color.CYAN))
    return "\n".join(lines)


def render_metrics(summary: MetricsSummary) -> str:
    display = summary.to_display()
    rows = [
        ("Moves", f"{display['moves']} ({display['invalidMoves']} invalid)"),
        ("Efficiency", display["efficiency"]),
        ("Decision Quality", display["decisionQuality"]),
        ("Decision Accuracy", display["decisionAccuracy"]),
        ("Progress", display["progressToTarget"]),
        ("Exploration", display["explorationEfficiency"]),
    ]
    width = max(len(label) for label, _ in rows) + 2
    lines = [colored("=== Performance Metrics ===", Color.CYAN)]
    lines.extend(f"{label.ljust(width)}: {value}" for label, value in rows)
    return "\n".join(lines)


def render_decision(direction: Optional[Direction], metrics: DecisionMetrics) -> str:
    lines = [colored("=== Decision Analysis ===", Color.CYAN)]
    details = [
        ("Current Move", ARROWS.get(direction, "-") if direction else "-"),
        ("Confidence", f"{metrics.confidence * 100:.1f}%"),
        ("Alternatives", str(metrics.alternatives_considered)),
        ("Expected Result", f"{metrics.expected_outcome * 100:.1f}%"),
        ("Actual Result", f"{metrics.actual_outcome * 100:.1f}%"),
    ]
    lines.extend(f"{colored(label.ljust(15), Color.YELLOW)} {value}" for label, value in details)
    if metrics.reasoning:
        lines.append(colored("=== Reasoning ===", Color.CYAN))
        lines.append(metrics.reasoning)
    return "\n".join(lines)


def render_frame(
    grid: Grid,
    player: Position,
    step: int,
    summary: MetricsSummary,
    *,
    direction: Optional[Direction] = None,
    decision: Optional[DecisionMetrics] = None,
) -> str:
    """Full frame: header, maze, metrics and (if given) the latest decision."""

    sections: List[str] = [
        colored("=== Maze Navigation ===", Color.CYAN, bold=True),
        f"Step {step}",
        render_grid(grid, player, summary.path),
        render_metrics(summary),
    ]
    if decision is not None:
        sections.append(render_decision(direction, decision))
    return "\n\n".join(sections)


def print_frame(*args, **kwargs) -> None:
    print(render_frame(*args, **kwargs), flush=True)
