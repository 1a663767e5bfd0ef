"""Tests for console rendering."""

from minimaze import DecisionMetrics, Direction, Position, default_grid
from minimaze.display import render_decision, render_frame, render_grid, trail_cells


def rows(rendered: str):
    lines = rendered.splitlines()
    return [line[1:-1] for line in lines[1:-1]]


def test_render_grid_places_player_target_and_walls():
    grid = default_grid()
    body = rows(render_grid(grid, grid.start))

    assert len(body) == 4
    assert body[0] == "   " + " # " + "   " + " T "
    assert body[1] == "   " + " # " + "   " + " # "
    assert body[3] == " P " + "   " * 3
    assert render_grid(grid, grid.start).splitlines()[0] == "+" + "-" * 12 + "+"


def test_render_grid_draws_trail():
    grid = default_grid()
    path = [Direction.RIGHT, Direction.RIGHT, Direction.UP]
    body = rows(render_grid(grid, Position(x=2, y=2), path))

    assert body[3] == " . " + " . " + " . " + "   "
    assert body[2][6:9] == " P "


def test_trail_cells():
    cells = trail_cells(Position(x=0, y=3), [Direction.UP, Direction.UP])
    assert cells == {Position(x=0, y=3), Position(x=0, y=2), Position(x=0, y=1)}


def test_render_frame_includes_metrics_and_decision(session):
    outcome = session.move(Direction.RIGHT, confidence=0.9, reasoning="gap to the right")
    frame = render_frame(
        session.grid,
        session.position,
        1,
        session.summary(),
        direction=Direction.RIGHT,
        decision=outcome.metrics,
    )

    assert "Step 1" in frame
    assert "=== Performance Metrics ===" in frame
    assert "Efficiency" in frame
    assert "→" in frame
    assert "gap to the right" in frame


def test_render_decision_without_reasoning():
    metrics = DecisionMetrics(confidence=0.5, expected_outcome=0.5, actual_outcome=0.25)
    text = render_decision(None, metrics)

    assert "50.0%" in text
    assert "25.0%" in text
    assert "Reasoning" not in text
