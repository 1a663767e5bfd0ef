"""Tests for the maze session tool surface."""

import pytest

from minimaze import Direction, MazeSession, Position, build_grid, default_grid
from minimaze.session import actual_outcome


def test_scan_at_start(session):
    report = session.scan()

    assert report.current_position == Position(x=0, y=3)
    assert report.target_position == Position(x=3, y=0)
    assert report.distance_to_target == 6
    assert report.possible_moves == [Direction.UP, Direction.RIGHT]
    assert report.visited_positions == []
    assert report.is_target_reached is False


def test_legal_move_updates_position_and_telemetry(session):
    outcome = session.move(Direction.RIGHT, confidence=0.9, expected_outcome=0.5, reasoning="go")

    assert outcome.success is True
    assert outcome.rejected is False
    assert outcome.position == Position(x=1, y=3)
    assert outcome.message == "Move RIGHT: Success"
    assert outcome.metrics.actual_outcome == pytest.approx(1 - 5 / 8)
    assert session.telemetry.state.moves == 1
    assert session.telemetry.state.path == [Direction.RIGHT]

    event = session.telemetry.latest_event()
    assert event.kind == "MOVE"
    assert event.data == {
        "direction": "RIGHT",
        "newPosition": {"x": 1, "y": 3},
        "reasoning": "go",
    }


@pytest.mark.parametrize("direction", [Direction.DOWN, Direction.LEFT])
def test_off_grid_move_is_invalid(session, direction):
    outcome = session.move(direction, confidence=0.8)

    assert outcome.success is False
    assert outcome.position == Position(x=0, y=3)
    assert outcome.metrics.actual_outcome == 0.0
    assert session.telemetry.state.invalid_moves == 1
    assert session.telemetry.state.path == []
    assert session.telemetry.state.decisions[-1].confidence == pytest.approx(0.4)
    assert session.telemetry.latest_event().kind == "INVALID_MOVE"


def test_move_into_wall_is_invalid(session):
    session.move("UP", confidence=0.9)  # (0,2)
    outcome = session.move("RIGHT", confidence=0.9)  # (1,2) is a wall

    assert outcome.success is False
    assert session.position == Position(x=0, y=2)
    assert session.telemetry.latest_event().data["newPosition"] == {"x": 1, "y": 2}


def test_malformed_proposals_are_rejected(session):
    too_confident = session.move(Direction.UP, confidence=1.5)
    bad_direction = session.move("NORTH", confidence=0.5)
    zero_expectation = session.move(Direction.UP, confidence=0.5, expected_outcome=0)

    for outcome in (too_confident, bad_direction, zero_expectation):
        assert outcome.rejected is True
        assert outcome.success is False
        assert outcome.issues
    assert session.position == Position(x=0, y=3)
    state = session.telemetry.state
    assert state.moves == 0 and state.invalid_moves == 0
    assert state.decisions == []

    kinds = [event.kind for event in session.telemetry.events]
    assert kinds == ["REJECTED_INPUT"] * 3
    assert session.telemetry.events[1].data["direction"] == "NORTH"


def test_backtrack_through_session(session):
    session.move(Direction.UP, confidence=0.9)
    session.move(Direction.DOWN, confidence=0.9)

    timings = session.telemetry.state.move_timings
    assert [t.is_backtracking for t in timings] == [False, True]
    assert session.telemetry.state.decisions[-1].confidence == pytest.approx(0.72)


def test_submit_stamps_end_time(session, clock):
    session.move(Direction.RIGHT, confidence=0.9)
    clock.advance(2)
    receipt = session.submit("done", 0.7)
    clock.advance(10)

    assert receipt.success is True
    assert session.submitted is True
    assert session.telemetry.state.end_time == pytest.approx(1002.0)
    assert session.summary().duration == pytest.approx(2.0)

    event = session.telemetry.latest_event()
    assert event.kind == "SUBMIT"
    assert event.data["confidenceScore"] == 0.7
    assert event.data["targetReached"] is False
    assert event.data["finalMetrics"]["moves"] == 1


def test_invalid_submit_is_rejected(session):
    receipt = session.submit("done", 2.0)

    assert receipt.success is False
    assert receipt.issues
    assert session.submitted is False
    assert session.telemetry.state.end_time is None
    assert session.telemetry.latest_event().kind == "REJECTED_INPUT"


def test_reset_starts_fresh(session):
    session.move(Direction.RIGHT, confidence=0.9)
    session.submit("done", 0.5)
    old_telemetry = session.telemetry

    session.reset()

    assert session.position == Position(x=0, y=3)
    assert session.submitted is False
    assert session.telemetry is not old_telemetry
    assert session.telemetry.state.moves == 0
    assert session.telemetry.events == ()


def test_reset_with_new_grid():
    session = MazeSession()
    grid = build_grid(3, [], (2, 2), (0, 0))
    session.reset(grid)

    assert session.grid is grid
    assert session.position == Position(x=2, y=2)
    assert session.telemetry.state.optimal_path_length == 4


def test_actual_outcome():
    grid = default_grid()

    assert actual_outcome(Position(x=3, y=0), grid, True) == 1.0
    assert actual_outcome(Position(x=0, y=3), grid, True) == pytest.approx(0.25)
    assert actual_outcome(Position(x=2, y=0), grid, False) == 0.0


def test_observe_reports_scan_and_summary(session):
    session.move(Direction.RIGHT, confidence=0.9)
    observation = session.observe(2)

    assert observation.step == 2
    assert observation.grid_size == 4
    assert observation.scan.current_position == Position(x=1, y=3)
    assert observation.path_so_far == [Direction.RIGHT]
    assert observation.summary.moves == 1


def test_optimal_route_end_to_end(session):
    route = ["RIGHT", "RIGHT", "UP", "UP", "UP", "RIGHT"]
    for direction in route:
        assert session.move(direction, confidence=0.9).success

    assert session.is_target_reached
    assert session.submit("Reached the target", 0.9).success

    summary = session.summary()
    assert summary.moves == 6
    assert summary.invalid_moves == 0
    assert summary.efficiency == 100.0
    assert summary.path_deviation == 0
    assert summary.backtrack_ratio == 0.0
    assert summary.progress_to_target == 100.0
    assert summary.unique_positions == 6
    assert [d.value for d in summary.path] == route


def test_wall_bump_does_not_raise_decision_scores(clock):
    honest = MazeSession(default_grid(), clock=clock)
    gaming = MazeSession(default_grid(), clock=clock)

    assert gaming.move("LEFT", confidence=0.8, expected_outcome=0.5).success is False
    for session in (honest, gaming):
        for direction in ["RIGHT", "RIGHT"]:
            assert session.move(direction, confidence=0.8, expected_outcome=0.5).success

    honest_summary = honest.summary()
    gaming_summary = gaming.summary()
    assert honest_summary.decision_accuracy == pytest.approx(56.56, abs=0.01)
    assert gaming_summary.decision_accuracy == pytest.approx(42.5)
    assert gaming_summary.decision_accuracy <= honest_summary.decision_accuracy
    assert gaming_summary.decision_quality <= honest_summary.decision_quality
