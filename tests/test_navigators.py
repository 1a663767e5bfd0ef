"""Tests for the scripted and LLM navigators."""

import pytest

from minimaze import (
    Direction,
    LLMNavigator,
    MazeSession,
    NavigatorTurn,
    ScriptedNavigator,
    apply_direction,
    build_grid,
    find_optimal_path,
)


@pytest.mark.asyncio
async def test_scripted_navigator_follows_optimal_path(session):
    navigator = ScriptedNavigator(session.grid)
    expected = find_optimal_path(session.grid.start, session.grid.target, session.grid)

    turn = await navigator.decide(session.observe(1))

    assert navigator.uses_llm() is False
    assert turn.action == "move"
    assert apply_direction(session.position, turn.direction) == expected[1].position
    assert turn.confidence == 0.9
    assert turn.alternatives_considered == 1
    assert 0 < turn.expected_outcome <= 1


@pytest.mark.asyncio
async def test_scripted_navigator_submits_on_target(session):
    navigator = ScriptedNavigator(session.grid)
    for direction in ["RIGHT", "RIGHT", "UP", "UP", "UP", "RIGHT"]:
        session.move(direction, confidence=0.9)

    turn = await navigator.decide(session.observe(7))

    assert turn.action == "submit"
    assert turn.explanation == "Reached target in 6 moves"


@pytest.mark.asyncio
async def test_scripted_navigator_gives_up_without_route(clock):
    grid = build_grid(3, [(1, 0), (1, 1), (1, 2)], (0, 0), (2, 0))
    session = MazeSession(grid, clock=clock)

    turn = await ScriptedNavigator(grid).decide(session.observe(1))

    assert turn.action == "submit"
    assert turn.confidence == 0.0


@pytest.mark.asyncio
async def test_llm_navigator_delegates_to_retry_helper(monkeypatch, session):
    captured = {}

    async def fake_call(**kwargs):
        captured.update(kwargs)
        return NavigatorTurn(action="move", direction="UP", confidence=0.6)

    monkeypatch.setattr("minimaze.navigators.call_llm_with_retries", fake_call)

    navigator = LLMNavigator(llm_provider="anthropic", llm_model="claude-test", max_attempts=2)
    turn = await navigator.decide(session.observe(1))

    assert navigator.uses_llm() is True
    assert turn.direction is Direction.UP
    assert captured["response_model"] is NavigatorTurn
    assert captured["llm_provider"] == "anthropic"
    assert captured["llm_model"] == "claude-test"
    assert captured["max_attempts"] == 2
    assert "Step 1 on a 4x4 grid." in captured["user_prompt"]
    assert '"possibleMoves"' in captured["user_prompt"]
    assert "Navigate from P to T" in captured["system_prompt"]


def test_navigator_turn_requires_direction_for_moves():
    with pytest.raises(ValueError):
        NavigatorTurn(action="move", confidence=0.5)

    turn = NavigatorTurn(action="submit", confidence=0.5)
    assert turn.direction is None
