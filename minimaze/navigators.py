"""Navigators: the actors that propose moves.

The engine treats a navigator as opaque. It receives a
``NavigatorObservation`` each step and answers with a ``NavigatorTurn``
(move somewhere with a self-reported confidence, or submit).

- ``ScriptedNavigator`` walks the A* route. No LLM, fully deterministic.
- ``LLMNavigator`` asks a language model through ``call_llm_with_retries``.
"""

from __future__ import annotations

from typing import Protocol

from .environment import (
    Direction,
    Grid,
    apply_direction,
    find_optimal_path,
    manhattan_distance,
)
from .llm_utils import call_llm_with_retries
from .schemas import NavigatorObservation, NavigatorTurn


DEFAULT_SYSTEM_PROMPT = """Navigate from P to T efficiently, avoiding walls (#).
Strategy: scan the surroundings, make optimal moves, minimise steps.
Key goals: shortest path, no backtracking unless necessary.
Evaluate your confidence and the alternatives before each move.

Coordinates are (x, y); UP decreases y, DOWN increases y,
LEFT decreases x, RIGHT increases x.

Reply with JSON matching the NavigatorTurn schema:
- action: "move" or "submit"
- direction: UP, DOWN, LEFT or RIGHT (required for "move")
- reasoning: why you chose this move
- confidence: 0-1
- alternatives_considered: how many other moves you weighed
- expected_outcome: 0-1, how well you expect this move to go
- explanation: summary of your route (for "submit")
Submit once you stand on the target."""


class Navigator(Protocol):
    """Protocol for navigation strategies."""

    async def decide(self, observation: NavigatorObservation) -> NavigatorTurn:
        """Choose the next turn given the current observation."""
        ...

    def uses_llm(self) -> bool:
        """Return True if this navigator performs an LLM call per turn."""
        ...


class ScriptedNavigator:
    """Deterministic navigator that follows the optimal path.

    Replans from its current cell every turn, so it recovers if something
    external moved it. Submits when it reaches the target or finds no route.
    """

    def __init__(self, grid: Grid, *, confidence: float = 0.9):
        self.grid = grid
        self.confidence = confidence

    def uses_llm(self) -> bool:
        return False

    async def decide(self, observation: NavigatorObservation) -> NavigatorTurn:
        scan = observation.scan
        if scan.is_target_reached:
            return NavigatorTurn(
                action="submit",
                confidence=self.confidence,
                explanation=f"Reached target in {len(observation.path_so_far)} moves",
            )

        path = find_optimal_path(scan.current_position, scan.target_position, self.grid)
        if len(path) < 2:
            return NavigatorTurn(
                action="submit",
                confidence=0.0,
                explanation="No route to the target exists",
            )

        next_cell = path[1].position
        direction = next(
            d
            for d in Direction
            if apply_direction(scan.current_position, d) == next_cell
        )
        remaining = manhattan_distance(next_cell, scan.target_position)
        return NavigatorTurn(
            action="move",
            direction=direction,
            reasoning=f"Following shortest route; {len(path) - 2} moves left after this one",
            confidence=self.confidence,
            alternatives_considered=max(len(scan.possible_moves) - 1, 0),
            expected_outcome=1 - remaining / (self.grid.size * 2),
        )


class LLMNavigator:
    """Navigator backed by a language model via mirascope."""

    def __init__(
        self,
        *,
        llm_provider: str,
        llm_model: str,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        max_attempts: int = 3,
    ):
        self.llm_provider = llm_provider
        self.llm_model = llm_model
        self.system_prompt = system_prompt
        self.max_attempts = max_attempts

    def uses_llm(self) -> bool:
        return True

    def build_user_prompt(self, observation: NavigatorObservation) -> str:
        return (
            f"Step {observation.step} on a {observation.grid_size}x{observation.grid_size} grid.\n\n"
            f"Observation:\n{observation.model_dump_json(indent=2, by_alias=True)}\n\n"
            "Choose your next turn. Output JSON matching the NavigatorTurn schema."
        )

    async def decide(self, observation: NavigatorObservation) -> NavigatorTurn:
        return await call_llm_with_retries(
            system_prompt=self.system_prompt,
            user_prompt=self.build_user_prompt(observation),
            llm_provider=self.llm_provider,
            llm_model=self.llm_model,
            response_model=NavigatorTurn,
            max_attempts=self.max_attempts,
        )
