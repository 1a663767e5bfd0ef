"""Maze session: the explicitly owned game state plus the navigator tool surface.

A ``MazeSession`` holds the grid, the player's position and the episode's
``DecisionTelemetry``. Navigators interact with it through three tools:

- ``scan()``   - look around (legal moves, distance, visited cells)
- ``move()``   - attempt one step; legality comes from ``is_legal``
- ``submit()`` - declare the episode finished

Malformed proposals are rejected here, before they reach telemetry, and
recorded as ``REJECTED_INPUT`` events. They do not consume a move slot.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from .environment import (
    Direction,
    Grid,
    Position,
    apply_direction,
    default_grid,
    is_legal,
    manhattan_distance,
)
from .logging_utils import log_warning
from .schemas import (
    DecisionMetrics,
    MetricsSummary,
    MoveOutcome,
    MoveProposal,
    NavigatorObservation,
    ScanReport,
    SubmitProposal,
    SubmitReceipt,
)
from .telemetry import DecisionTelemetry


def actual_outcome(position: Position, grid: Grid, legal: bool) -> float:
    """Engine-side success score: 1 - distance / (2 * size) for a legal move, else 0."""

    if not legal:
        return 0.0
    return 1 - manhattan_distance(position, grid.target) / (grid.size * 2)


def _validation_issues(error: ValidationError) -> List[str]:
    issues: List[str] = []
    for err in error.errors(include_url=False):
        loc = ".".join(str(part) for part in err.get("loc", [])) or "root"
        issues.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return issues


class MazeSession:
    """One navigator, one maze, one episode at a time.

    Args:
        grid: Maze to play. Defaults to the reference 4x4 maze.
        clock: Wall-clock source forwarded to telemetry.
    """

    def __init__(
        self,
        grid: Optional[Grid] = None,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self._clock = clock
        self.grid = grid or default_grid()
        self.position = self.grid.start
        self.telemetry = DecisionTelemetry(self.grid, clock=clock)
        self.submitted = False

    def reset(self, grid: Optional[Grid] = None) -> None:
        """Start a fresh episode, optionally on a new grid. Nothing carries over."""
        self.grid = grid or self.grid
        self.position = self.grid.start
        self.telemetry = DecisionTelemetry(self.grid, clock=self._clock)
        self.submitted = False

    @property
    def is_target_reached(self) -> bool:
        return self.position == self.grid.target

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def scan(self) -> ScanReport:
        possible = [
            direction
            for direction in Direction
            if is_legal(apply_direction(self.position, direction), self.grid)
        ]
        return ScanReport(
            current_position=self.position,
            target_position=self.grid.target,
            distance_to_target=manhattan_distance(self.position, self.grid.target),
            possible_moves=possible,
            visited_positions=sorted(self.telemetry.state.visited_positions),
            is_target_reached=self.is_target_reached,
        )

    def move(
        self,
        direction: Direction | str,
        *,
        confidence: float,
        alternatives_considered: int = 0,
        expected_outcome: float = 1.0,
        reasoning: str = "",
    ) -> MoveOutcome:
        """Attempt a single step and record it.

        An illegal step (off-grid or into a wall) is a normal outcome: it is
        counted as an invalid move, the player stays put and confidence is
        penalised.
        """

        try:
            proposal = MoveProposal(
                direction=direction,
                reasoning=reasoning,
                confidence=confidence,
                alternatives_considered=alternatives_considered,
                expected_outcome=expected_outcome,
            )
        except ValidationError as exc:
            return self._reject_move(direction, exc)

        candidate = apply_direction(self.position, proposal.direction)
        legal = is_legal(candidate, self.grid)
        resulting = candidate if legal else self.position

        metrics = DecisionMetrics(
            confidence=proposal.confidence,
            alternatives_considered=proposal.alternatives_considered,
            expected_outcome=proposal.expected_outcome,
            actual_outcome=actual_outcome(candidate, self.grid, legal),
            reasoning=proposal.reasoning,
        )

        self.telemetry.record_move(legal, resulting, metrics)
        if legal:
            self.telemetry.add_to_path(proposal.direction)
            self.position = candidate

        self.telemetry.log_event(
            "MOVE" if legal else "INVALID_MOVE",
            {
                "direction": proposal.direction.value,
                "newPosition": candidate.model_dump(),
                "reasoning": proposal.reasoning,
            },
            metrics=metrics,
        )

        return MoveOutcome(
            success=legal,
            position=self.position,
            message=f"Move {proposal.direction.value}: {'Success' if legal else 'Invalid'}",
            metrics=metrics,
        )

    def submit(self, explanation: str, confidence_score: float) -> SubmitReceipt:
        """Signal that the navigator is done. Stamps the episode end time."""

        try:
            proposal = SubmitProposal(
                explanation=explanation, confidence_score=confidence_score
            )
        except ValidationError as exc:
            issues = _validation_issues(exc)
            self.telemetry.log_event("REJECTED_INPUT", {"tool": "submit", "issues": issues})
            log_warning(f"Rejected submit: {'; '.join(issues)}")
            return SubmitReceipt(success=False, message="Invalid submission", issues=issues)

        self.telemetry.finish()
        self.telemetry.log_event(
            "SUBMIT",
            {
                "explanation": proposal.explanation,
                "confidenceScore": proposal.confidence_score,
                "targetReached": self.is_target_reached,
                "finalMetrics": self.telemetry.summarize().model_dump(mode="json", by_alias=True),
            },
        )
        self.submitted = True
        return SubmitReceipt(success=True, message="Submission recorded")

    def observe(self, step: int) -> NavigatorObservation:
        return NavigatorObservation(
            step=step,
            grid_size=self.grid.size,
            scan=self.scan(),
            path_so_far=list(self.telemetry.state.path),
            summary=self.summary(),
        )

    def summary(self) -> MetricsSummary:
        return self.telemetry.summarize()

    def _reject_move(self, direction: object, error: ValidationError) -> MoveOutcome:
        issues = _validation_issues(error)
        self.telemetry.log_event(
            "REJECTED_INPUT",
            {"tool": "move", "direction": str(getattr(direction, "value", direction)), "issues": issues},
        )
        log_warning(f"Rejected move proposal: {'; '.join(issues)}")
        return MoveOutcome(
            success=False,
            position=self.position,
            message="Move rejected: invalid proposal",
            rejected=True,
            issues=issues,
        )
