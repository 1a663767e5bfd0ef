"""
Decision telemetry: turns a stream of move attempts and navigator self-reports
into comparable navigation-quality metrics.

Key responsibilities:
- Count successful and invalid moves, track visited cells and per-move timing
- Detect backtracking (moving away from the target, or revisiting a cell)
- Penalise unreliable self-reports before they reach any aggregate
- Derive efficiency, decision accuracy/quality, exploration and deviation
- Keep an append-only analysis log as the episode's audit trail

Every derived figure is a pure function of stored history, recomputed on
demand, so ``summarize()`` and ``export()`` always agree with a from-scratch
recomputation.

Usage pattern:
    telemetry = DecisionTelemetry(grid)
    telemetry.record_move(True, new_position, metrics)
    telemetry.add_to_path(Direction.UP)
    summary = telemetry.summarize()
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from minimaze.environment import (
    Direction,
    Grid,
    Position,
    manhattan_distance,
    optimal_path_length,
)
from minimaze.logging_utils import log_warning
from minimaze.schemas import (
    AnalysisLogEntry,
    DecisionHistoryEntry,
    DecisionMetrics,
    ExportedMetrics,
    MetricsSummary,
    MoveTiming,
    TelemetryEvent,
    TelemetryExport,
    TelemetryState,
)

INVALID_MOVE_PENALTY = 0.5
BACKTRACK_PENALTY = 0.8
# How many prior decisions feed recent accuracy and weighted confidence.
RECENT_WINDOW = 3
ALTERNATIVES_FOR_FULL_BONUS = 4
MAX_ALTERNATIVES_BONUS = 0.2
BACKTRACK_EFFICIENCY_PENALTY = 0.1
# Floor for an adjusted expected outcome; keeps outcome ratios finite.
MIN_EXPECTED_OUTCOME = 0.05


# ============================================================================
# Pure aggregate functions
# ============================================================================


def outcome_ratio(decision: DecisionMetrics) -> float:
    """actual / expected outcome, capped at 1. 0 when the expectation is not positive.

    Beating an expectation scores the same as meeting it.
    """

    if decision.expected_outcome <= 0:
        return 0.0
    return min(1.0, decision.actual_outcome / decision.expected_outcome)


def calibration(decision: DecisionMetrics) -> float:
    """How close the stated confidence was to what actually happened."""

    return 1 - abs(decision.confidence - decision.actual_outcome)


def recent_accuracy(decisions: Sequence[DecisionMetrics]) -> float:
    """Mean outcome ratio over the last ``RECENT_WINDOW`` decisions (1 if none)."""

    window = list(decisions)[-RECENT_WINDOW:]
    if not window:
        return 1.0
    return sum(outcome_ratio(d) for d in window) / len(window)


def weighted_recent_confidence(decisions: Sequence[DecisionMetrics]) -> float:
    """Recency-weighted mean confidence: oldest weight 1, newest weight n."""

    window = list(decisions)[-RECENT_WINDOW:]
    if not window:
        return 0.0
    weights = range(1, len(window) + 1)
    weighted = sum(w * d.confidence for w, d in zip(weights, window))
    return weighted / sum(weights)


def decision_accuracy(decisions: Sequence[DecisionMetrics]) -> float:
    """Mean of outcome ratio x calibration. An empty history scores 1."""

    if not decisions:
        return 1.0
    return sum(outcome_ratio(d) * calibration(d) for d in decisions) / len(decisions)


def decision_quality(decisions: Sequence[DecisionMetrics]) -> float:
    """Decision accuracy with up to a 20% bonus for weighing alternatives, x100."""

    if not decisions:
        return 0.0
    total = 0.0
    for d in decisions:
        bonus = min(d.alternatives_considered / ALTERNATIVES_FOR_FULL_BONUS, 1) * MAX_ALTERNATIVES_BONUS
        total += outcome_ratio(d) * calibration(d) * (1 + bonus)
    return total / len(decisions) * 100


# ============================================================================
# Telemetry accumulator
# ============================================================================


class DecisionTelemetry:
    """Per-episode telemetry accumulator.

    One instance per episode, owned by whoever drives the episode. Not
    thread-safe; a reset means constructing a new instance.

    Args:
        grid: The episode's maze. The optimal path length and the initial
            distance are computed from it once, here.
        clock: Returns wall-clock seconds. Injected so tests can control time.
    """

    def __init__(self, grid: Grid, *, clock: Callable[[], float] = time.time):
        self.grid = grid
        self._clock = clock
        self._events: list[TelemetryEvent] = []

        started = clock()
        optimal = optimal_path_length(grid.start, grid.target, grid)
        self.state = TelemetryState(
            start_time=started,
            last_move_timestamp=started,
            position_history=[grid.start],
            optimal_path_length=optimal,
            initial_distance=manhattan_distance(grid.start, grid.target),
        )
        if optimal is None:
            log_warning(
                f"No path from {grid.start.key} to {grid.target.key}; "
                "efficiency baseline is undefined for this episode."
            )

        self._append_log(
            started,
            "INITIALIZATION",
            {
                "startPosition": grid.start.model_dump(),
                "targetPosition": grid.target.model_dump(),
                "optimalPathLength": optimal,
                "initialDistance": self.state.initial_distance,
            },
        )

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def record_move(self, success: bool, position: Position, metrics: DecisionMetrics) -> None:
        """Ingest one move attempt.

        ``position`` is where the navigator stands after the attempt (its old
        cell when the move was invalid). ``metrics`` carries the raw self-report
        with ``actual_outcome`` already filled in by the caller.
        """

        state = self.state
        now = self._clock()
        move_time = max(0.0, (now - state.last_move_timestamp) * 1000)
        state.last_move_timestamp = now

        if success:
            state.moves += 1
        else:
            state.invalid_moves += 1
        state.visited_positions.add(position.key)

        distance = manhattan_distance(position, self.grid.target)
        progress = self._progress(distance)

        is_backtracking = self._is_backtracking(position)
        if is_backtracking:
            state.backtrack_count += 1
        state.position_history.append(position)

        adjusted = self._adjust_metrics(metrics, success, is_backtracking)
        state.decision_history.append(
            DecisionHistoryEntry(
                original_metrics=metrics,
                adjusted_metrics=adjusted,
                success=success,
                is_backtracking=is_backtracking,
                timestamp=now,
            )
        )
        state.decisions.append(adjusted)

        state.move_timings.append(
            MoveTiming(
                move_number=state.moves + state.invalid_moves,
                duration=move_time,
                success=success,
                is_backtracking=is_backtracking,
            )
        )
        state.progress_to_target = progress

        self._append_log(
            now,
            "SUCCESSFUL_MOVE" if success else "FAILED_MOVE",
            {
                "position": position.model_dump(),
                "distanceToTarget": distance,
                "progress": progress,
                "moveTime": move_time,
                "isBacktracking": is_backtracking,
                "metrics": adjusted.model_dump(by_alias=True),
            },
        )

        self._refresh_aggregates()

    def add_to_path(self, direction: Direction | str) -> None:
        """Append an accepted move to the path taken."""
        self.state.path.append(Direction(direction))

    def log_event(
        self,
        kind: str,
        data: Optional[Mapping[str, Any]] = None,
        metrics: Optional[DecisionMetrics] = None,
    ) -> TelemetryEvent:
        """Append an externally signalled event to the event list and analysis log."""

        event = TelemetryEvent(
            kind=kind,
            timestamp=self._clock(),
            data=dict(data or {}),
            metrics=metrics,
        )
        self._events.append(event)
        self._append_log(event.timestamp, kind, event.data)
        return event

    def finish(self) -> None:
        """Stamp the episode end time. Later calls keep the first stamp."""
        if self.state.end_time is None:
            self.state.end_time = self._clock()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def events(self) -> Tuple[TelemetryEvent, ...]:
        return tuple(self._events)

    @property
    def analysis_log(self) -> Tuple[AnalysisLogEntry, ...]:
        return tuple(self.state.analysis_log)

    def latest_event(self) -> Optional[TelemetryEvent]:
        return self._events[-1] if self._events else None

    def efficiency(self) -> float:
        """Optimal length over moves taken, x100, minus a small backtrack penalty.

        0 when the baseline is undefined (no path) or no move has succeeded.
        """
        optimal = self.state.optimal_path_length
        if not optimal or not self.state.moves:
            return 0.0
        raw = optimal / self.state.moves * 100
        return max(0.0, raw - self.state.backtrack_count * BACKTRACK_EFFICIENCY_PENALTY)

    def path_deviation(self) -> int:
        optimal = self.state.optimal_path_length
        if optimal is None:
            return 0
        return abs(len(self.state.path) - optimal)

    def backtrack_ratio(self) -> float:
        if not self.state.moves:
            return 0.0
        return self.state.backtrack_count / self.state.moves * 100

    def decision_quality(self) -> float:
        return decision_quality(self.state.decisions)

    def average_move_time(self) -> float:
        timings = self.state.move_timings
        if not timings:
            return 0.0
        return sum(t.duration for t in timings) / len(timings)

    def duration(self) -> float:
        """Seconds from start to the end stamp, or to the latest recorded activity."""
        state = self.state
        end = state.end_time
        if end is None:
            end = max(state.last_move_timestamp, state.analysis_log[-1].timestamp)
        return max(0.0, end - state.start_time)

    def summarize(self) -> MetricsSummary:
        """Point-in-time snapshot. Reads state only; never reads the clock."""

        state = self.state
        return MetricsSummary(
            moves=state.moves,
            invalid_moves=state.invalid_moves,
            unique_positions=len(state.visited_positions),
            duration=round(self.duration(), 2),
            efficiency=round(self.efficiency(), 2),
            path_deviation=self.path_deviation(),
            decision_quality=round(self.decision_quality(), 2),
            backtrack_ratio=round(self.backtrack_ratio(), 2),
            average_confidence=round(state.average_confidence * 100, 2),
            exploration_efficiency=round(state.exploration_ratio * 100, 2),
            progress_to_target=round(state.progress_to_target, 2),
            decision_accuracy=round(state.decision_accuracy * 100, 2),
            average_move_time=round(self.average_move_time(), 2),
            path=list(state.path),
        )

    def export(self, session_id: str) -> TelemetryExport:
        """Full-state document for persistence: state, events and initial grid."""

        payload: Dict[str, Any] = self.state.model_dump()
        if payload["end_time"] is None:
            payload["end_time"] = self._clock()
        payload.update(
            efficiency=self.efficiency(),
            path_deviation=self.path_deviation(),
            decision_quality=self.decision_quality(),
            average_move_time=self.average_move_time(),
        )
        return TelemetryExport(
            session_id=session_id,
            metrics=ExportedMetrics.model_validate(payload),
            events=list(self._events),
            initial_state=self.grid,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _progress(self, distance: int) -> float:
        initial = self.state.initial_distance
        if initial == 0:
            return 100.0 if distance == 0 else 0.0
        return max(0.0, (initial - distance) / initial * 100)

    def _is_backtracking(self, position: Position) -> bool:
        """Farther from the target than the previous cell, or an earlier cell revisited."""

        history = self.state.position_history
        previous = history[-1]
        target = self.grid.target
        if manhattan_distance(position, target) > manhattan_distance(previous, target):
            return True
        return position in history[:-1]

    def _adjust_metrics(
        self, metrics: DecisionMetrics, success: bool, is_backtracking: bool
    ) -> DecisionMetrics:
        confidence = metrics.confidence
        if not success:
            confidence *= INVALID_MOVE_PENALTY
        if is_backtracking:
            confidence *= BACKTRACK_PENALTY

        expected = metrics.expected_outcome
        prior = self.state.decisions[-RECENT_WINDOW:]
        if prior:
            # Tie the new expectation to how well recent expectations held up.
            scaled = expected * recent_accuracy(prior)
            expected = max(MIN_EXPECTED_OUTCOME, scaled)

        return metrics.model_copy(
            update={"confidence": confidence, "expected_outcome": expected}
        )

    def _refresh_aggregates(self) -> None:
        state = self.state
        attempts = state.moves + state.invalid_moves
        state.average_confidence = weighted_recent_confidence(state.decisions)
        state.exploration_ratio = len(state.visited_positions) / attempts if attempts else 0.0
        state.decision_accuracy = decision_accuracy(state.decisions)

    def _append_log(self, timestamp: float, event: str, details: Dict[str, Any]) -> None:
        self.state.analysis_log.append(
            AnalysisLogEntry(timestamp=timestamp, event=event, details=details)
        )
