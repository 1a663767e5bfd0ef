"""
Pydantic schemas for minimaze telemetry, tool calls and navigator turns.

Design notes:
- Python attributes are snake_case; exported documents use camelCase field
  names (``model_dump(by_alias=True)``) so the JSON matches the summary and
  export contracts consumed by renderers and log readers.
- Records that form the audit trail (decisions, log entries, events) are
  frozen. The accumulator (``TelemetryState``) is the one mutable model and is
  owned by a single ``DecisionTelemetry`` instance.
- Actor-supplied values are range-checked here, at the boundary, so aggregate
  math never sees an out-of-range confidence or a non-positive expectation.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Set

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from minimaze.environment import Direction, Grid, Position


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenCamelModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


# ============================================================================
# Decision records
# ============================================================================


class DecisionMetrics(FrozenCamelModel):
    """Per-move decision record: actor self-report plus engine outcome.

    ``actual_outcome`` is filled in by the session, never by the actor.
    """

    confidence: float = Field(..., ge=0.0, le=1.0, description="Self-reported confidence")
    alternatives_considered: int = Field(
        0, ge=0, description="How many other moves the actor weighed"
    )
    # Strictly positive: every accuracy formula divides by it.
    expected_outcome: float = Field(
        ..., gt=0.0, le=1.0, description="Actor's predicted success score"
    )
    actual_outcome: float = Field(
        0.0, ge=0.0, le=1.0, description="Engine-computed success score"
    )
    reasoning: str = Field("", description="Opaque free text carried into the log")


class MoveTiming(CamelModel):
    move_number: int = Field(..., ge=1)
    duration: float = Field(..., ge=0.0, description="Milliseconds since previous move")
    success: bool
    is_backtracking: bool


class DecisionHistoryEntry(FrozenCamelModel):
    """Audit entry pairing the raw self-report with its adjusted form."""

    original_metrics: DecisionMetrics
    adjusted_metrics: DecisionMetrics
    success: bool
    is_backtracking: bool
    timestamp: float


class AnalysisLogEntry(FrozenCamelModel):
    timestamp: float
    event: str
    details: Dict[str, Any] = Field(default_factory=dict)


class TelemetryEvent(FrozenCamelModel):
    """Externally signalled event (moves, submissions, rejected input)."""

    kind: str = Field(..., description="Event tag, e.g. MOVE, INVALID_MOVE, SUBMIT")
    timestamp: float
    data: Dict[str, Any] = Field(default_factory=dict)
    metrics: Optional[DecisionMetrics] = None


# ============================================================================
# Telemetry accumulator and reports
# ============================================================================


class TelemetryState(CamelModel):
    """Running accumulator for one episode.

    Derived fields (average_confidence, exploration_ratio, decision_accuracy)
    are recomputed from the stored history after every move, never nudged
    incrementally.
    """

    moves: int = 0
    invalid_moves: int = 0
    visited_positions: Set[str] = Field(default_factory=set)
    # Every position the navigator has stood on, seeded with the start cell.
    position_history: List[Position] = Field(default_factory=list)
    start_time: float
    end_time: Optional[float] = None
    path: List[Direction] = Field(default_factory=list)
    decisions: List[DecisionMetrics] = Field(default_factory=list)
    optimal_path_length: Optional[int] = None
    backtrack_count: int = 0
    average_confidence: float = 0.0
    exploration_ratio: float = 0.0
    progress_to_target: float = 0.0
    decision_accuracy: float = 1.0
    initial_distance: int = 0
    decision_history: List[DecisionHistoryEntry] = Field(default_factory=list)
    move_timings: List[MoveTiming] = Field(default_factory=list)
    last_move_timestamp: float
    analysis_log: List[AnalysisLogEntry] = Field(default_factory=list)

    @field_serializer("visited_positions")
    def _serialize_visited(self, visited: Set[str]) -> List[str]:
        return sorted(visited)


class ExportedMetrics(TelemetryState):
    """Telemetry state plus the summary-only derived figures."""

    efficiency: float = 0.0
    path_deviation: int = 0
    decision_quality: float = 0.0
    average_move_time: float = 0.0


def _percent(value: float) -> str:
    return f"{value:.2f}%"


class MetricsSummary(FrozenCamelModel):
    """Point-in-time snapshot handed to renderers and observers.

    Percentages are on a 0-100 scale, ``duration`` is seconds and
    ``average_move_time`` is milliseconds. Values are rounded to two decimals.
    """

    moves: int
    invalid_moves: int
    unique_positions: int
    duration: float
    efficiency: float
    path_deviation: int
    decision_quality: float
    backtrack_ratio: float
    average_confidence: float
    exploration_efficiency: float
    progress_to_target: float
    decision_accuracy: float
    average_move_time: float
    path: List[Direction] = Field(default_factory=list)

    def to_display(self) -> Dict[str, Any]:
        """Format as human-readable strings, e.g. ``{"efficiency": "85.71%"}``."""

        return {
            "moves": self.moves,
            "invalidMoves": self.invalid_moves,
            "uniquePositions": self.unique_positions,
            "duration": f"{self.duration:.2f}s",
            "efficiency": _percent(self.efficiency),
            "pathDeviation": self.path_deviation,
            "decisionQuality": _percent(self.decision_quality),
            "backtrackRatio": _percent(self.backtrack_ratio),
            "averageConfidence": _percent(self.average_confidence),
            "explorationEfficiency": _percent(self.exploration_efficiency),
            "progressToTarget": _percent(self.progress_to_target),
            "decisionAccuracy": _percent(self.decision_accuracy),
            "averageMoveTime": f"{self.average_move_time:.2f}ms",
            "path": [direction.value for direction in self.path],
        }


class TelemetryExport(CamelModel):
    """Self-describing document persisted once per episode."""

    session_id: str
    metrics: ExportedMetrics
    events: List[TelemetryEvent] = Field(default_factory=list)
    initial_state: Grid


# ============================================================================
# Tool surface (session <-> navigator)
# ============================================================================


class MoveProposal(FrozenCamelModel):
    """A move as proposed by a navigator, validated before it touches state."""

    direction: Direction
    reasoning: str = ""
    confidence: float = Field(..., ge=0.0, le=1.0)
    alternatives_considered: int = Field(0, ge=0)
    expected_outcome: float = Field(..., gt=0.0, le=1.0)


class SubmitProposal(FrozenCamelModel):
    explanation: str
    confidence_score: float = Field(..., ge=0.0, le=1.0)


class ScanReport(FrozenCamelModel):
    current_position: Position
    target_position: Position
    distance_to_target: int
    possible_moves: List[Direction]
    visited_positions: List[str]
    is_target_reached: bool


class MoveOutcome(FrozenCamelModel):
    """Result of a move tool call.

    ``rejected`` is True when the proposal itself was malformed; such calls do
    not consume a move slot and ``issues`` lists what was wrong.
    """

    success: bool
    position: Position
    message: str
    metrics: Optional[DecisionMetrics] = None
    rejected: bool = False
    issues: List[str] = Field(default_factory=list)


class SubmitReceipt(FrozenCamelModel):
    success: bool
    message: str = ""
    issues: List[str] = Field(default_factory=list)


class NavigatorObservation(FrozenCamelModel):
    """What a navigator sees before choosing its next turn."""

    step: int = Field(..., ge=1)
    grid_size: int
    scan: ScanReport
    path_so_far: List[Direction] = Field(default_factory=list)
    summary: MetricsSummary


class NavigatorTurn(BaseModel):
    """A navigator's decision for one step: move somewhere, or submit.

    Deliberately loose on ranges; the session validates values when the turn
    is applied so malformed input is rejected in one place.
    """

    action: Literal["move", "submit"] = Field(..., description="'move' or 'submit'")
    direction: Optional[Direction] = Field(
        None, description="Required when action is 'move': UP, DOWN, LEFT or RIGHT"
    )
    reasoning: str = Field("", description="Why this move was chosen")
    confidence: float = Field(..., description="Confidence in this decision, 0-1")
    alternatives_considered: int = Field(
        0, description="Number of alternative moves weighed"
    )
    expected_outcome: float = Field(
        1.0, description="Predicted success score of this move, 0-1"
    )
    explanation: Optional[str] = Field(
        None, description="Final explanation when action is 'submit'"
    )

    @model_validator(mode="after")
    def _direction_required_for_moves(self) -> "NavigatorTurn":
        if self.action == "move" and self.direction is None:
            raise ValueError("direction is required when action is 'move'")
        return self
