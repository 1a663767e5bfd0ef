"""
minimaze - navigation-quality evaluation for agents in grid mazes.

An agent proposes moves with a self-reported confidence; minimaze checks them
against the maze, scores them against an A* optimal path and keeps an
auditable telemetry record of the episode.

No global state: each episode owns its MazeSession and DecisionTelemetry.
"""

__version__ = "0.1.0"

from .environment import (
    Direction,
    Grid,
    PathNode,
    Position,
    apply_direction,
    build_grid,
    default_grid,
    find_optimal_path,
    is_legal,
    manhattan_distance,
    optimal_path_length,
)
from .schemas import (
    AnalysisLogEntry,
    DecisionHistoryEntry,
    DecisionMetrics,
    MetricsSummary,
    MoveOutcome,
    MoveTiming,
    NavigatorObservation,
    NavigatorTurn,
    ScanReport,
    SubmitReceipt,
    TelemetryEvent,
    TelemetryExport,
    TelemetryState,
)
from .telemetry import DecisionTelemetry
from .session import MazeSession
from .persistence import (
    TelemetryStore,
    InMemoryTelemetryStore,
    JsonTelemetryStore,
    persist_telemetry,
)
from .navigators import Navigator, ScriptedNavigator, LLMNavigator
from .runner import EpisodeResult, NavigatorFailedError, run_episode

__all__ = [
    # Environment
    "Direction",
    "Grid",
    "PathNode",
    "Position",
    "apply_direction",
    "build_grid",
    "default_grid",
    "find_optimal_path",
    "is_legal",
    "manhattan_distance",
    "optimal_path_length",
    # Schemas
    "AnalysisLogEntry",
    "DecisionHistoryEntry",
    "DecisionMetrics",
    "MetricsSummary",
    "MoveOutcome",
    "MoveTiming",
    "NavigatorObservation",
    "NavigatorTurn",
    "ScanReport",
    "SubmitReceipt",
    "TelemetryEvent",
    "TelemetryExport",
    "TelemetryState",
    # Core
    "DecisionTelemetry",
    "MazeSession",
    # Persistence
    "TelemetryStore",
    "InMemoryTelemetryStore",
    "JsonTelemetryStore",
    "persist_telemetry",
    # Navigators and driver
    "Navigator",
    "ScriptedNavigator",
    "LLMNavigator",
    "EpisodeResult",
    "NavigatorFailedError",
    "run_episode",
]
