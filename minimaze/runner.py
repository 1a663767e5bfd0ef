"""
Episode driver.

Coordinates one maze episode:
1. Observe the session (scan + running summary)
2. Ask the navigator for a turn (may be an LLM round trip)
3. Apply the move or submission through the session tools
4. Render the frame (optional)
5. Persist the telemetry export through the injected store

The engine itself never suspends; the only await points are the navigator
call, the optional frame delay and persistence.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from .config import Config
from .display import print_frame
from .logging_utils import (
    TAG_DETERMINISTIC,
    TAG_LLM,
    log_deterministic,
    log_error,
    log_info,
    log_success,
    log_warning,
)
from .navigators import Navigator
from .persistence import InMemoryTelemetryStore, TelemetryStore, persist_telemetry
from .schemas import MetricsSummary, TelemetryExport
from .session import MazeSession


class NavigatorFailedError(Exception):
    """Raised when the navigator cannot produce a turn.

    The partial telemetry has already been saved under ``<session_id>-error``
    by the time this is raised.
    """

    def __init__(self, *, step: int, session_id: str, underlying: Exception) -> None:
        self.step = step
        self.session_id = session_id
        self.underlying = underlying
        message = (
            f"Navigator failed at step {step} of session {session_id}: {underlying}\n\n"
            "Remediation tips:\n"
            "  - Verify LLM configuration (LLM_PROVIDER, LLM_MODEL, API key)\n"
            "  - Use the scripted navigator to rule out engine problems\n"
            f"  - Inspect telemetry-{session_id}-error.json for the moves so far"
        )
        super().__init__(message)


@dataclass
class EpisodeResult:
    session_id: str
    steps: int
    submitted: bool
    reached_target: bool
    summary: MetricsSummary
    export: TelemetryExport
    saved: bool


async def run_episode(
    session: MazeSession,
    navigator: Navigator,
    *,
    max_steps: Optional[int] = None,
    store: Optional[TelemetryStore] = None,
    session_id: Optional[str] = None,
    render: bool = False,
    frame_delay: float = 0.0,
) -> EpisodeResult:
    """Run one episode until the navigator submits or ``max_steps`` is used up.

    Args:
        session: Owned game state for this episode.
        navigator: Actor that proposes turns.
        max_steps: Turn budget (defaults to ``Config.MAX_STEPS``).
        store: Where the telemetry export goes (defaults to in-memory).
        session_id: Export key (defaults to a random hex id).
        render: Print an ASCII frame after every move.
        frame_delay: Seconds to pause after each rendered frame.

    Raises:
        NavigatorFailedError: If the navigator raises while deciding.
    """

    max_steps = max_steps if max_steps is not None else Config.MAX_STEPS
    session_id = session_id or uuid4().hex
    store = store or InMemoryTelemetryStore()
    tag = TAG_LLM if navigator.uses_llm() else TAG_DETERMINISTIC
    grid = session.grid

    optimal = session.telemetry.state.optimal_path_length
    log_info(
        f"Session {session_id}: {grid.size}x{grid.size} maze, "
        f"optimal path {optimal if optimal is not None else 'undefined'}"
    )
    if render:
        print_frame(grid, session.position, 0, session.summary())

    steps = 0
    for step in range(1, max_steps + 1):
        observation = session.observe(step)
        try:
            turn = await navigator.decide(observation)
        except Exception as exc:
            log_error(f"{tag} Navigator failed at step {step}: {exc}")
            session.telemetry.finish()
            await persist_telemetry(store, session.telemetry, f"{session_id}-error")
            raise NavigatorFailedError(
                step=step, session_id=session_id, underlying=exc
            ) from exc
        steps = step

        if turn.action == "submit":
            receipt = session.submit(turn.explanation or turn.reasoning, turn.confidence)
            if receipt.success:
                log_deterministic(f"Step {step}: navigator submitted")
                break
            continue

        outcome = session.move(
            turn.direction,
            confidence=turn.confidence,
            alternatives_considered=turn.alternatives_considered,
            expected_outcome=turn.expected_outcome,
            reasoning=turn.reasoning,
        )
        if outcome.rejected:
            continue
        log_deterministic(
            f"{tag} Step {step}: {outcome.message} -> {outcome.position.key}"
        )

        if render:
            print_frame(
                grid,
                session.position,
                step,
                session.summary(),
                direction=turn.direction,
                decision=outcome.metrics,
            )
            if frame_delay:
                await asyncio.sleep(frame_delay)
    else:
        log_warning(f"Step budget of {max_steps} exhausted without a submission")

    session.telemetry.finish()
    export, saved = await persist_telemetry(store, session.telemetry, session_id)
    summary = session.summary()
    log_success(
        f"Session {session_id} complete: {summary.moves} moves, "
        f"efficiency {summary.efficiency:.2f}%"
    )

    return EpisodeResult(
        session_id=session_id,
        steps=steps,
        submitted=session.submitted,
        reached_target=session.is_target_reached,
        summary=summary,
        export=export,
        saved=saved,
    )
