"""Pydantic schemas for the maze environment.

``Position`` and ``Grid`` are frozen so they can be hashed, shared between the
pathfinder and the session, and serialised into telemetry exports unchanged.
"""

from __future__ import annotations

from typing import FrozenSet, List

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator


class Position(BaseModel):
    """Integer cell coordinate, 0-indexed. ``y`` grows downwards."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    @property
    def key(self) -> str:
        """Stable string key used for visited-position sets and logs."""
        return f"{self.x},{self.y}"


class Grid(BaseModel):
    """Square maze description, immutable for the lifetime of an episode."""

    model_config = ConfigDict(frozen=True)

    size: int = Field(..., ge=1, description="Side length of the square grid")
    walls: FrozenSet[Position] = Field(
        default_factory=frozenset,
        description="Blocked cells",
    )
    start: Position = Field(..., description="Cell the navigator starts on")
    target: Position = Field(..., description="Cell the navigator must reach")

    @model_validator(mode="after")
    def _check_bounds(self) -> "Grid":
        # Overlap between walls and start/target is the caller's problem; only
        # bounds are enforced here.
        cells = [("start", self.start), ("target", self.target)]
        cells.extend(("wall", wall) for wall in self.walls)
        for label, cell in cells:
            if not (0 <= cell.x < self.size and 0 <= cell.y < self.size):
                raise ValueError(
                    f"{label} {cell.key} lies outside a {self.size}x{self.size} grid"
                )
        return self

    @field_serializer("walls")
    def _serialize_walls(self, walls: FrozenSet[Position]) -> List[dict]:
        ordered = sorted(walls, key=lambda p: (p.y, p.x))
        return [{"x": wall.x, "y": wall.y} for wall in ordered]
