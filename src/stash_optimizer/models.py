from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OptimizationMethod(str, Enum):
    """Packing algorithms selectable through the optimizer."""

    GREEDY = "greedy"
    GENETIC = "genetic"


class CaseDefinition(BaseModel):
    """Catalog entry: a named case shape measured in stash cells."""

    name: str = Field(description="Display name of the case")
    width: int = Field(gt=0, description="Width in grid cells")
    height: int = Field(gt=0, description="Height in grid cells")


class CaseInstance(BaseModel):
    """One concrete case waiting to be placed (dims are pre-rotation)."""

    id: str = Field(description="Unique identifier for the instance")
    kind: str = Field(description="Catalog key of the case")
    width: int = Field(gt=0, description="Original width in grid cells")
    height: int = Field(gt=0, description="Original height in grid cells")


class PlacedCase(BaseModel):
    """Placement model: top-left cell plus the oriented (post-rotation) dims."""

    id: str = Field(description="Identifier of the placed case")
    kind: str = Field(description="Catalog key of the case")
    x: int = Field(ge=0, description="Column of the top-left cell")
    y: int = Field(ge=0, description="Row of the top-left cell")
    width: int = Field(gt=0, description="Placed width in grid cells")
    height: int = Field(gt=0, description="Placed height in grid cells")
    rotated: bool = Field(default=False, description="True if width/height are swapped")
    is_locked: bool = Field(default=False, description="Pinned by the caller, never moved")

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)


class PackingResult(BaseModel):
    """Standard result returned by packers."""

    grid: list[list[Optional[str]]] = Field(default_factory=list)
    placed_cases: list[PlacedCase] = Field(default_factory=list)
    unplaced_cases: list[CaseInstance] = Field(default_factory=list)
    grid_width: int = 0
    stash_height: int = 0
    used_area: int = 0
    grid_area: int = 0
    fill_rate: float = 0.0
    method: OptimizationMethod = OptimizationMethod.GREEDY

    @property
    def locked_cases(self) -> list[PlacedCase]:
        return [c for c in self.placed_cases if c.is_locked]

    @property
    def new_cases(self) -> list[PlacedCase]:
        return [c for c in self.placed_cases if not c.is_locked]
