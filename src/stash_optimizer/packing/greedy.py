# src/stash_optimizer/packing/greedy.py

from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from stash_optimizer.catalog import GRID_WIDTH
from stash_optimizer.geometry import available_space, fits, mark, new_grid, orientations, overlaps, stamp
from stash_optimizer.metrics import build_result
from stash_optimizer.models import CaseInstance, OptimizationMethod, PackingResult, PlacedCase

logger = logging.getLogger(__name__)


class ScoreWeights(BaseModel):
    """Weights of the greedy placement score (empirical, defaults keep layouts stable)."""

    area: float = Field(default=1000, description="Per cell of case area")
    width_match: float = Field(default=5000, description="Case width equals the free pocket width")
    height_match: float = Field(default=3000, description="Case height equals the free pocket height")
    waste: float = Field(default=10, description="Penalty per pocket cell left unused")
    fit_ratio: float = Field(default=1000, description="Times (w/avail_w + h/avail_h)")


DEFAULT_WEIGHTS = ScoreWeights()


def score_placement(
    case_width: int,
    case_height: int,
    available_width: int,
    available_height: int,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> float:
    """
    Score an orientation inside the free pocket at a cell. Larger is better:
    big cases, exact row/column fills and little leftover area win.
    """
    case_area = case_width * case_height
    waste = available_width * available_height - case_area

    score = case_area * weights.area
    if case_width == available_width:
        score += weights.width_match
    if case_height == available_height:
        score += weights.height_match
    score -= waste * weights.waste
    score += (case_width / available_width + case_height / available_height) * weights.fit_ratio
    return score


def lock_cases(locked_positions: Sequence[PlacedCase]) -> list[PlacedCase]:
    """Copies of the caller's pinned cases flagged as locked; geometry untouched."""
    return [p.model_copy(update={"is_locked": True}) for p in locked_positions]


def pack_greedy(
    instances: Sequence[CaseInstance],
    stash_height: int,
    locked_positions: Sequence[PlacedCase] = (),
    grid_width: int = GRID_WIDTH,
    weights: Optional[ScoreWeights] = None,
) -> PackingResult:
    """
    Single deterministic pass over the grid.
    - Locked cases are stamped first and never move
    - Cells are scanned row-major; occupied cells are skipped
    - At each free cell every remaining instance is tried in both orientations
      and the best scoring one is placed (first found wins ties)
    - Whatever is left in the pool afterwards is unplaced
    """
    weights = weights or DEFAULT_WEIGHTS
    grid = new_grid(grid_width, stash_height)
    placements = lock_cases(locked_positions)
    stamp(grid, placements)

    remaining = list(instances)

    for y in range(stash_height):
        for x in range(grid_width):
            if not remaining:
                break
            if grid[y][x] is not None:
                continue

            avail_w, avail_h = available_space(grid, x, y, grid_width, stash_height)

            best: Optional[tuple[int, int, int, bool]] = None
            best_score = 0.0

            for index, instance in enumerate(remaining):
                for (w, h, rotated) in orientations(instance.width, instance.height):
                    if w > avail_w or h > avail_h:
                        continue
                    if not fits(x, y, w, h, grid_width, stash_height):
                        continue
                    if overlaps(grid, x, y, w, h):
                        continue

                    score = score_placement(w, h, avail_w, avail_h, weights)
                    if best is None or score > best_score:
                        best = (index, w, h, rotated)
                        best_score = score

            if best is None:
                continue

            index, w, h, rotated = best
            instance = remaining.pop(index)
            placements.append(PlacedCase(
                id=instance.id,
                kind=instance.kind,
                x=x,
                y=y,
                width=w,
                height=h,
                rotated=rotated,
            ))
            mark(grid, x, y, w, h, instance.id)

    logger.info(
        f"greedy placed={len(placements) - len(locked_positions)}, "
        f"unplaced={len(remaining)}, locked={len(locked_positions)}"
    )

    return build_result(grid, placements, remaining, grid_width, stash_height, OptimizationMethod.GREEDY)
