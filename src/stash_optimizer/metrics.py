from __future__ import annotations

from typing import Any

from stash_optimizer.geometry import Grid
from stash_optimizer.models import CaseInstance, OptimizationMethod, PackingResult, PlacedCase


def placement_area(p: PlacedCase) -> int:
    return p.width * p.height


def compute_metrics(grid_width: int, stash_height: int, placements: list[PlacedCase]) -> tuple[int, int, float]:
    used_area = sum(placement_area(p) for p in placements)
    grid_area = grid_width * stash_height
    fill_rate = 0.0 if grid_area == 0 else used_area / grid_area
    return used_area, grid_area, fill_rate


def build_result(
    grid: Grid,
    placements: list[PlacedCase],
    unplaced: list[CaseInstance],
    grid_width: int,
    stash_height: int,
    method: OptimizationMethod,
) -> PackingResult:
    used_area, grid_area, fill_rate = compute_metrics(grid_width, stash_height, placements)

    return PackingResult(
        grid=grid,
        placed_cases=placements,
        unplaced_cases=unplaced,
        grid_width=grid_width,
        stash_height=stash_height,
        used_area=used_area,
        grid_area=grid_area,
        fill_rate=fill_rate,
        method=method,
    )


def format_output(result: PackingResult) -> dict[str, Any]:
    """
    Format a packing result with guaranteed fields and a user-friendly summary.
    """
    locked = len(result.locked_cases)
    placed = len(result.placed_cases) - locked
    unplaced = len(result.unplaced_cases)
    fill_pct = round(result.fill_rate * 100.0, 1)

    limiting_factor = "none"
    limiting_reason = "All requested cases were placed."
    if unplaced > 0:
        if fill_pct >= 99.5:
            limiting_factor = "space"
            limiting_reason = "The stash is completely full."
        else:
            limiting_factor = "dimensions"
            limiting_reason = "Some cases could not fit in the remaining free space."

    summary_text = (
        f"Stash Layout Complete ({result.method.value})\n"
        f"Grid: {result.grid_width}x{result.stash_height}\n"
        f"Fill: {fill_pct:.1f}%\n"
        f"Placed: {placed} (+{locked} locked)\n"
        f"Unplaced: {unplaced}\n"
        f"Limiting Factor: {limiting_factor} - {limiting_reason}"
    )

    return {
        "metrics": {
            "cases_placed": placed,
            "cases_unplaced": unplaced,
            "cases_locked": locked,
            "fill_rate": result.fill_rate,
            "limiting_factor": limiting_factor,
            "limiting_reason": limiting_reason,
        },
        "summary": summary_text,
        "layout": result.model_dump(mode="json"),
    }
