"""Geometry utilities for the stash occupancy grid."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from stash_optimizer.models import PlacedCase

Grid = list[list[Optional[str]]]


def new_grid(grid_width: int, grid_height: int) -> Grid:
    """Empty `grid_height x grid_width` matrix; grid[y][x] holds a case id or None."""
    return [[None] * grid_width for _ in range(grid_height)]


def rects_overlap(a: tuple[int, int, int, int], b: tuple[int, int, int, int]) -> bool:
    """
    True if two placed cases cover at least one common grid cell.

    a, b are PlacedCase.bounds: (x, y, x + width, y + height), right and
    bottom edges exclusive. Cases side by side in adjacent columns or rows
    share no cell and do not overlap.
    """
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b

    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1)


def orientations(width: int, height: int) -> list[tuple[int, int, bool]]:
    """Original orientation first, then the 90 degree turn unless the case is square."""
    out = [(width, height, False)]
    if width != height:
        out.append((height, width, True))
    return out


def fits(x: int, y: int, w: int, h: int, grid_width: int, grid_height: int) -> bool:
    return x >= 0 and y >= 0 and x + w <= grid_width and y + h <= grid_height


def overlaps(grid: Grid, x: int, y: int, w: int, h: int, exclude_id: Optional[str] = None) -> bool:
    """
    True if any cell of the rectangle holds an id other than `exclude_id`.

    Cells outside the grid are ignored, so callers wanting a bounds check must
    call `fits` first.
    """
    grid_height = len(grid)
    grid_width = len(grid[0]) if grid_height else 0
    for row in range(max(y, 0), min(y + h, grid_height)):
        cells = grid[row]
        for col in range(max(x, 0), min(x + w, grid_width)):
            cell = cells[col]
            if cell is not None and cell != exclude_id:
                return True
    return False


def available_space(grid: Grid, x: int, y: int, grid_width: int, grid_height: int) -> tuple[int, int]:
    """
    Largest empty rectangle anchored with its top-left corner at (x, y).

    Width starts as the empty run along row y, height as the empty run down
    column x; the width is then shrunk to the shortest empty run of any row
    inside that height. Rectangles not anchored at (x, y) are not considered.
    Returns (width, height).
    """
    max_width = 0
    for col in range(x, grid_width):
        if grid[y][col] is not None:
            break
        max_width += 1

    max_height = 0
    for row in range(y, grid_height):
        if grid[row][x] is not None:
            break
        max_height += 1

    actual_width = max_width
    for row in range(y, min(y + max_height, grid_height)):
        run = 0
        for col in range(x, min(x + max_width, grid_width)):
            if grid[row][col] is not None:
                break
            run += 1
        actual_width = min(actual_width, run)

    return actual_width, max_height


def mark(grid: Grid, x: int, y: int, w: int, h: int, case_id: Optional[str]) -> None:
    """Fill the rectangle with `case_id`. No bounds or overlap check."""
    for row in range(y, y + h):
        for col in range(x, x + w):
            grid[row][col] = case_id


def stamp(grid: Grid, cases: Iterable["PlacedCase"]) -> None:
    """
    Mark every case into the grid, clipping anything outside the bounds.

    Used for locked positions, which the caller validated and the packers
    treat as permanent obstacles.
    """
    grid_height = len(grid)
    grid_width = len(grid[0]) if grid_height else 0
    for case in cases:
        for row in range(max(case.y, 0), min(case.y + case.height, grid_height)):
            for col in range(max(case.x, 0), min(case.x + case.width, grid_width)):
                grid[row][col] = case.id


def find_conflicts(cases: list["PlacedCase"], grid_width: int, grid_height: int) -> list[str]:
    """Human-readable list of out-of-bounds and overlapping cases."""
    problems: list[str] = []
    for case in cases:
        if not fits(case.x, case.y, case.width, case.height, grid_width, grid_height):
            problems.append(f"{case.id} lies outside the {grid_width}x{grid_height} stash")

    for i in range(len(cases)):
        for j in range(i + 1, len(cases)):
            if rects_overlap(cases[i].bounds, cases[j].bounds):
                problems.append(f"{cases[i].id} overlaps {cases[j].id}")
    return problems
