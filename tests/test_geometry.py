from __future__ import annotations

from stash_optimizer.geometry import (
    available_space,
    find_conflicts,
    fits,
    mark,
    new_grid,
    orientations,
    overlaps,
    rects_overlap,
    stamp,
)
from stash_optimizer.models import PlacedCase


def test_rects_overlap_overlapping() -> None:
    """Test that overlapping rectangles are detected."""
    a = (0, 0, 2, 2)
    b = (1, 1, 3, 3)

    assert rects_overlap(a, b) is True


def test_rects_overlap_touching_edges() -> None:
    """Touching edges do not count as overlap."""
    a = (0, 0, 2, 2)
    b = (2, 0, 4, 2)

    assert rects_overlap(a, b) is False


def test_rects_overlap_cases_in_adjacent_rows() -> None:
    """A case directly below another shares no cell with it."""
    top = PlacedCase(id="a", kind="weapons", x=0, y=0, width=5, height=2)
    below = PlacedCase(id="b", kind="ammo", x=3, y=2, width=2, height=2)
    shifted = below.model_copy(update={"y": 1})

    assert rects_overlap(top.bounds, below.bounds) is False
    assert rects_overlap(top.bounds, shifted.bounds) is True


def test_fits_bounds() -> None:
    assert fits(0, 0, 10, 4, 10, 4)
    assert fits(8, 2, 2, 2, 10, 4)
    assert not fits(9, 0, 2, 1, 10, 4)
    assert not fits(0, 3, 1, 2, 10, 4)
    assert not fits(-1, 0, 1, 1, 10, 4)


def test_overlaps_respects_exclude_id() -> None:
    grid = new_grid(10, 4)
    mark(grid, 2, 1, 2, 2, "A")

    assert overlaps(grid, 0, 0, 3, 2)
    assert not overlaps(grid, 0, 0, 2, 4)
    assert not overlaps(grid, 2, 1, 2, 2, exclude_id="A")


def test_mark_fills_exact_rectangle() -> None:
    grid = new_grid(5, 3)
    mark(grid, 1, 1, 3, 2, "X")

    cells = [(x, y) for y in range(3) for x in range(5) if grid[y][x] == "X"]
    assert cells == [(1, 1), (2, 1), (3, 1), (1, 2), (2, 2), (3, 2)]


def test_available_space_empty_grid() -> None:
    grid = new_grid(10, 4)

    assert available_space(grid, 0, 0, 10, 4) == (10, 4)
    assert available_space(grid, 7, 2, 10, 4) == (3, 2)


def test_available_space_shrinks_width_to_narrowest_row() -> None:
    grid = new_grid(10, 4)
    # Blocks row 2 from column 5 onwards
    mark(grid, 5, 2, 5, 1, "B")

    assert available_space(grid, 0, 0, 10, 4) == (5, 4)


def test_available_space_stops_at_obstacle_below() -> None:
    grid = new_grid(10, 4)
    mark(grid, 0, 2, 1, 1, "B")

    assert available_space(grid, 0, 0, 10, 4) == (10, 2)


def test_orientations_square_has_one() -> None:
    assert orientations(2, 2) == [(2, 2, False)]
    assert orientations(5, 2) == [(5, 2, False), (2, 5, True)]


def test_stamp_clips_to_grid() -> None:
    grid = new_grid(3, 3)
    stamp(grid, [PlacedCase(id="L", kind="items", x=2, y=2, width=4, height=4)])

    assert grid[2][2] == "L"
    assert sum(cell == "L" for row in grid for cell in row) == 1


def test_find_conflicts_reports_overlap_and_bounds() -> None:
    cases = [
        PlacedCase(id="A", kind="ammo", x=0, y=0, width=2, height=2),
        PlacedCase(id="B", kind="ammo", x=1, y=1, width=2, height=2),
        PlacedCase(id="C", kind="weapons", x=8, y=0, width=5, height=2),
    ]

    problems = find_conflicts(cases, 10, 4)

    assert "A overlaps B" in problems
    assert any(p.startswith("C lies outside") for p in problems)
    assert find_conflicts(cases[:1], 10, 4) == []
