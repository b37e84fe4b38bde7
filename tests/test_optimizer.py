from __future__ import annotations

from stash_optimizer.catalog import DEFAULT_CASES
from stash_optimizer.geometry import rects_overlap
from stash_optimizer.instances import counts_from_instances
from stash_optimizer.models import CaseDefinition, OptimizationMethod, PlacedCase
from stash_optimizer.optimizer import optimize_stash_layout, resolve_method
from stash_optimizer.packing.genetic import GeneticConfig
from stash_optimizer.random_source import SeededRandom

MIXED = {"items": 2, "THICCItems": 1, "weapons": 3, "food": 2, "mags": 4, "ammo": 5, "docs": 3, "sicc": 2, "cards": 6}


def assert_valid_layout(result, submitted: int) -> None:
    placements = result.placed_cases
    for p in placements:
        assert p.x >= 0 and p.y >= 0
        assert p.x + p.width <= result.grid_width
        assert p.y + p.height <= result.stash_height

    for i in range(len(placements)):
        for j in range(i + 1, len(placements)):
            assert not rects_overlap(placements[i].bounds, placements[j].bounds)

    assert len(result.new_cases) + len(result.unplaced_cases) == submitted


def assert_valid_rotation(result) -> None:
    for p in result.new_cases:
        kind = DEFAULT_CASES[p.kind]
        if p.rotated:
            assert (p.width, p.height) == (kind.height, kind.width)
        else:
            assert (p.width, p.height) == (kind.width, kind.height)


def test_resolve_method_falls_back_to_greedy() -> None:
    assert resolve_method("genetic") is OptimizationMethod.GENETIC
    assert resolve_method(OptimizationMethod.GREEDY) is OptimizationMethod.GREEDY
    assert resolve_method("simulated-annealing") is OptimizationMethod.GREEDY
    assert resolve_method(None) is OptimizationMethod.GREEDY


def test_unknown_method_matches_greedy() -> None:
    greedy = optimize_stash_layout(MIXED, 12, method="greedy")
    fallback = optimize_stash_layout(MIXED, 12, method="best-fit")

    assert fallback.model_dump() == greedy.model_dump()


def test_greedy_layout_invariants() -> None:
    result = optimize_stash_layout(MIXED, 14)

    assert_valid_layout(result, sum(MIXED.values()))
    assert_valid_rotation(result)


def test_genetic_layout_invariants() -> None:
    config = GeneticConfig(population_size=16, generations=15)
    result = optimize_stash_layout(MIXED, 14, method="genetic", genetic_config=config, rng=SeededRandom(11))

    assert result.method is OptimizationMethod.GENETIC
    assert_valid_layout(result, sum(MIXED.values()))
    assert_valid_rotation(result)


def test_greedy_is_deterministic() -> None:
    locked = [PlacedCase(id="L1", kind="items", x=3, y=2, width=4, height=4)]

    first = optimize_stash_layout(MIXED, 10, locked)
    second = optimize_stash_layout(MIXED, 10, locked)

    assert first.model_dump() == second.model_dump()


def test_locked_cases_come_back_unchanged() -> None:
    locked = [
        PlacedCase(id="L1", kind="items", x=0, y=0, width=4, height=4),
        PlacedCase(id="L2", kind="weapons", x=8, y=1, width=2, height=5, rotated=True),
    ]

    for method in ("greedy", "genetic"):
        result = optimize_stash_layout(
            MIXED, 10, locked, method,
            genetic_config=GeneticConfig(population_size=8, generations=5), seed=2,
        )
        fields = [(c.id, c.x, c.y, c.width, c.height, c.rotated) for c in result.locked_cases]
        assert fields == [(c.id, c.x, c.y, c.width, c.height, c.rotated) for c in locked]
        assert all(c.is_locked for c in result.locked_cases)
        assert_valid_layout(result, sum(MIXED.values()))


def test_rerun_with_previous_layout_locked_is_stable() -> None:
    counts = {"weapons": 3, "ammo": 5}
    first = optimize_stash_layout(counts, 4)
    assert len(first.unplaced_cases) == 3

    second = optimize_stash_layout(counts_from_instances(first.unplaced_cases), 4, first.placed_cases)

    assert second.placed_cases == [c.model_copy(update={"is_locked": True}) for c in first.placed_cases]
    assert len(second.unplaced_cases) == len(first.unplaced_cases)


def test_empty_counts() -> None:
    locked = [PlacedCase(id="L1", kind="ammo", x=0, y=0, width=2, height=2)]
    result = optimize_stash_layout({"ammo": 0, "cards": 0}, 4, locked)

    assert [c.id for c in result.placed_cases] == ["L1"]
    assert result.unplaced_cases == []


def test_stash_too_short_for_anything() -> None:
    result = optimize_stash_layout({"items": 2, "food": 1}, 2)

    assert result.placed_cases == []
    assert len(result.unplaced_cases) == 3


def test_single_cell_stash() -> None:
    result = optimize_stash_layout({"cards": 1}, 1, grid_width=1)

    [p] = result.placed_cases
    assert (p.x, p.y) == (0, 0)
    assert result.grid == [[p.id]]
    assert result.fill_rate == 1.0


def test_custom_catalog_and_unknown_kinds() -> None:
    catalog = {"crate": CaseDefinition(name="Crate", width=3, height=2)}
    result = optimize_stash_layout({"crate": 2, "ammo": 1}, 2, catalog=catalog)

    assert [(p.kind, p.x, p.y) for p in result.placed_cases] == [("crate", 0, 0), ("crate", 3, 0)]
    assert result.unplaced_cases == []


def test_scenario_locked_neighbour() -> None:
    locked = [PlacedCase(id="L1", kind="ammo", x=0, y=0, width=2, height=2)]
    result = optimize_stash_layout({"ammo": 1}, 2, locked)

    assert result.placed_cases[0].id == "L1"
    [new] = result.new_cases
    assert (new.x, new.y) == (2, 0)


def test_scenario_genetic_places_every_unit_case() -> None:
    result = optimize_stash_layout({"cards": 10}, 4, method="genetic", seed=7)

    assert len(result.new_cases) == 10
    assert result.unplaced_cases == []
