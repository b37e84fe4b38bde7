"""Single entry point: expand counts, order instances, run the chosen packer."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Union

from stash_optimizer.catalog import DEFAULT_CASES, GRID_WIDTH
from stash_optimizer.instances import build_instances
from stash_optimizer.models import CaseDefinition, OptimizationMethod, PackingResult, PlacedCase
from stash_optimizer.packing.genetic import GeneticConfig, pack_genetic
from stash_optimizer.packing.greedy import ScoreWeights, pack_greedy
from stash_optimizer.random_source import RandomSource, SeededRandom

logger = logging.getLogger(__name__)


def resolve_method(method: Union[str, OptimizationMethod, None]) -> OptimizationMethod:
    """Map any input to a known method; unknown values fall back to greedy."""
    if isinstance(method, OptimizationMethod):
        return method
    try:
        return OptimizationMethod(method)
    except ValueError:
        logger.warning(f"Unknown optimization method {method!r}, falling back to greedy")
        return OptimizationMethod.GREEDY


def optimize_stash_layout(
    case_counts: Mapping[str, int],
    stash_height: int,
    locked_positions: Sequence[PlacedCase] = (),
    method: Union[str, OptimizationMethod, None] = OptimizationMethod.GREEDY,
    *,
    catalog: Optional[Mapping[str, CaseDefinition]] = None,
    grid_width: int = GRID_WIDTH,
    rng: Optional[RandomSource] = None,
    seed: Optional[int] = None,
    weights: Optional[ScoreWeights] = None,
    genetic_config: Optional[GeneticConfig] = None,
) -> PackingResult:
    """
    Pack the requested cases into a `grid_width x stash_height` stash.

    Locked positions are assumed in bounds and disjoint; they are stamped as
    obstacles before packing and come back unchanged (flagged is_locked).
    `rng` (or `seed`) only affects the genetic method.
    """
    catalog = DEFAULT_CASES if catalog is None else catalog
    instances = build_instances(case_counts, catalog)
    chosen = resolve_method(method)

    logger.info(
        f"optimize method={chosen.value}, instances={len(instances)}, "
        f"locked={len(locked_positions)}, grid={grid_width}x{stash_height}"
    )

    if chosen is OptimizationMethod.GENETIC:
        return pack_genetic(
            instances,
            stash_height,
            locked_positions,
            grid_width,
            config=genetic_config,
            rng=rng or SeededRandom(seed),
        )
    return pack_greedy(instances, stash_height, locked_positions, grid_width, weights)
