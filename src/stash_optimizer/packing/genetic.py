# src/stash_optimizer/packing/genetic.py

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from stash_optimizer.catalog import GRID_WIDTH
from stash_optimizer.geometry import Grid, fits, mark, new_grid, orientations, overlaps, stamp
from stash_optimizer.metrics import build_result
from stash_optimizer.models import CaseInstance, OptimizationMethod, PackingResult, PlacedCase
from stash_optimizer.packing.greedy import lock_cases, pack_greedy
from stash_optimizer.random_source import RandomSource, SeededRandom, choice, shuffled

logger = logging.getLogger(__name__)

Individual = list[PlacedCase]


class GeneticConfig(BaseModel):
    """Search parameters for the genetic packer."""

    population_size: int = Field(default=50, gt=1)
    generations: int = Field(default=100, ge=0)
    mutation_rate: float = Field(default=0.1, ge=0, le=1)
    elitism_rate: float = Field(default=0.2, ge=0, lt=1)
    seeded_fraction: float = Field(default=0.3, ge=0, le=1, description="Share of greedy-seeded individuals")
    tournament_size: int = Field(default=5, gt=0)
    placement_attempts: int = Field(default=100, gt=0, description="Random tries per case when seeding")
    mutation_attempts: int = Field(default=50, gt=0, description="Random tries when moving a case")
    placed_weight: float = 1000
    compactness_weight: float = 500
    alignment_bonus: float = 10


class GeneticPacker:
    """
    Evolves whole layouts. An individual is a list of PlacedCase: the locked
    cases first, then whichever instances it managed to place.
    """

    def __init__(
        self,
        instances: Sequence[CaseInstance],
        stash_height: int,
        locked_positions: Sequence[PlacedCase] = (),
        grid_width: int = GRID_WIDTH,
        config: Optional[GeneticConfig] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.instances = list(instances)
        self.stash_height = stash_height
        self.grid_width = grid_width
        self.config = config or GeneticConfig()
        self.rng = rng or SeededRandom()
        self.locked = lock_cases(locked_positions)
        self._by_id = {c.id: c for c in self.instances}

    # -- helpers ---------------------------------------------------------

    def _locked_grid(self) -> Grid:
        grid = new_grid(self.grid_width, self.stash_height)
        stamp(grid, self.locked)
        return grid

    def _random_placement(self, instance: CaseInstance, grid: Grid, attempts: int) -> Optional[PlacedCase]:
        """Rejection sampling over random (x, y, orientation); None when the budget runs out."""
        if self.grid_width <= 0 or self.stash_height <= 0:
            return None
        options = orientations(instance.width, instance.height)
        for _ in range(attempts):
            w, h, rotated = choice(self.rng, options)
            x = self.rng.next_int(self.grid_width)
            y = self.rng.next_int(self.stash_height)
            if not fits(x, y, w, h, self.grid_width, self.stash_height):
                continue
            if overlaps(grid, x, y, w, h):
                continue
            return PlacedCase(id=instance.id, kind=instance.kind, x=x, y=y, width=w, height=h, rotated=rotated)
        return None

    # -- population ------------------------------------------------------

    def random_individual(self) -> Individual:
        individual = list(self.locked)
        grid = self._locked_grid()

        for instance in shuffled(self.rng, self.instances):
            placed = self._random_placement(instance, grid, self.config.placement_attempts)
            if placed is not None:
                individual.append(placed)
                mark(grid, placed.x, placed.y, placed.width, placed.height, placed.id)
        return individual

    def initial_population(self) -> list[Individual]:
        size = self.config.population_size
        seeded_count = math.floor(size * self.config.seeded_fraction)

        population: list[Individual] = []
        if seeded_count:
            # Greedy is deterministic, so one run serves every seeded slot.
            seed_layout = pack_greedy(
                self.instances, self.stash_height, self.locked, self.grid_width,
            ).placed_cases
            population.extend(list(seed_layout) for _ in range(seeded_count))

        while len(population) < size:
            population.append(self.random_individual())
        return population

    # -- fitness ---------------------------------------------------------

    def fitness(self, individual: Individual) -> float:
        """
        placed_ratio * 1000 + compactness * 500 + alignment bonus, where
        compactness = 1 - bounding_box_area / grid_area and the bonus is
        paid for every case whose x is a multiple of its own width.
        """
        cfg = self.config
        total = len(self.instances)
        placed_count = sum(1 for c in individual if not c.is_locked)
        placed_ratio = placed_count / total if total else 1.0

        if individual:
            min_x = min(c.x for c in individual)
            min_y = min(c.y for c in individual)
            max_x = max(c.x + c.width for c in individual)
            max_y = max(c.y + c.height for c in individual)
            bbox_area = (max_x - min_x) * (max_y - min_y)
        else:
            bbox_area = 0

        grid_area = self.grid_width * self.stash_height
        compactness = 1 - bbox_area / grid_area if grid_area else 0.0

        aligned = sum(1 for c in individual if c.x % c.width == 0)

        return placed_ratio * cfg.placed_weight + compactness * cfg.compactness_weight + aligned * cfg.alignment_bonus

    # -- operators -------------------------------------------------------

    def select(self, scored: list[tuple[float, Individual]]) -> Individual:
        """Tournament selection, drawing with replacement."""
        best: Optional[tuple[float, Individual]] = None
        for _ in range(self.config.tournament_size):
            contender = choice(self.rng, scored)
            if best is None or contender[0] > best[0]:
                best = contender
        return best[1]

    def crossover(self, parent_a: Individual, parent_b: Individual) -> Individual:
        """
        Per instance id (parent A's order, then ids only B has) flip a coin for
        whose placement to take. The instance is dropped, leaving it unplaced,
        when the chosen parent never placed it or when its placement collides
        with what the child already holds.
        """
        child = list(self.locked)
        grid = self._locked_grid()

        from_a = {c.id: c for c in parent_a if not c.is_locked}
        from_b = {c.id: c for c in parent_b if not c.is_locked}
        case_ids = list(from_a)
        case_ids.extend(i for i in from_b if i not in from_a)

        for case_id in case_ids:
            chosen = from_a.get(case_id) if self.rng.next_float() < 0.5 else from_b.get(case_id)
            if chosen is None:
                continue
            if overlaps(grid, chosen.x, chosen.y, chosen.width, chosen.height):
                continue
            child.append(chosen)
            mark(grid, chosen.x, chosen.y, chosen.width, chosen.height, chosen.id)

        return child

    def mutate(self, individual: Individual) -> Individual:
        """
        Move one random non-locked case to a random free spot (either
        orientation). The original individual is never modified; if no spot is
        found within the attempt budget it is returned as is.
        """
        movable = [i for i, c in enumerate(individual) if not c.is_locked]
        if not movable:
            return individual

        index = choice(self.rng, movable)
        target = individual[index]
        instance = self._by_id.get(target.id)
        if instance is None:
            return individual

        grid = new_grid(self.grid_width, self.stash_height)
        stamp(grid, (c for c in individual if c.id != target.id))

        moved = self._random_placement(instance, grid, self.config.mutation_attempts)
        if moved is None:
            return individual

        mutated = list(individual)
        mutated[index] = moved
        return mutated

    # -- main loop -------------------------------------------------------

    def _score(self, population: list[Individual]) -> list[tuple[float, Individual]]:
        scored = [(self.fitness(ind), ind) for ind in population]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return scored

    def next_generation(self, scored: list[tuple[float, Individual]]) -> list[Individual]:
        """Elites carried over unchanged, the rest bred by selection, crossover and mutation."""
        cfg = self.config
        elite_count = math.ceil(cfg.population_size * cfg.elitism_rate)

        next_population = [ind for _, ind in scored[:elite_count]]
        while len(next_population) < cfg.population_size:
            parent_a = self.select(scored)
            parent_b = self.select(scored)
            offspring = self.crossover(parent_a, parent_b)
            if self.rng.next_float() < cfg.mutation_rate:
                offspring = self.mutate(offspring)
            next_population.append(offspring)
        return next_population

    def evolve(self) -> Individual:
        cfg = self.config
        population = self.initial_population()

        for generation in range(cfg.generations):
            scored = self._score(population)
            logger.debug(f"generation={generation} best_fitness={scored[0][0]:.2f}")

            population = self.next_generation(scored)

        best_fitness, best = self._score(population)[0]
        logger.info(
            f"genetic best_fitness={best_fitness:.2f}, "
            f"placed={sum(1 for c in best if not c.is_locked)}/{len(self.instances)}"
        )
        return best

    def run(self) -> PackingResult:
        best = self.evolve()

        grid = new_grid(self.grid_width, self.stash_height)
        stamp(grid, best)

        placed_ids = {c.id for c in best if not c.is_locked}
        unplaced = [c for c in self.instances if c.id not in placed_ids]

        return build_result(grid, list(best), unplaced, self.grid_width, self.stash_height, OptimizationMethod.GENETIC)


def pack_genetic(
    instances: Sequence[CaseInstance],
    stash_height: int,
    locked_positions: Sequence[PlacedCase] = (),
    grid_width: int = GRID_WIDTH,
    config: Optional[GeneticConfig] = None,
    rng: Optional[RandomSource] = None,
) -> PackingResult:
    return GeneticPacker(instances, stash_height, locked_positions, grid_width, config, rng).run()
