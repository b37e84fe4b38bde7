"""Turn sparse case counts into the ordered list of instances the packers consume."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Mapping

from stash_optimizer.catalog import is_valid_case_type
from stash_optimizer.models import CaseDefinition, CaseInstance

logger = logging.getLogger(__name__)


def expand_counts(
    case_counts: Mapping[str, int],
    catalog: Mapping[str, CaseDefinition],
) -> list[CaseInstance]:
    """
    Create one CaseInstance per requested unit, in count-map order.

    Ids are "<kind>-<n>" with n running across all kinds. Kinds missing from
    the catalog are skipped with a warning; zero or negative counts add nothing.
    """
    instances: list[CaseInstance] = []
    counter = 0

    for kind, count in case_counts.items():
        if not is_valid_case_type(kind, catalog):
            logger.warning(f"Invalid case type encountered: {kind}")
            continue

        if count <= 0:
            continue

        definition = catalog[kind]
        for _ in range(count):
            instances.append(CaseInstance(
                id=f"{kind}-{counter}",
                kind=kind,
                width=definition.width,
                height=definition.height,
            ))
            counter += 1

    return instances


def sort_instances(instances: list[CaseInstance]) -> list[CaseInstance]:
    """
    Stable priority order used by both packers:
      1. kinds with more than one instance before singletons
      2. wider first (original width)
      3. taller first (original height)
      4. kind id ascending
    """
    per_kind = Counter(c.kind for c in instances)
    return sorted(
        instances,
        key=lambda c: (0 if per_kind[c.kind] > 1 else 1, -c.width, -c.height, c.kind),
    )


def build_instances(
    case_counts: Mapping[str, int],
    catalog: Mapping[str, CaseDefinition],
) -> list[CaseInstance]:
    return sort_instances(expand_counts(case_counts, catalog))


def counts_from_instances(instances: Iterable[CaseInstance]) -> dict[str, int]:
    """Fold instances back into a {kind: count} map (e.g. to re-run the leftovers)."""
    counts: dict[str, int] = {}
    for instance in instances:
        counts[instance.kind] = counts.get(instance.kind, 0) + 1
    return counts
