# src/stash_optimizer/catalog.py
from __future__ import annotations

from typing import Mapping

from stash_optimizer.models import CaseDefinition, OptimizationMethod

GRID_WIDTH = 10

# Stash rows per game edition; every edition is GRID_WIDTH columns wide.
STASH_EDITIONS: dict[str, int] = {
    "Standard": 28,
    "Left Behind": 38,
    "Prepare for Escape": 48,
    "Edge of Darkness": 68,
}

DEFAULT_EDITION = "Edge of Darkness"


def _case(name: str, width: int, height: int) -> CaseDefinition:
    return CaseDefinition(name=name, width=width, height=height)


DEFAULT_CASES: dict[str, CaseDefinition] = {
    "items": _case("Item Case", 4, 4),
    "THICCItems": _case("T H I C C Item Case", 5, 3),
    "weapons": _case("Weapon Case", 5, 2),
    "thiicweapons": _case("T H I C C Weapon Case", 5, 2),
    "food": _case("Thermal Bag", 3, 3),
    "medicine": _case("Medicine Case", 3, 3),
    "grenades": _case("Grenade Case", 3, 3),
    "mags": _case("Magazine Case", 3, 2),
    "money": _case("Money Case", 3, 2),
    "ammo": _case("Ammunition Case", 2, 2),
    "pistol": _case("Pistol Case", 2, 2),
    "toolbox": _case("Toolbox", 2, 2),
    "junk": _case("Lucky Scav Junk Box", 4, 4),
    "docs": _case("Documents Case", 1, 2),
    "sicc": _case("S I C C Pouch", 2, 1),
    "plates": _case("Ballistic Plate Case", 4, 2),
    "Key_case": _case("Key Case", 3, 2),
    "cards": _case("Keycard Holder", 1, 1),
    "keytool": _case("Key Tool", 1, 1),
    "stims": _case("Injector Case", 1, 1),
    "tags": _case("Dogtag Case", 1, 1),
    "wallet": _case("WZ Wallet", 1, 1),
    "twitch": _case("Twitch Rivals Bag", 3, 3),
    # Generic shapes for cases the game catalog does not name.
    **{
        f"custom_{w}x{h}": _case(f"Custom {w}x{h}", w, h)
        for w, h in [(1, 1), (1, 2), (2, 1), (2, 2), (2, 3), (3, 1), (3, 2), (3, 3), (3, 4), (4, 1), (4, 3), (4, 4)]
    },
}

OPTIMIZATION_METHODS: dict[OptimizationMethod, dict[str, str]] = {
    OptimizationMethod.GREEDY: {
        "name": "Greedy",
        "description": "Fast algorithm that places items in the first available position with the best local fit. "
                       "Good for most cases but not always optimal.",
        "complexity": "low",
        "speed": "fast",
    },
    OptimizationMethod.GENETIC: {
        "name": "Genetic Algorithm",
        "description": "Evolutionary approach that creates a population of solutions and evolves them over generations. "
                       "Can find near-optimal solutions but takes longer.",
        "complexity": "high",
        "speed": "slow",
    },
}


def is_valid_case_type(kind: str, catalog: Mapping[str, CaseDefinition]) -> bool:
    return kind in catalog


def get_stash_height(edition: str) -> int:
    key = edition.strip().lower()
    for name, height in STASH_EDITIONS.items():
        if name.lower() == key:
            return height
    raise ValueError(f"Unknown stash edition '{edition}'. Valid: {sorted(STASH_EDITIONS.keys())}")
