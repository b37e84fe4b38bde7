from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Optional

from stash_optimizer.catalog import get_stash_height
from stash_optimizer.config import configure_logging, get_settings
from stash_optimizer.metrics import format_output
from stash_optimizer.models import PlacedCase
from stash_optimizer.optimizer import optimize_stash_layout


def load_input(path: Path) -> dict[str, Any]:
    """
    Read a request file:
        {"counts": {...}, "edition": "...", "stash_height": 28, "locked": [...], "method": "greedy"}
    Only "counts" is required.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if "counts" not in data:
        raise ValueError("Input must include 'counts'")
    return data


def resolve_height(data: dict[str, Any], height: Optional[int], edition: Optional[str], default_edition: str) -> int:
    if height is not None:
        return height
    if data.get("stash_height") is not None:
        return int(data["stash_height"])
    return get_stash_height(edition or data.get("edition") or default_edition)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Stash Optimizer CLI")
    parser.add_argument("--input", required=True, help="Input request JSON file")
    parser.add_argument("--output", required=True, help="Output layout JSON file")
    parser.add_argument("--method", help="greedy (default) or genetic")
    parser.add_argument("--edition", help="Stash edition preset, e.g. 'Standard'")
    parser.add_argument("--height", type=int, help="Explicit stash height (overrides edition)")
    parser.add_argument("--seed", type=int, help="Seed for the genetic method")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)

    data = load_input(Path(args.input))
    stash_height = resolve_height(data, args.height, args.edition, settings.default_edition)
    locked = [PlacedCase(**p) for p in data.get("locked", [])]
    method = args.method or data.get("method") or settings.default_method
    seed = args.seed if args.seed is not None else settings.seed

    result = optimize_stash_layout(data["counts"], stash_height, locked, method, seed=seed)
    output = format_output(result)

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(output, indent=2), encoding="utf-8")

    print(output["summary"])
    print(f"Layout written to {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
