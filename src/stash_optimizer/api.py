"""FastAPI endpoint for the stash optimizer."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from stash_optimizer.catalog import DEFAULT_CASES, GRID_WIDTH, OPTIMIZATION_METHODS, STASH_EDITIONS, get_stash_height
from stash_optimizer.config import configure_logging, get_settings
from stash_optimizer.geometry import find_conflicts
from stash_optimizer.metrics import format_output
from stash_optimizer.models import PlacedCase
from stash_optimizer.optimizer import optimize_stash_layout

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)


class OptimizeRequest(BaseModel):
    """Body of POST /optimize."""
    counts: dict[str, int] = Field(default_factory=dict, description="Case kind -> how many to pack")
    edition: Optional[str] = Field(default=None, description="Stash edition preset (sets the height)")
    stash_height: Optional[int] = Field(default=None, gt=0, description="Explicit stash height, overrides edition")
    locked: list[PlacedCase] = Field(default_factory=list, description="Pinned cases that must not move")
    method: Optional[str] = Field(default=None, description="greedy or genetic")
    seed: Optional[int] = Field(default=None, description="Seed for the genetic method")


# FastAPI app instance (exactly one)
app = FastAPI(
    title="Stash Optimizer API",
    description="Stash case layout optimization service",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)


def resolve_height(request: OptimizeRequest) -> int:
    if request.stash_height is not None:
        return request.stash_height
    return get_stash_height(request.edition or settings.default_edition)


@app.post("/optimize")
async def optimize(request: OptimizeRequest) -> Any:
    """
    Pack cases into the stash and return the layout.

    Input (request body):
        {
            "counts": {"ammo": 3, "weapons": 1},
            "edition": "Standard",
            "locked": [{"id": "L1", "kind": "items", "x": 0, "y": 0, "width": 4, "height": 4}],
            "method": "genetic",
            "seed": 7
        }
    """
    try:
        stash_height = resolve_height(request)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    problems = find_conflicts(request.locked, GRID_WIDTH, stash_height)
    if problems:
        return JSONResponse(
            status_code=422,
            content={
                "error": "INVALID_LOCKED_POSITIONS",
                "summary": "Locked cases must lie inside the stash and must not overlap.",
                "details": problems,
            },
        )

    try:
        # CPU bound; keep it off the event loop.
        result = await run_in_threadpool(
            optimize_stash_layout,
            request.counts,
            stash_height,
            request.locked,
            request.method or settings.default_method,
            seed=request.seed if request.seed is not None else settings.seed,
        )
    except Exception as e:
        logger.error(f"ERROR in /optimize endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    response = format_output(result)
    logger.info(
        f"placed={response['metrics']['cases_placed']}, "
        f"unplaced={response['metrics']['cases_unplaced']}, "
        f"limiting_factor={response['metrics']['limiting_factor']}"
    )
    return response


@app.get("/catalog")
async def catalog() -> dict[str, Any]:
    return {kind: definition.model_dump() for kind, definition in DEFAULT_CASES.items()}


@app.get("/methods")
async def methods() -> dict[str, Any]:
    return {method.value: info for method, info in OPTIMIZATION_METHODS.items()}


@app.get("/editions")
async def editions() -> dict[str, Any]:
    return {name: {"width": GRID_WIDTH, "height": height} for name, height in STASH_EDITIONS.items()}


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check endpoint."""
    return {"ok": True}
