"""Runtime settings; loads .env locally via python-dotenv."""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from stash_optimizer.catalog import DEFAULT_EDITION

# Does not override variables already set in the environment.
load_dotenv()

LOG_FORMAT = "[%(asctime)s] %(name)s %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class Settings(BaseModel):
    log_level: str = "INFO"
    default_method: str = "greedy"
    default_edition: str = DEFAULT_EDITION
    seed: Optional[int] = None
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


def get_settings() -> Settings:
    seed = os.getenv("STASH_SEED")
    origins = os.getenv("STASH_CORS_ORIGINS", "*")
    return Settings(
        log_level=os.getenv("STASH_LOG_LEVEL", "INFO").upper(),
        default_method=os.getenv("STASH_DEFAULT_METHOD", "greedy"),
        default_edition=os.getenv("STASH_DEFAULT_EDITION", DEFAULT_EDITION),
        seed=int(seed) if seed else None,
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
