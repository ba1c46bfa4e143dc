"""Runtime settings for the command-line interface.

Settings come from environment variables so that a shell profile can set
the defaults once. Tax and insurance rules are not configured here; they
live in ``tables.py``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    max_rows: int = 30  # schedule rows printed before truncating
    province: str = "ON"
    municipality: str = "ottawa"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    defaults = Settings()
    try:
        max_rows = int(env.get("MORTGAGE_CALC_MAX_ROWS", defaults.max_rows))
    except ValueError:
        max_rows = defaults.max_rows
    if max_rows < 1:
        max_rows = defaults.max_rows
    return Settings(
        log_level=env.get("MORTGAGE_CALC_LOG_LEVEL", defaults.log_level).upper(),
        max_rows=max_rows,
        province=env.get("MORTGAGE_CALC_PROVINCE", defaults.province).upper(),
        municipality=env.get("MORTGAGE_CALC_MUNICIPALITY", defaults.municipality).lower(),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
