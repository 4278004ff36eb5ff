"""
athlete_flow.config — Environment-driven defaults and logging setup.

Environment variables:
    ENV                     — "dev" or "prod" (default: "prod"); dev logs at DEBUG
    FLOW_TOP_COUNTRIES      — default country retention count (default: 12)
    FLOW_TOP_DISCIPLINES    — default discipline retention count (default: 12)
    FLOW_TOP_BAR_COUNTRIES  — default bar chart country count (default: 15)

Values are read once at import. Unparseable or negative values fall back
to the built-in defaults in athlete_flow.constants.
"""

from __future__ import annotations

import logging
import os
import sys

from athlete_flow.constants import (
    DEFAULT_TOP_BAR_COUNTRIES,
    DEFAULT_TOP_COUNTRIES,
    DEFAULT_TOP_DISCIPLINES,
)


def env_int(name: str, default: int) -> int:
    """Read a non-negative integer from the environment, else *default*."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

ENV: str = os.getenv("ENV", "prod").lower().strip()

TOP_COUNTRIES: int = env_int("FLOW_TOP_COUNTRIES", DEFAULT_TOP_COUNTRIES)
TOP_DISCIPLINES: int = env_int("FLOW_TOP_DISCIPLINES", DEFAULT_TOP_DISCIPLINES)
TOP_BAR_COUNTRIES: int = env_int("FLOW_TOP_BAR_COUNTRIES", DEFAULT_TOP_BAR_COUNTRIES)


# ---------------------------------------------------------------------------
# Logging configuration — structured JSON messages to stdout
# ---------------------------------------------------------------------------

def configure_logging(env: str | None = None) -> int:
    """Configure root logging for a host process. Returns the level used."""
    env = ENV if env is None else env.lower().strip()
    level = logging.DEBUG if env == "dev" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )
    return level
