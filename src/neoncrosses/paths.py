"""Centralized path helpers for persisted state.

Environment-first, with fallbacks under the user's home directory so the
stats file never lands inside site-packages or an arbitrary CWD.
"""

from __future__ import annotations

import os
from pathlib import Path


def state_home() -> Path:
    """Directory holding persisted state.

    Order: env var NEONCROSSES_HOME -> ~/.neoncrosses.
    """
    env = os.getenv("NEONCROSSES_HOME")
    if env:
        return Path(env)
    return Path.home() / ".neoncrosses"


def stats_file() -> Path:
    p = os.getenv("NEONCROSSES_STATS_FILE")
    return Path(p) if p else state_home() / "stats.json"


def runs_dir() -> Path:
    p = os.getenv("NEONCROSSES_RUNS")
    return Path(p) if p else state_home() / "runs"


def ensure_dirs() -> None:
    stats_file().parent.mkdir(parents=True, exist_ok=True)
    runs_dir().mkdir(parents=True, exist_ok=True)
