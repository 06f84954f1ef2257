"""
Per-difficulty win/loss/draw statistics and their persistence.

Results are counted from the human player's point of view. Storage is a port
with ``load``/``save``/``reset``; callers update it after consulting
``evaluate``. The JSON store treats anything it cannot read as "no data yet".
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .policy import DIFFICULTIES

logger = logging.getLogger(__name__)

STATS_VERSION = 2

WIN = "win"
LOSS = "loss"
DRAW_RESULT = "draw"


@dataclass(frozen=True)
class GameStats:
    wins: int = 0
    losses: int = 0
    draws: int = 0
    games_played: int = 0

    @property
    def win_rate(self) -> float:
        if not self.games_played:
            return 0.0
        return self.wins / self.games_played

    def record(self, result: str) -> "GameStats":
        if result == WIN:
            return replace(self, wins=self.wins + 1, games_played=self.games_played + 1)
        if result == LOSS:
            return replace(self, losses=self.losses + 1, games_played=self.games_played + 1)
        if result == DRAW_RESULT:
            return replace(self, draws=self.draws + 1, games_played=self.games_played + 1)
        raise ValueError(f"Unknown result: {result}")


StatsByDifficulty = Dict[str, GameStats]


def zero_stats() -> StatsByDifficulty:
    return {d: GameStats() for d in DIFFICULTIES}


def record_result(stats: StatsByDifficulty, difficulty: str, result: str) -> StatsByDifficulty:
    """Return a copy of ``stats`` with one more game counted for ``difficulty``."""
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty: {difficulty}")
    updated = dict(stats)
    updated[difficulty] = updated.get(difficulty, GameStats()).record(result)
    return updated


def total_stats(stats: StatsByDifficulty) -> GameStats:
    return GameStats(
        wins=sum(s.wins for s in stats.values()),
        losses=sum(s.losses for s in stats.values()),
        draws=sum(s.draws for s in stats.values()),
        games_played=sum(s.games_played for s in stats.values()),
    )


def format_win_rate(s: GameStats) -> str:
    # half-way percentages round up
    return f"{math.floor(s.win_rate * 100 + 0.5)}%"


def stats_to_dict(stats: StatsByDifficulty) -> Dict[str, Any]:
    return {
        "version": STATS_VERSION,
        "difficulties": {d: asdict(stats.get(d, GameStats())) for d in DIFFICULTIES},
    }


def _tier_from_dict(raw: Any) -> GameStats:
    if not isinstance(raw, dict):
        raise ValueError(f"Expected an object per difficulty, got {type(raw).__name__}")
    values = {}
    for key in ("wins", "losses", "draws", "games_played"):
        v = raw.get(key, 0)
        if isinstance(v, bool) or not isinstance(v, int) or v < 0:
            raise ValueError(f"Invalid count for {key!r}: {v!r}")
        values[key] = v
    return GameStats(**values)


def stats_from_dict(payload: Any) -> StatsByDifficulty:
    """Parse the stored JSON payload; raises ValueError on malformed data."""
    if not isinstance(payload, dict) or not isinstance(payload.get("difficulties"), dict):
        raise ValueError("Stats payload missing 'difficulties' object")
    version = payload.get("version", STATS_VERSION)
    if version != STATS_VERSION:
        raise ValueError(f"Unsupported stats version: {version!r}")
    tiers = payload["difficulties"]
    return {d: _tier_from_dict(tiers[d]) if d in tiers else GameStats() for d in DIFFICULTIES}


class StatsStore(Protocol):
    def load(self) -> StatsByDifficulty: ...

    def save(self, stats: StatsByDifficulty) -> None: ...

    def reset(self) -> None: ...


class MemoryStatsStore:
    """In-process store; nothing survives the interpreter."""

    def __init__(self, initial: Optional[StatsByDifficulty] = None):
        self._stats = dict(initial) if initial is not None else zero_stats()

    def load(self) -> StatsByDifficulty:
        return dict(self._stats)

    def save(self, stats: StatsByDifficulty) -> None:
        self._stats = dict(stats)

    def reset(self) -> None:
        self._stats = zero_stats()


class JsonStatsStore:
    """Stats persisted to a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> StatsByDifficulty:
        if not self.path.exists():
            return zero_stats()
        try:
            payload = json.loads(self.path.read_text())
            return stats_from_dict(payload)
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(
                "Ignoring unreadable stats file %s (%s: %s); starting from zero",
                self.path, type(e).__name__, e,
            )
            return zero_stats()

    def save(self, stats: StatsByDifficulty) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(stats_to_dict(stats), indent=2))
        tmp.replace(self.path)
        logger.debug("Saved stats to %s", self.path)

    def reset(self) -> None:
        self.save(zero_stats())
