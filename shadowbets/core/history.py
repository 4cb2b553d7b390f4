"""
Game history: the newest-first, bounded log of settled wagers.
"""

import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shadowbets.core.games.base import GameMode, GameResult

DEFAULT_HISTORY_LIMIT = 50


class GameRecord(BaseModel):
    """One settled wager. Immutable once created."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    game_mode: GameMode
    bet_amount: float
    pot_won: float
    result: GameResult


class HistoryLog:
    """
    Ordered record of settled wagers, newest first, never longer than `limit`.
    """

    def __init__(
        self,
        records: Iterable[GameRecord] = (),
        limit: int = DEFAULT_HISTORY_LIMIT,
        on_change: Optional[Callable[[], None]] = None,
    ):
        if limit <= 0:
            raise ValueError("History limit must be positive")
        self.limit = limit
        self._records: List[GameRecord] = list(records)[:limit]
        self._on_change = on_change

    def __len__(self) -> int:
        return len(self._records)

    def append(self, record: GameRecord):
        """Insert at the head, evicting the oldest entries beyond the limit."""
        self._records.insert(0, record)
        del self._records[self.limit:]
        self._changed()

    def clear(self):
        self._records.clear()
        self._changed()

    def snapshot(self) -> Tuple[GameRecord, ...]:
        return tuple(self._records)

    def win_rate(self) -> float:
        """Fraction of recorded games won; 0 when the log is empty."""
        if not self._records:
            return 0.0
        wins = sum(1 for r in self._records if r.result == GameResult.WIN)
        return wins / len(self._records)

    def stats(self) -> dict:
        """Dashboard figures computed over the records currently held."""
        games = len(self._records)
        wins = sum(1 for r in self._records if r.result == GameResult.WIN)
        wagered = sum(r.bet_amount for r in self._records)
        won = sum(r.pot_won for r in self._records)

        breakdown = defaultdict(lambda: {"games": 0, "wins": 0, "wagered": 0.0, "won": 0.0})
        for record in self._records:
            entry = breakdown[record.game_mode.slug]
            entry["games"] += 1
            entry["wins"] += 1 if record.result == GameResult.WIN else 0
            entry["wagered"] += record.bet_amount
            entry["won"] += record.pot_won

        return {
            "games_played": games,
            "wins": wins,
            "losses": sum(1 for r in self._records if r.result == GameResult.LOSS),
            "win_rate": self.win_rate(),
            "win_rate_percent": round(self.win_rate() * 100),
            "total_wagered": round(wagered, 2),
            "total_won": round(won, 2),
            "biggest_win": max((r.pot_won for r in self._records), default=0.0),
            "net": round(won - wagered, 2),
            "by_variant": {
                slug: {**entry, "wagered": round(entry["wagered"], 2), "won": round(entry["won"], 2)}
                for slug, entry in breakdown.items()
            },
        }

    def _changed(self):
        if self._on_change is not None:
            self._on_change()
