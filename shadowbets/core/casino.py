"""
The player's profile and the game screens open on it.

One Casino per process: it restores the saved snapshot, owns the single
wallet and history shared by all five variants, and persists the full
snapshot after every change to either of them.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from shadowbets.config import AppConfig, settings as default_settings
from shadowbets.core.engine import WagerEngine
from shadowbets.core.exceptions import PersistenceFailure
from shadowbets.core.games import GameMode, get_variant, is_enabled
from shadowbets.core.history import HistoryLog
from shadowbets.core.logger import get_logger
from shadowbets.core.persistence import (
    AppSnapshot,
    MemoryBlobStore,
    PersistenceGateway,
    SqliteBlobStore,
)
from shadowbets.core.rng import RandomSource, rng as default_rng
from shadowbets.core.scheduler import Scheduler
from shadowbets.core.wallet import WalletLedger

logger = get_logger("casino")


@dataclass
class Preferences:
    """Pass-through flags; nothing in the core acts on them."""
    selected_bot: str
    sound_enabled: bool
    haptics_enabled: bool


class Casino:
    def __init__(
        self,
        gateway: PersistenceGateway,
        scheduler: Scheduler,
        rng: Optional[RandomSource] = None,
        config: Optional[AppConfig] = None,
    ):
        self.gateway = gateway
        self.scheduler = scheduler
        self.rng = rng or default_rng
        self.config = config or default_settings

        snapshot = gateway.load()
        self.wallet = WalletLedger(snapshot.balance, on_change=self._persist)
        self.history = HistoryLog(
            snapshot.game_history,
            limit=self.config.wallet.history_limit,
            on_change=self._persist,
        )
        self.preferences = Preferences(
            selected_bot=snapshot.selected_bot,
            sound_enabled=snapshot.sound_enabled,
            haptics_enabled=snapshot.haptics_enabled,
        )
        self._games: Dict[GameMode, WagerEngine] = {}

    # ==================== Game screens ====================

    def open_game(self, mode) -> WagerEngine:
        """Open a fresh session for a variant, abandoning any previous one."""
        mode = _as_mode(mode)
        if not is_enabled(mode, self.config.games):
            raise LookupError(f"{mode.value} is disabled")

        self.close_game(mode)
        engine = WagerEngine(
            get_variant(mode, self.config.games),
            self.wallet,
            self.history,
            self.scheduler,
            self.rng,
            bot_names=self.config.opponent.names,
            typing_delay=self.config.opponent.typing_delay,
        )
        self._games[mode] = engine
        return engine

    def game(self, mode) -> WagerEngine:
        mode = _as_mode(mode)
        engine = self._games.get(mode)
        if engine is None:
            engine = self.open_game(mode)
        return engine

    def close_game(self, mode):
        engine = self._games.pop(_as_mode(mode), None)
        if engine is not None:
            engine.abandon()

    # ==================== Profile ====================

    def reset_stats(self):
        """Back to the starting balance with an empty history. Preferences stay."""
        for engine in self._games.values():
            engine.abandon()
        self.wallet.reset(self.config.wallet.starting_balance)
        self.history.clear()
        logger.info("Stats reset")

    def update_preferences(
        self,
        selected_bot: Optional[str] = None,
        sound_enabled: Optional[bool] = None,
        haptics_enabled: Optional[bool] = None,
    ) -> Preferences:
        if selected_bot is not None:
            self.preferences.selected_bot = selected_bot
        if sound_enabled is not None:
            self.preferences.sound_enabled = sound_enabled
        if haptics_enabled is not None:
            self.preferences.haptics_enabled = haptics_enabled
        self._persist()
        return self.preferences

    def stats(self) -> dict:
        return {"balance": self.wallet.balance, **self.history.stats()}

    def snapshot(self) -> AppSnapshot:
        return AppSnapshot(
            balance=self.wallet.balance,
            game_history=list(self.history.snapshot()),
            selected_bot=self.preferences.selected_bot,
            sound_enabled=self.preferences.sound_enabled,
            haptics_enabled=self.preferences.haptics_enabled,
        )

    def shutdown(self):
        for mode in list(self._games):
            self.close_game(mode)

    def _persist(self):
        self.gateway.save(self.snapshot())


def _as_mode(mode) -> GameMode:
    return mode if isinstance(mode, GameMode) else GameMode.from_slug(mode)


def build_gateway(config: AppConfig) -> PersistenceGateway:
    """Snapshot gateway for the configured backend. Falls back to memory if SQLite is unusable."""
    if config.storage.backend == "memory":
        store = MemoryBlobStore()
    else:
        try:
            store = SqliteBlobStore(config.paths.get_db_path())
        except PersistenceFailure as e:
            logger.warning(f"{e}; profile will not be saved this session")
            store = MemoryBlobStore()
    return PersistenceGateway(
        store,
        key=config.storage.key,
        starting_balance=config.wallet.starting_balance,
        history_limit=config.wallet.history_limit,
    )
