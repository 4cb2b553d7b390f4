import shutil
import threading

import orjson
import pytest

from shadowbets.config import AppConfig
from shadowbets.core.casino import Casino, build_gateway
from shadowbets.core.exceptions import PersistenceFailure
from shadowbets.core.games import CoinSide, DiceGuess, GameMode
from shadowbets.core.persistence import (
    DEFAULT_KEY,
    AppSnapshot,
    MemoryBlobStore,
    PersistenceGateway,
    SqliteBlobStore,
)
from shadowbets.core.scheduler import ManualScheduler
from shadowbets.core.wallet import WalletLedger
from tests.helpers import ScriptedRNG, play_round


class BrokenStore:
    """A store whose disk is gone."""

    def __init__(self):
        self.attempts = 0

    def get(self, key):
        self.attempts += 1
        raise PersistenceFailure("disk unavailable")

    def put(self, key, value):
        self.attempts += 1
        raise PersistenceFailure("disk unavailable")


def saved(store):
    return orjson.loads(store.data[DEFAULT_KEY])


# ==================== Loading ====================

def test_missing_snapshot_gives_defaults(gateway):
    snapshot = gateway.load()
    assert snapshot.balance == 1000
    assert snapshot.game_history == []
    assert snapshot.selected_bot == "Alex_777"
    assert snapshot.sound_enabled is True
    assert snapshot.haptics_enabled is True


@pytest.mark.parametrize("blob", [
    b"not json at all",
    b"[1, 2, 3]",
    b'{"balance": -50}',
    b'{"balance": 100, "gameHistory": [{"gameMode": "Shadow Poker"}]}',
])
def test_undecodable_snapshot_gives_defaults(blob):
    gateway = PersistenceGateway(MemoryBlobStore({DEFAULT_KEY: blob}))
    snapshot = gateway.load()
    assert snapshot.balance == 1000
    assert snapshot.game_history == []


def test_load_reads_camel_case_field_names():
    blob = orjson.dumps({
        "balance": 420,
        "gameHistory": [{
            "id": "1f0e",
            "date": "2025-03-01T12:00:00Z",
            "gameMode": "Shadow Coins",
            "betAmount": 25,
            "potWon": 0,
            "result": "Bot Wins!",
        }],
        "selectedBot": "NeonGhost",
        "soundEnabled": False,
        "hapticsEnabled": True,
    })
    snapshot = PersistenceGateway(MemoryBlobStore({DEFAULT_KEY: blob})).load()

    assert snapshot.balance == 420
    assert snapshot.game_history[0].game_mode == GameMode.COINS
    assert snapshot.selected_bot == "NeonGhost"
    assert snapshot.sound_enabled is False


def test_load_truncates_long_history(store):
    records = [
        {"gameMode": "Shadow Dice", "betAmount": 25, "potWon": 0, "result": "Bot Wins!"}
        for _ in range(70)
    ]
    store.put(DEFAULT_KEY, orjson.dumps({"balance": 10, "gameHistory": records}))

    snapshot = PersistenceGateway(store).load()
    assert len(snapshot.game_history) == 50


# ==================== Saving ====================

def test_every_mutation_is_persisted(casino, store, scheduler):
    engine = casino.open_game("dice")
    engine.place_bet()
    assert saved(store)["balance"] == 975

    scheduler.run_pending()
    engine.make_guess(DiceGuess.EVEN)
    scheduler.run_pending()

    data = saved(store)
    assert len(data["gameHistory"]) == 1
    assert set(data) == {"balance", "gameHistory", "selectedBot", "soundEnabled", "hapticsEnabled"}
    record = data["gameHistory"][0]
    assert set(record) == {"id", "date", "gameMode", "betAmount", "potWon", "result"}
    assert record["gameMode"] == "Shadow Dice"


def test_profile_survives_restart(store, config):
    scheduler = ManualScheduler()
    first = Casino(PersistenceGateway(store), scheduler, rng=ScriptedRNG(ints=[2, 4]), config=config)
    play_round(first.open_game("dice"), scheduler, DiceGuess.EVEN)
    first.update_preferences(sound_enabled=False)

    second = Casino(PersistenceGateway(store), ManualScheduler(), config=config)

    assert second.wallet.balance == 1225
    assert len(second.history) == 1
    assert second.history.snapshot()[0].pot_won == 250
    assert second.preferences.sound_enabled is False


def test_gameplay_continues_when_store_fails(config):
    store = BrokenStore()
    scheduler = ManualScheduler()
    casino = Casino(
        PersistenceGateway(store),
        scheduler,
        rng=ScriptedRNG(choices=[CoinSide.TAILS, CoinSide.TAILS]),
        config=config,
    )

    session = play_round(casino.open_game("coins"), scheduler, CoinSide.TAILS)

    assert session.payout == 250
    assert casino.wallet.balance == 1225
    assert len(casino.history) == 1
    assert store.attempts > 1


def test_save_reports_failure():
    gateway = PersistenceGateway(BrokenStore())
    assert gateway.save(AppSnapshot()) is False
    assert gateway.load().balance == 1000


# ==================== Reset ====================

def test_reset_restores_balance_and_clears_history(casino, scheduler, store):
    casino.update_preferences(selected_bot="CryptoCat", haptics_enabled=False)
    engine = casino.open_game("race")
    for _ in range(3):
        play_round(engine, scheduler, "horse2")
        engine.new_round()

    casino.reset_stats()

    assert casino.wallet.balance == 1000
    assert len(casino.history) == 0
    assert casino.preferences.selected_bot == "CryptoCat"
    assert casino.preferences.haptics_enabled is False
    data = saved(store)
    assert data["balance"] == 1000
    assert data["gameHistory"] == []
    assert data["selectedBot"] == "CryptoCat"


def test_reset_abandons_open_sessions(casino, scheduler):
    engine = casino.open_game("dice")
    engine.place_bet()

    casino.reset_stats()
    scheduler.run_pending()

    assert engine.session.pot == 0
    assert casino.wallet.balance == 1000
    assert len(casino.history) == 0


# ==================== SQLite ====================

def test_sqlite_store_round_trip(tmp_path):
    store = SqliteBlobStore(tmp_path / "profile.db")
    assert store.get("missing") is None

    store.put("k", b"one")
    store.put("k", b"two")

    assert store.get("k") == b"two"
    store.close()

    reopened = SqliteBlobStore(tmp_path / "profile.db")
    assert reopened.get("k") == b"two"
    reopened.close()


def test_build_gateway_uses_configured_backend(tmp_path):
    config = AppConfig()
    config.storage.backend = "memory"
    assert isinstance(build_gateway(config).store, MemoryBlobStore)

    config = AppConfig()
    config.paths.database = str(tmp_path / "nested" / "shadow.db")
    gateway = build_gateway(config)
    assert isinstance(gateway.store, SqliteBlobStore)
    assert gateway.key == "ShadowBetsAppState"
    gateway.store.close()


def test_stores_on_same_path_keep_their_own_connections(tmp_path):
    path = tmp_path / "profile.db"
    first = SqliteBlobStore(path)
    second = SqliteBlobStore(path)

    first.put("k", b"one")
    first.close()

    assert second.get("k") == b"one"
    second.close()


def test_close_releases_connections_from_every_thread(tmp_path):
    store = SqliteBlobStore(tmp_path / "profile.db")
    writer = threading.Thread(target=store.put, args=("k", b"v"))
    writer.start()
    writer.join()
    assert len(store._connections) == 2

    store.close()

    assert store._connections == []
    assert store.get("k") == b"v"
    store.close()


def test_store_that_cannot_connect_does_not_interrupt_a_debit(tmp_path):
    db_dir = tmp_path / "data"
    store = SqliteBlobStore(db_dir / "shadow.db")
    gateway = PersistenceGateway(store)
    shutil.rmtree(db_dir)
    outcome = {}
    wallet = WalletLedger(
        1000, on_change=lambda: outcome.setdefault("saved", gateway.save(AppSnapshot(balance=wallet.balance)))
    )

    def debit():
        try:
            outcome["debited"] = wallet.try_debit(25)
        except Exception as e:
            outcome["error"] = e

    # A fresh thread has to open its own connection, which now fails
    worker = threading.Thread(target=debit)
    worker.start()
    worker.join()

    assert outcome == {"saved": False, "debited": True}
    assert wallet.balance == 975
    store.close()


def test_store_that_cannot_connect_reports_persistence_failure(tmp_path):
    db_dir = tmp_path / "data"
    store = SqliteBlobStore(db_dir / "shadow.db")
    store.close()
    shutil.rmtree(db_dir)

    with pytest.raises(PersistenceFailure):
        store.get(DEFAULT_KEY)
    with pytest.raises(PersistenceFailure):
        store.put(DEFAULT_KEY, b"{}")
    assert PersistenceGateway(store).load().balance == 1000
