"""
Snapshot persistence.
The whole player profile (balance, history, preferences) is one JSON blob
stored under a single key. Storage problems never interrupt gameplay: the
gateway logs them and carries on in memory.
"""

import sqlite3
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from shadowbets.core.exceptions import PersistenceFailure
from shadowbets.core.history import DEFAULT_HISTORY_LIMIT, GameRecord
from shadowbets.core.logger import get_logger

logger = get_logger("persistence")

DEFAULT_KEY = "ShadowBetsAppState"
DEFAULT_BOT = "Alex_777"


class AppSnapshot(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    balance: float = Field(default=1000.0, ge=0)
    game_history: List[GameRecord] = Field(default_factory=list)
    selected_bot: str = DEFAULT_BOT
    sound_enabled: bool = True
    haptics_enabled: bool = True


class BlobStore(Protocol):
    def get(self, key: str) -> Optional[bytes]:
        ...

    def put(self, key: str, value: bytes) -> None:
        ...


class MemoryBlobStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self.data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def put(self, key: str, value: bytes) -> None:
        self.data[key] = value


class SqliteBlobStore:
    """Key-value blobs in a single SQLite table, one connection per thread."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._local = threading.local()
        self._connections: List[sqlite3.Connection] = []
        self._lock = threading.Lock()
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Initializing snapshot store at {self.db_path}")
            conn = self._get_connection()
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceFailure(f"Could not open snapshot store: {e}") from e

    def _get_connection(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._local.conn = conn
            with self._lock:
                self._connections.append(conn)
        return conn

    def get(self, key: str) -> Optional[bytes]:
        try:
            row = self._get_connection().execute(
                "SELECT value FROM kv WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Could not read {key}: {e}") from e
        return bytes(row[0]) if row else None

    def put(self, key: str, value: bytes) -> None:
        try:
            conn = self._get_connection()
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Could not write {key}: {e}") from e

    def close(self):
        """Close the connections opened by every thread that used this store."""
        with self._lock:
            connections, self._connections = self._connections, []
        for conn in connections:
            conn.close()
        self._local = threading.local()


class PersistenceGateway:
    def __init__(
        self,
        store: BlobStore,
        key: str = DEFAULT_KEY,
        starting_balance: float = 1000.0,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.store = store
        self.key = key
        self.starting_balance = starting_balance
        self.history_limit = history_limit

    def default_snapshot(self) -> AppSnapshot:
        return AppSnapshot(balance=self.starting_balance)

    def load(self) -> AppSnapshot:
        """Read the stored snapshot, falling back to defaults on any problem."""
        try:
            blob = self.store.get(self.key)
        except PersistenceFailure as e:
            logger.warning(f"Snapshot load failed, starting fresh in memory: {e}")
            return self.default_snapshot()

        if blob is None:
            logger.info("No saved profile found, starting with defaults")
            return self.default_snapshot()

        try:
            snapshot = AppSnapshot.model_validate(orjson.loads(blob))
        except (orjson.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Saved profile is unreadable, starting with defaults: {e}")
            return self.default_snapshot()

        if len(snapshot.game_history) > self.history_limit:
            snapshot = snapshot.model_copy(
                update={"game_history": snapshot.game_history[: self.history_limit]}
            )

        logger.info(
            f"Restored profile: balance={snapshot.balance}, "
            f"{len(snapshot.game_history)} history entries"
        )
        return snapshot

    def save(self, snapshot: AppSnapshot) -> bool:
        """Write the snapshot. Returns False when the store failed."""
        blob = orjson.dumps(snapshot.model_dump(mode="json", by_alias=True))
        try:
            self.store.put(self.key, blob)
        except PersistenceFailure as e:
            logger.warning(f"Snapshot save failed, continuing in memory: {e}")
            return False
        return True
