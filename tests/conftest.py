import pytest

from shadowbets.config import AppConfig
from shadowbets.core.casino import Casino
from shadowbets.core.engine import WagerEngine
from shadowbets.core.history import HistoryLog
from shadowbets.core.persistence import MemoryBlobStore, PersistenceGateway
from shadowbets.core.scheduler import ManualScheduler
from shadowbets.core.wallet import WalletLedger
from tests.helpers import ScriptedRNG


@pytest.fixture
def config():
    return AppConfig()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store():
    return MemoryBlobStore()


@pytest.fixture
def gateway(store):
    return PersistenceGateway(store)


@pytest.fixture
def casino(gateway, scheduler, config):
    return Casino(gateway, scheduler, rng=ScriptedRNG(), config=config)


@pytest.fixture
def make_engine(scheduler):
    """Build a standalone engine around a fresh wallet and history."""

    def factory(variant, balance=1000.0, rng=None, history_limit=50):
        wallet = WalletLedger(balance)
        history = HistoryLog(limit=history_limit)
        return WagerEngine(variant, wallet, history, scheduler, rng or ScriptedRNG())

    return factory
