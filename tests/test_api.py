import pytest
from fastapi.testclient import TestClient

from shadowbets.config import AppConfig
from shadowbets.core.casino import Casino
from shadowbets.core.persistence import MemoryBlobStore, PersistenceGateway
from shadowbets.main import create_app
from tests.helpers import ScriptedRNG


@pytest.fixture
def rng():
    return ScriptedRNG()


@pytest.fixture
def casino(gateway, scheduler, rng, config):
    return Casino(gateway, scheduler, rng=rng, config=config)


@pytest.fixture
def client(casino, config):
    with TestClient(create_app(casino=casino, config=config)) as c:
        yield c


def test_games_catalogue(client):
    games = client.get("/api/games").json()["games"]
    assert [g["variant"] for g in games] == ["dice", "roulette", "cards", "coins", "race"]
    assert all(g["stake_amount"] == 25 and g["payout_multiplier"] == 10 for g in games)


def test_full_round_over_http(client, scheduler, rng):
    rng.ints.extend([3, 5])

    state = client.post("/api/games/dice/bet").json()
    assert state["placed"] is True
    assert state["phase"] == "staked"
    assert state["balance"] == 975
    assert state["opponent_typing"] is True

    scheduler.run_pending()
    state = client.get("/api/games/dice/state").json()
    assert state["phase"] == "awaiting_opponent"
    assert "bets on" in state["opponent_message"]

    state = client.post("/api/games/dice/guess", json={"guess": "even"}).json()
    assert state["phase"] == "awaiting_resolution"
    assert state["outcome"] == 8

    scheduler.run_pending()
    state = client.get("/api/games/dice/state").json()
    assert state["phase"] == "settled"
    assert state["result"] == "win"
    assert state["balance"] == 1225

    history = client.get("/api/history").json()["history"]
    assert history[0]["gameMode"] == "Shadow Dice"
    assert history[0]["result"] == "You Win!"
    assert history[0]["potWon"] == 250

    state = client.post("/api/games/dice/new-round").json()
    assert state["phase"] == "idle"
    assert state["pot"] == 0


def test_out_of_phase_calls_return_conflict(client, scheduler):
    assert client.post("/api/games/coins/guess", json={"guess": "heads"}).status_code == 409

    client.post("/api/games/coins/bet")
    assert client.post("/api/games/coins/bet").status_code == 409
    assert client.post("/api/games/coins/new-round").status_code == 409
    assert client.get("/api/balance").json()["balance"] == 975


def test_invalid_guess_and_unknown_game(client, scheduler):
    client.post("/api/games/race/bet")
    scheduler.run_pending()

    response = client.post("/api/games/race/guess", json={"guess": "horse9"})
    assert response.status_code == 400

    assert client.post("/api/games/poker/bet").status_code == 404
    assert client.get("/api/games/race/state").json()["phase"] == "awaiting_opponent"


def test_disabled_game_is_not_found(scheduler, rng):
    config = AppConfig()
    config.games.race.enabled = False
    casino = Casino(PersistenceGateway(MemoryBlobStore()), scheduler, rng=rng, config=config)

    with TestClient(create_app(casino=casino, config=config)) as client:
        assert client.post("/api/games/race/bet").status_code == 404
        variants = [g["variant"] for g in client.get("/api/games").json()["games"]]
        assert "race" not in variants


def test_insufficient_funds_bet_is_not_an_error(client, casino):
    casino.wallet.reset(10)

    response = client.post("/api/games/roulette/bet")

    assert response.status_code == 200
    body = response.json()
    assert body["placed"] is False
    assert body["phase"] == "idle"
    assert body["balance"] == 10


def test_close_mid_round_forfeits_stake(client, scheduler):
    client.post("/api/games/cards/bet")
    scheduler.run_pending()
    client.post("/api/games/cards/guess", json={"guess": "hearts"})

    body = client.post("/api/games/cards/close").json()
    scheduler.run_pending()

    assert body["balance"] == 975
    assert client.get("/api/history").json()["history"] == []
    assert client.get("/api/games/cards/state").json()["phase"] == "idle"


def test_open_gives_fresh_session(client):
    client.post("/api/games/dice/bet")
    state = client.post("/api/games/dice/open").json()
    assert state["phase"] == "idle"
    assert state["balance"] == 975


def test_stats_and_reset(client, scheduler):
    client.post("/api/games/coins/bet")
    scheduler.run_pending()
    client.post("/api/games/coins/guess", json={"guess": "heads"})
    scheduler.run_pending()

    stats = client.get("/api/stats").json()
    assert stats["games_played"] == 1
    assert stats["wins"] == 1
    assert stats["win_rate_percent"] == 100

    body = client.post("/api/reset").json()
    assert body == {"balance": 1000, "games_played": 0}
    assert client.get("/api/stats").json()["win_rate"] == 0


def test_preferences(client):
    assert client.get("/api/preferences").json() == {
        "selected_bot": "Alex_777",
        "sound_enabled": True,
        "haptics_enabled": True,
    }

    body = client.put("/api/preferences", json={"sound_enabled": False}).json()
    assert body["sound_enabled"] is False
    assert body["haptics_enabled"] is True

    client.post("/api/reset")
    assert client.get("/api/preferences").json()["sound_enabled"] is False
