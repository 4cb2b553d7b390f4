from shadowbets.config import AppConfig
from shadowbets.core.games import GameMode
from shadowbets.simulate import main, simulate


def test_every_game_is_reported():
    report = simulate(40, seed=3, config=AppConfig())

    assert list(report) == ["dice", "roulette", "cards", "coins", "race"]
    for row in report.values():
        assert row["rounds"] == 40
        assert row["wagered"] == 40 * 25
        # Each win pays the pot times ten
        assert row["paid"] == row["wins"] * 250
        assert 0 <= row["win_rate"] <= 1


def test_same_seed_same_report():
    first = simulate(100, seed=11, config=AppConfig())
    second = simulate(100, seed=11, config=AppConfig())
    assert first == second


def test_selected_modes_only():
    report = simulate(5, seed=1, modes=[GameMode.COINS], config=AppConfig())
    assert list(report) == ["coins"]


def test_disabled_games_are_skipped():
    config = AppConfig()
    config.games.coins.enabled = False

    report = simulate(10, seed=1, config=config)

    assert list(report) == ["dice", "roulette", "cards", "race"]


def test_main_prints_table(capsys):
    main(["--rounds", "20", "--seed", "5", "--variant", "dice", "--variant", "race"])

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].split()[0] == "game"
    assert [line.split()[0] for line in lines[1:]] == ["dice", "race"]
