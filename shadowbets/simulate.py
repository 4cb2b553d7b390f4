"""
Play many complete rounds of each game offline and report how they pay.

Runs against a throwaway in-memory profile with the manual scheduler, so it
finishes instantly and never touches the saved profile:

    python -m shadowbets.simulate --rounds 10000 --seed 7
    python -m shadowbets.simulate --variant roulette --rounds 500
"""

import argparse
from typing import Dict, Iterable, Optional

from shadowbets.config import AppConfig, settings
from shadowbets.core.casino import Casino
from shadowbets.core.games import VARIANTS, GameMode, is_enabled
from shadowbets.core.logger import init_logging
from shadowbets.core.persistence import MemoryBlobStore, PersistenceGateway
from shadowbets.core.rng import RandomSource
from shadowbets.core.scheduler import ManualScheduler


def simulate(
    rounds: int,
    seed: Optional[int] = None,
    modes: Optional[Iterable[GameMode]] = None,
    config: Optional[AppConfig] = None,
) -> Dict[str, dict]:
    """
    Play `rounds` rounds per variant, each with a random guess and an
    unlimited bankroll, and return per-variant totals.
    """
    config = config or settings
    rng = RandomSource(seed)
    scheduler = ManualScheduler()
    # A huge bankroll keeps every round affordable
    gateway = PersistenceGateway(MemoryBlobStore(), starting_balance=float(10**12))
    casino = Casino(gateway, scheduler, rng=rng, config=config)

    report = {}
    for mode in modes or VARIANTS:
        if not is_enabled(mode, config.games):
            continue
        engine = casino.open_game(mode)
        wins = 0
        wagered = 0.0
        paid = 0.0
        for _ in range(rounds):
            engine.place_bet()
            scheduler.run_pending()
            engine.make_guess(rng.random_choice(engine.variant.guesses))
            scheduler.run_pending()
            wagered += engine.session.pot
            paid += engine.session.payout
            wins += 1 if engine.session.payout > 0 else 0
            engine.new_round()

        report[mode.slug] = {
            "rounds": rounds,
            "wins": wins,
            "win_rate": wins / rounds if rounds else 0.0,
            "wagered": round(wagered, 2),
            "paid": round(paid, 2),
            "rtp": paid / wagered if wagered else 0.0,
        }
    return report


def main(argv=None):
    parser = argparse.ArgumentParser(description="Shadow Bets offline simulator")
    parser.add_argument("--rounds", type=int, default=1000, help="Rounds per game")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    parser.add_argument(
        "--variant",
        choices=[mode.slug for mode in GameMode],
        action="append",
        help="Only simulate this game (repeatable)",
    )
    args = parser.parse_args(argv)

    # Per-round INFO lines would drown the report
    init_logging(level="WARNING")

    modes = [GameMode.from_slug(v) for v in args.variant] if args.variant else None
    report = simulate(args.rounds, seed=args.seed, modes=modes)

    print(f"{'game':<10} {'rounds':>8} {'wins':>8} {'win %':>7} {'RTP':>8}")
    for slug, row in report.items():
        print(
            f"{slug:<10} {row['rounds']:>8} {row['wins']:>8} "
            f"{row['win_rate'] * 100:>6.1f}% {row['rtp'] * 100:>7.1f}%"
        )


if __name__ == "__main__":
    main()
