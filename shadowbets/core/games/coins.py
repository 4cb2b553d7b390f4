"""
Shadow Coins - call the coin flip.
"""

from enum import Enum

from shadowbets.core.games.base import GameMode, GameVariantConfig
from shadowbets.core.rng import RandomSource


class CoinSide(str, Enum):
    HEADS = "heads"
    TAILS = "tails"


def flip_coin(rng: RandomSource) -> CoinSide:
    return rng.random_choice(list(CoinSide))


def side_matches(guess: CoinSide, side: CoinSide) -> bool:
    return guess == side


COINS = GameVariantConfig(
    mode=GameMode.COINS,
    guess_type=CoinSide,
    guess_labels={CoinSide.HEADS: "👑 Heads x2", CoinSide.TAILS: "📈 Tails x2"},
    sample=flip_coin,
    wins=side_matches,
    describe_outcome=lambda side: side.value.capitalize(),
    emoji="🪙",
    resolution_delay=1.2,
)
