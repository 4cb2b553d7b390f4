"""
Shadow Dice - bet on the parity of two six-sided dice.
"""

from enum import Enum

from shadowbets.core.games.base import GameMode, GameVariantConfig
from shadowbets.core.rng import RandomSource


class DiceGuess(str, Enum):
    EVEN = "even"
    ODD = "odd"


def roll_dice(rng: RandomSource) -> int:
    """Roll 2 six-sided dice and return the sum (2-12)."""
    die1 = rng.random_int(1, 6)
    die2 = rng.random_int(1, 6)
    return die1 + die2


def parity_matches(guess: DiceGuess, total: int) -> bool:
    is_even = total % 2 == 0
    return is_even if guess == DiceGuess.EVEN else not is_even


def describe_roll(total: int) -> str:
    return f"{total} ({'Even' if total % 2 == 0 else 'Odd'})"


DICE = GameVariantConfig(
    mode=GameMode.DICE,
    guess_type=DiceGuess,
    guess_labels={DiceGuess.EVEN: "Even", DiceGuess.ODD: "Odd"},
    sample=roll_dice,
    wins=parity_matches,
    describe_outcome=describe_roll,
    emoji="💪",
    resolution_delay=1.2,
)
