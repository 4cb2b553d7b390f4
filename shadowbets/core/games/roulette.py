"""
Shadow Roulette - single-zero wheel (0-36), bet on the pocket color.

Colors follow parity rather than a casino wheel layout:
0 is green, odd numbers are red, even numbers are black.
"""

from enum import Enum

from shadowbets.core.games.base import GameMode, GameVariantConfig
from shadowbets.core.rng import RandomSource


class RouletteGuess(str, Enum):
    RED = "red"
    BLACK = "black"
    GREEN = "green"


def spin_wheel(rng: RandomSource) -> int:
    return rng.random_int(0, 36)


def pocket_color(number: int) -> RouletteGuess:
    """Get the color of a roulette number."""
    if number == 0:
        return RouletteGuess.GREEN
    elif number % 2 == 1:
        return RouletteGuess.RED
    else:
        return RouletteGuess.BLACK


def color_matches(guess: RouletteGuess, number: int) -> bool:
    return guess == pocket_color(number)


def describe_pocket(number: int) -> str:
    return f"{number} {pocket_color(number).value.capitalize()}"


ROULETTE = GameVariantConfig(
    mode=GameMode.ROULETTE,
    guess_type=RouletteGuess,
    guess_labels={
        RouletteGuess.RED: "Red x2",
        RouletteGuess.BLACK: "Black x2",
        RouletteGuess.GREEN: "Green x14",
    },
    sample=spin_wheel,
    wins=color_matches,
    describe_outcome=describe_pocket,
    emoji="🎡",
    resolution_delay=2.5,
)
