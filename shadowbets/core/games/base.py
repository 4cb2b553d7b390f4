"""
Shared vocabulary for the game variants.

A variant is plain data: which guesses the player may make, how an outcome
is drawn, how an outcome is judged against a guess, and what it pays.
The wager engine runs the same life cycle for all of them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Tuple, Type

from shadowbets.core.exceptions import InvalidGuess
from shadowbets.core.rng import RandomSource


class GameMode(str, Enum):
    DICE = "Shadow Dice"
    ROULETTE = "Shadow Roulette"
    CARDS = "Shadow Cards"
    COINS = "Shadow Coins"
    RACE = "Shadow Race"

    @property
    def slug(self) -> str:
        """Short name used in URLs and config sections ("dice", "race", ...)."""
        return self.name.lower()

    @classmethod
    def from_slug(cls, slug: str) -> "GameMode":
        try:
            return cls[slug.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown game variant: {slug}") from None


class GameResult(str, Enum):
    WIN = "You Win!"
    LOSS = "Bot Wins!"
    # Reserved; no variant currently produces a draw
    DRAW = "Draw"


@dataclass(frozen=True)
class GameVariantConfig:
    mode: GameMode
    guess_type: Type[Enum]
    guess_labels: Dict[Enum, str]
    sample: Callable[[RandomSource], Any]
    wins: Callable[[Enum, Any], bool]
    describe_outcome: Callable[[Any], str]
    emoji: str
    resolution_delay: float
    stake_amount: float = 25.0
    # NOTE: labels such as "Green x14" or "Hearts x4" do not match this value.
    # Every win pays pot * payout_multiplier until a per-choice table is confirmed.
    payout_multiplier: float = 10.0
    guesses: Tuple[Enum, ...] = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "guesses", tuple(self.guess_type))

    @property
    def name(self) -> str:
        return self.mode.slug

    def parse_guess(self, value) -> Enum:
        """Accept a guess member or its token ("even", "Red", "horse2")."""
        if isinstance(value, self.guess_type):
            return value
        if isinstance(value, str):
            token = value.strip().lower()
            for guess in self.guesses:
                if guess.value == token:
                    return guess
        raise InvalidGuess(self.name, value)

    def label(self, guess: Enum) -> str:
        return self.guess_labels[guess]

    def catalogue(self) -> dict:
        return {
            "variant": self.name,
            "title": self.mode.value,
            "stake_amount": self.stake_amount,
            "payout_multiplier": self.payout_multiplier,
            "guesses": [
                {"token": g.value, "label": self.label(g)} for g in self.guesses
            ],
        }
