"""
Shadow Cards - guess the suit of a single drawn card.
"""

from enum import Enum

from shadowbets.core.games.base import GameMode, GameVariantConfig
from shadowbets.core.rng import RandomSource


class CardSuit(str, Enum):
    # Declaration order is the suit index (0-3) the draw is compared against
    HEARTS = "hearts"
    SPADES = "spades"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"

    @property
    def position(self) -> int:
        return list(CardSuit).index(self)


SUIT_SYMBOLS = {
    CardSuit.HEARTS: "♥️",
    CardSuit.SPADES: "♠️",
    CardSuit.DIAMONDS: "♦️",
    CardSuit.CLUBS: "♣️",
}


def draw_suit(rng: RandomSource) -> int:
    """Draw a suit index (0-3)."""
    return rng.random_int(0, len(CardSuit) - 1)


def suit_matches(guess: CardSuit, suit_index: int) -> bool:
    return guess.position == suit_index


def describe_suit(suit_index: int) -> str:
    suit = list(CardSuit)[suit_index]
    return f"{SUIT_SYMBOLS[suit]} {suit.value.capitalize()}"


CARDS = GameVariantConfig(
    mode=GameMode.CARDS,
    guess_type=CardSuit,
    guess_labels={
        suit: f"{SUIT_SYMBOLS[suit]} {suit.value.capitalize()} x4" for suit in CardSuit
    },
    sample=draw_suit,
    wins=suit_matches,
    describe_outcome=describe_suit,
    emoji="🃏",
    resolution_delay=1.5,
)
