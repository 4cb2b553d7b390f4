"""
Shadow Race - three horses, pick the winning lane.
"""

from enum import Enum

from shadowbets.core.games.base import GameMode, GameVariantConfig
from shadowbets.core.rng import RandomSource


class Horse(str, Enum):
    HORSE1 = "horse1"
    HORSE2 = "horse2"
    HORSE3 = "horse3"

    @property
    def lane(self) -> int:
        return int(self.value[-1])


def run_race(rng: RandomSource) -> int:
    """Return the winning lane (1-3)."""
    return rng.random_int(1, len(Horse))


def lane_matches(guess: Horse, winning_lane: int) -> bool:
    return guess.lane == winning_lane


RACE = GameVariantConfig(
    mode=GameMode.RACE,
    guess_type=Horse,
    guess_labels={horse: f"🐎 #{horse.lane} x4" for horse in Horse},
    sample=run_race,
    wins=lane_matches,
    describe_outcome=lambda lane: f"Horse #{lane}",
    emoji="🏁",
    resolution_delay=3.0,
)
