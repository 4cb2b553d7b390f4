"""Game variants for Shadow Bets."""

from dataclasses import replace
from typing import Dict

from .base import GameMode, GameResult, GameVariantConfig
from .dice import DICE, DiceGuess
from .roulette import ROULETTE, RouletteGuess
from .cards import CARDS, CardSuit
from .coins import COINS, CoinSide
from .race import RACE, Horse

VARIANTS: Dict[GameMode, GameVariantConfig] = {
    GameMode.DICE: DICE,
    GameMode.ROULETTE: ROULETTE,
    GameMode.CARDS: CARDS,
    GameMode.COINS: COINS,
    GameMode.RACE: RACE,
}


def get_variant(mode, games_config=None) -> GameVariantConfig:
    """
    Look up a variant by GameMode or slug, applying per-variant overrides
    (stake, multiplier, resolution delay) from a GamesConfig section.
    """
    if not isinstance(mode, GameMode):
        mode = GameMode.from_slug(mode)

    variant = VARIANTS[mode]
    if games_config is None:
        return variant

    game_config = getattr(games_config, mode.slug)
    overrides = {
        "stake_amount": game_config.stake_amount,
        "payout_multiplier": game_config.payout_multiplier,
    }
    if game_config.resolution_delay is not None:
        overrides["resolution_delay"] = game_config.resolution_delay
    return replace(variant, **overrides)


def is_enabled(mode: GameMode, games_config=None) -> bool:
    if games_config is None:
        return True
    return getattr(games_config, mode.slug).enabled


__all__ = [
    "GameMode",
    "GameResult",
    "GameVariantConfig",
    "VARIANTS",
    "get_variant",
    "is_enabled",
    "DICE",
    "DiceGuess",
    "ROULETTE",
    "RouletteGuess",
    "CARDS",
    "CardSuit",
    "COINS",
    "CoinSide",
    "RACE",
    "Horse",
]
