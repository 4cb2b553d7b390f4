"""
The wager engine: one session state machine shared by every game variant.

    idle -> staked -> awaiting_opponent -> awaiting_resolution -> settled
      ^                                                              |
      +--------------------------- new_round ------------------------+

place_bet, make_guess and new_round are called by the player. The opponent
reveal and the settlement are continuations queued on the scheduler; they
are public so a caller (or a test) can also drive them directly, and each
one does nothing when the session is not in its phase. That is what makes
settlement happen exactly once per round.

The opponent is decoration. Its guess is drawn and shown, but the result
depends only on the player's guess and the drawn outcome.

A session that is abandoned after staking keeps nothing: the stake was
already debited and no history record is written. The forfeit is logged
as a warning.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from shadowbets.core.exceptions import InvalidPhaseTransition
from shadowbets.core.games.base import GameResult, GameVariantConfig
from shadowbets.core.history import GameRecord, HistoryLog
from shadowbets.core.logger import get_logger
from shadowbets.core.rng import RandomSource
from shadowbets.core.scheduler import Scheduler
from shadowbets.core.wallet import WalletLedger

logger = get_logger("engine")

DEFAULT_BOT_NAMES = ("Alex_777", "CryptoCat", "NeonGhost")
DEFAULT_TYPING_DELAY = 1.8


class SessionPhase(str, Enum):
    IDLE = "idle"
    STAKED = "staked"
    AWAITING_OPPONENT = "awaiting_opponent"
    AWAITING_RESOLUTION = "awaiting_resolution"
    SETTLED = "settled"


class SessionResult(str, Enum):
    NONE = "none"
    WIN = "win"
    LOSS = "loss"


@dataclass
class WagerSession:
    pot: float = 0.0
    player_guess: Optional[Enum] = None
    opponent_guess: Optional[Enum] = None
    opponent_name: Optional[str] = None
    opponent_message: str = ""
    opponent_typing: bool = False
    outcome: Any = None
    result: SessionResult = SessionResult.NONE
    payout: float = 0.0
    phase: SessionPhase = SessionPhase.IDLE


class WagerEngine:
    def __init__(
        self,
        variant: GameVariantConfig,
        wallet: WalletLedger,
        history: HistoryLog,
        scheduler: Scheduler,
        rng: RandomSource,
        bot_names: Sequence[str] = DEFAULT_BOT_NAMES,
        typing_delay: float = DEFAULT_TYPING_DELAY,
    ):
        if not bot_names:
            raise ValueError("At least one opponent name is required")
        self.variant = variant
        self.wallet = wallet
        self.history = history
        self.scheduler = scheduler
        self.rng = rng
        self.bot_names = tuple(bot_names)
        self.typing_delay = typing_delay
        self.session = WagerSession()
        self._pending_job: Optional[str] = None

    @property
    def phase(self) -> SessionPhase:
        return self.session.phase

    # ==================== Player operations ====================

    def place_bet(self) -> bool:
        """
        Stake the variant's fixed amount and start the opponent's turn.

        Returns False, with nothing changed, when the balance cannot cover
        the stake.
        """
        self._require("place bet", (SessionPhase.IDLE,))

        stake = self.variant.stake_amount
        if not self.wallet.try_debit(stake):
            logger.info(
                f"{self.variant.name}: bet of {stake} refused, balance {self.wallet.balance}"
            )
            return False

        self.session.pot = stake
        self.session.phase = SessionPhase.STAKED
        self.session.opponent_typing = True
        self.session.opponent_message = f"{self._pick_bot()} is typing..."
        logger.info(f"{self.variant.name}: bet placed, pot {stake}")

        self._pending_job = self.scheduler.call_later(self.typing_delay, self.reveal_opponent)
        return True

    def make_guess(self, guess) -> Any:
        """Record the player's guess and draw the outcome. Settlement follows later."""
        self._require("make guess", (SessionPhase.AWAITING_OPPONENT,))

        player_guess = self.variant.parse_guess(guess)
        self.session.player_guess = player_guess
        self.session.outcome = self.variant.sample(self.rng)
        self.session.phase = SessionPhase.AWAITING_RESOLUTION

        self._pending_job = self.scheduler.call_later(
            self.variant.resolution_delay, self.settle
        )
        return self.session.outcome

    def new_round(self):
        self._require("start a new round", (SessionPhase.IDLE, SessionPhase.SETTLED))
        self._cancel_pending()
        self.session = WagerSession()

    # ==================== Scheduled continuations ====================

    def reveal_opponent(self) -> bool:
        if self.session.phase != SessionPhase.STAKED:
            logger.debug(f"{self.variant.name}: opponent reveal skipped in {self.phase.value}")
            return False

        self._pending_job = None
        guess = self.rng.random_choice(self.variant.guesses)
        name = self._pick_bot()
        self.session.opponent_guess = guess
        self.session.opponent_name = name
        self.session.opponent_typing = False
        self.session.opponent_message = (
            f"{name} bets on {self.variant.label(guess)}! {self.variant.emoji}"
        )
        self.session.phase = SessionPhase.AWAITING_OPPONENT
        return True

    def settle(self) -> bool:
        if self.session.phase != SessionPhase.AWAITING_RESOLUTION:
            logger.debug(f"{self.variant.name}: settlement skipped in {self.phase.value}")
            return False

        self._pending_job = None
        # Only the player's guess and the outcome decide the result
        won = self.variant.wins(self.session.player_guess, self.session.outcome)

        payout = 0.0
        if won:
            payout = round(self.session.pot * self.variant.payout_multiplier, 2)
            self.wallet.credit(payout)
            self.session.result = SessionResult.WIN
        else:
            self.session.result = SessionResult.LOSS
        self.session.payout = payout
        self.session.phase = SessionPhase.SETTLED

        self.history.append(
            GameRecord(
                game_mode=self.variant.mode,
                bet_amount=self.variant.stake_amount,
                pot_won=payout,
                result=GameResult.WIN if won else GameResult.LOSS,
            )
        )
        logger.info(
            f"{self.variant.name}: {self.variant.describe_outcome(self.session.outcome)}, "
            f"guess {self.session.player_guess.value} -> {self.session.result.value}, "
            f"payout {payout}",
            extra={"variant": self.variant.name, "result": self.session.result.value, "payout": payout},
        )
        return True

    # ==================== Lifecycle ====================

    def abandon(self):
        """The game screen was closed. Pending steps are dropped; nothing is credited."""
        forfeited = self.session.phase in (
            SessionPhase.STAKED,
            SessionPhase.AWAITING_OPPONENT,
            SessionPhase.AWAITING_RESOLUTION,
        )
        self._cancel_pending()
        if forfeited:
            logger.warning(
                f"{self.variant.name}: session abandoned in {self.phase.value}; "
                f"stake {self.session.pot} forfeited and not recorded in history"
            )
        self.session = WagerSession()

    def state(self) -> dict:
        s = self.session
        return {
            "variant": self.variant.name,
            "title": self.variant.mode.value,
            "phase": s.phase.value,
            "pot": s.pot,
            "stake_amount": self.variant.stake_amount,
            "payout_multiplier": self.variant.payout_multiplier,
            "player_guess": s.player_guess.value if s.player_guess is not None else None,
            "opponent_guess": s.opponent_guess.value if s.opponent_guess is not None else None,
            "opponent_name": s.opponent_name,
            "opponent_message": s.opponent_message,
            "opponent_typing": s.opponent_typing,
            "outcome": _jsonable(s.outcome),
            "outcome_label": (
                self.variant.describe_outcome(s.outcome) if s.outcome is not None else None
            ),
            "result": s.result.value,
            "payout": s.payout,
            "balance": self.wallet.balance,
            "can_bet": s.phase == SessionPhase.IDLE
            and self.wallet.can_afford(self.variant.stake_amount),
            "guesses": [
                {"token": g.value, "label": self.variant.label(g)}
                for g in self.variant.guesses
            ],
        }

    # ==================== Helpers ====================

    def _require(self, operation: str, allowed: Iterable[SessionPhase]):
        allowed = tuple(allowed)
        if self.session.phase not in allowed:
            logger.warning(
                f"{self.variant.name}: rejected '{operation}' in phase {self.phase.value}"
            )
            raise InvalidPhaseTransition(operation, self.session.phase, allowed)

    def _cancel_pending(self):
        if self._pending_job is not None:
            self.scheduler.cancel(self._pending_job)
            self._pending_job = None

    def _pick_bot(self) -> str:
        return self.rng.random_choice(self.bot_names)


def _jsonable(value):
    if isinstance(value, Enum):
        return value.value
    return value
