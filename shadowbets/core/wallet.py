"""
The player's wallet: one balance shared by every game screen.
"""

from typing import Callable, Optional

from shadowbets.core.exceptions import InsufficientFunds
from shadowbets.core.logger import get_logger

logger = get_logger("wallet")


class WalletLedger:
    """
    Holds the balance and enforces that it never goes negative.

    `on_change` is called after every successful mutation so the owner can
    persist a fresh snapshot before the call returns.
    """

    def __init__(self, balance: float = 1000.0, on_change: Optional[Callable[[], None]] = None):
        if balance < 0:
            raise ValueError("Balance cannot be negative")
        self._balance = float(balance)
        self._on_change = on_change

    @property
    def balance(self) -> float:
        return self._balance

    def can_afford(self, amount: float) -> bool:
        return self._balance >= amount

    def debit(self, amount: float) -> float:
        """Remove `amount` from the balance or raise InsufficientFunds."""
        self._check_amount(amount)
        if self._balance < amount:
            raise InsufficientFunds(self._balance, amount)
        self._balance = round(self._balance - amount, 2)
        self._changed()
        return self._balance

    def try_debit(self, amount: float) -> bool:
        try:
            self.debit(amount)
        except InsufficientFunds as e:
            logger.info(f"Debit refused: {e}")
            return False
        return True

    def credit(self, amount: float) -> float:
        self._check_amount(amount)
        self._balance = round(self._balance + amount, 2)
        self._changed()
        return self._balance

    def reset(self, to_amount: float) -> float:
        self._check_amount(to_amount)
        self._balance = float(to_amount)
        logger.info(f"Balance reset to {to_amount}")
        self._changed()
        return self._balance

    @staticmethod
    def _check_amount(amount: float):
        if amount < 0:
            raise ValueError(f"Amount must be non-negative, got {amount}")

    def _changed(self):
        if self._on_change is not None:
            self._on_change()
