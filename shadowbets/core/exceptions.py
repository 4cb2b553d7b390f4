class ShadowBetsError(Exception):
    """Base class for errors raised by the wager core."""


class InsufficientFunds(ShadowBetsError):
    def __init__(self, balance: float, amount: float):
        self.balance = balance
        self.amount = amount
        super().__init__(f"Insufficient balance: {balance} < {amount}")


class InvalidPhaseTransition(ShadowBetsError):
    def __init__(self, operation: str, phase, expected):
        self.operation = operation
        self.phase = phase
        self.expected = tuple(expected)
        allowed = ", ".join(p.value for p in self.expected)
        super().__init__(
            f"Cannot {operation} while session is '{phase.value}' (allowed: {allowed})"
        )


class InvalidGuess(ShadowBetsError, ValueError):
    def __init__(self, variant: str, value):
        self.variant = variant
        self.value = value
        super().__init__(f"Invalid guess for {variant}: {value!r}")


class PersistenceFailure(ShadowBetsError):
    """Raised by blob stores; the persistence gateway degrades to memory-only."""
