import random
from typing import Optional, Sequence


class RandomSource:
    """
    The single source of randomness for every game outcome and opponent pick.

    Backed by a private `random.Random`, so passing a seed gives a fully
    reproducible sequence of draws. Outcomes are not cryptographically strong;
    nothing of real value is at stake.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def random_int(self, min_val: int, max_val: int) -> int:
        """Returns a random integer in the range [min_val, max_val] (inclusive)."""
        if min_val > max_val:
            raise ValueError("min_val must be less than or equal to max_val")
        return self._random.randint(min_val, max_val)

    def random_bool(self) -> bool:
        """Returns True or False with equal probability."""
        return self._random.random() < 0.5

    def random_choice(self, options: Sequence):
        """Returns a random element from a non-empty sequence."""
        if not options:
            raise IndexError("Cannot choose from an empty sequence")
        return options[self.random_int(0, len(options) - 1)]


rng = RandomSource()
