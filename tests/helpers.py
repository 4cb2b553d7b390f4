from collections import deque

from shadowbets.core.rng import RandomSource


class ScriptedRNG(RandomSource):
    """
    Deterministic draws for tests.

    `ints` are returned in order by random_int. `choices` are returned by
    random_choice only when the next scripted value is one of the options,
    so opponent-name picks fall through to the first name without consuming
    the script. Once a queue is empty, the lowest option is returned.
    """

    def __init__(self, ints=(), choices=()):
        super().__init__(seed=0)
        self.ints = deque(ints)
        self.choices = deque(choices)

    def random_int(self, min_val, max_val):
        if self.ints:
            value = self.ints.popleft()
            assert min_val <= value <= max_val, f"{value} outside [{min_val}, {max_val}]"
            return value
        return min_val

    def random_choice(self, options):
        if self.choices and self.choices[0] in options:
            return self.choices.popleft()
        return options[0]


def play_round(engine, scheduler, guess):
    """Drive one engine through bet, opponent reveal, guess and settlement."""
    assert engine.place_bet()
    scheduler.run_pending()
    engine.make_guess(guess)
    scheduler.run_pending()
    return engine.session
