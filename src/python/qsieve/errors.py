"""Exceptions raised by the quadratic sieve."""


class QuadraticSieveError(Exception):
    """Base class for every error raised by qsieve."""


class InvalidInputError(QuadraticSieveError, ValueError):
    """A public entry point was called with arguments outside its domain."""


class NoSolutionError(QuadraticSieveError):
    """A sieve attempt could not produce a nontrivial factor."""


class InvariantViolationError(QuadraticSieveError):
    """An algorithmic invariant broke while rebuilding a congruence of squares."""


class RetryLimitExceededError(QuadraticSieveError):
    """The driver raised the sieve bound past its ceiling without splitting a value.

    Args:
        value: The composite that could not be split.
        factors: Primes already confirmed before giving up.
    """

    def __init__(self, value, factors):
        super().__init__(
            f"Could not split {value}; confirmed factors so far: {sorted(factors)}"
        )
        self.value = value
        self.factors = sorted(factors)
