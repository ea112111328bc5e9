"""Helpers for ad hoc runs: semiprime generation and result formatting."""

import random

from .errors import InvalidInputError
from .primality import is_probable_prime
from .quadratic_sieve import factorize

SEMIPRIME_ROUNDS = 5


def generate_semiprime(origin, bound, seed):
    """Multiply the first two probable primes drawn from [origin, bound).

    Draws come from random.Random(seed), so the result is reproducible. The two
    primes may coincide.
    """
    if origin < 2 or bound <= origin:
        raise InvalidInputError(f"need 2 <= origin < bound, got [{origin}, {bound})")
    rng = random.Random(seed)
    primes = []
    while len(primes) < 2:
        candidate = rng.randrange(origin, bound)
        if is_probable_prime(candidate, seed, SEMIPRIME_ROUNDS):
            primes.append(candidate)
    return primes[0] * primes[1]


def format_factorization(n, factors=None):
    """Render "n: [f1, f2, ...]", factoring n when factors are not given."""
    if factors is None:
        factors = factorize(n)
    return f"{n}: {list(factors)}"
