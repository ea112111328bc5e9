"""Miller-Rabin probable-prime test."""

import random

from .errors import InvalidInputError
from .modular import mod_multiply, mod_pow


def is_probable_prime(n, seed, rounds):
    """Run a seeded Miller-Rabin test on n.

    Witnesses are drawn from random.Random(seed), so the same (n, seed, rounds)
    always gives the same answer. A prime is never reported composite; a
    composite slips through with probability at most 4 ** -rounds.

    Args:
        n: The integer to test, at least 1.
        seed: Seed for the witness generator.
        rounds: Number of witnesses to try.

    Returns:
        True if n is probably prime, False if it is certainly composite.
    """
    if n < 1:
        raise InvalidInputError(f"primality is only defined for n >= 1, got {n}")
    if n % 2 == 0:
        return n == 2
    if n == 1:
        return False

    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1

    rng = random.Random(seed)
    for _ in range(rounds):
        a = rng.randrange(2, n)
        x = mod_pow(a, d, n)
        if x == 1:
            continue
        for _ in range(s):
            if x == n - 1:
                break
            x = mod_multiply(x, x, n)
        else:
            return False
    return True
