"""Factor base construction."""

import logging

import numpy as np

from .residues import legendre

logger = logging.getLogger(__name__)


def sieve_primes(limit):
    """Return list of primes up to limit using Sieve of Eratosthenes.

    Args:
        limit: The inclusive upper bound.

    Returns:
        Ascending list of primes as Python ints.
    """
    if limit < 2:
        return []
    sieve_array = np.ones((limit + 1,), dtype=bool)
    sieve_array[0], sieve_array[1] = False, False
    for i in range(2, int(limit ** 0.5) + 1):
        if sieve_array[i]:
            sieve_array[i * i::i] = False
    return np.flatnonzero(sieve_array).tolist()


def build_factor_base(n, bound):
    """Build the factor base of primes p <= bound where (n/p) = 1.

    The sign column of the exponent matrix is not part of the returned list.

    Args:
        n: The integer to factorize.
        bound: The bound for the factor base.

    Returns:
        Ascending list of primes modulo which n is a quadratic residue.
    """
    factor_base = [p for p in sieve_primes(bound) if legendre(n, p) == 1]
    logger.debug("Factor base for n = %d, bound %d: %d primes", n, bound, len(factor_base))
    return factor_base
