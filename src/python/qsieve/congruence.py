"""Turn a dependent set of relations into a congruence of squares."""

import logging
from math import gcd, isqrt

from .errors import InvariantViolationError
from .factor_base import sieve_primes
from .modular import mod_multiply, mod_pow
from .primality import is_probable_prime

logger = logging.getLogger(__name__)

SEED_POOL_LIMIT = 500
POOL_ROUNDS = 5


def is_square(value):
    root = isqrt(value)
    return root * root == value


def _grow_pool(pool, residuals):
    """Add primes that show up as residuals or as gcds of two residuals."""
    for i, r in enumerate(residuals):
        if is_probable_prime(r, i, POOL_ROUNDS):
            pool.add(r)
        for j in range(i + 1, len(residuals)):
            g = gcd(r, residuals[j])
            if g != 1 and g not in pool and is_probable_prime(g, i * j, POOL_ROUNDS):
                pool.add(g)

    if not pool:
        pool.update(isqrt(r) for r in residuals if is_square(r))
    if not pool:
        pool.add(residuals[0])
    pool.discard(1)


def solve_congruence(n, relations, indices):
    """Build B^2 = A^2 (mod n) from the chosen relations and take a gcd.

    B is the product of the x values. A is the square root of the product of
    |x^2 - n|, assembled prime by prime from a pool that starts with the primes
    up to 500 and grows from gcds of what is left.

    Args:
        n: The composite being factored.
        relations: All relations of the current sieve attempt.
        indices: Indices into relations whose exponent vectors sum to zero mod 2.

    Returns:
        gcd(|B - A|, n). 1 or n means this combination does not split n.

    Raises:
        InvariantViolationError: A pooled prime occurs an odd number of times,
            so the chosen relations do not multiply to a square.
    """
    chosen = [relations[i] for i in indices]

    b = 1
    for relation in chosen:
        b = mod_multiply(relation.x, b, n)

    residuals = [abs(relation.value) for relation in chosen]
    residuals = [r for r in residuals if r != 1]

    a = 1
    pool = set(sieve_primes(SEED_POOL_LIMIT))
    while residuals:
        _grow_pool(pool, residuals)
        for p in sorted(pool):
            count = 0
            for k, r in enumerate(residuals):
                while r % p == 0:
                    r //= p
                    count += 1
                residuals[k] = r
            if count % 2 != 0:
                raise InvariantViolationError(
                    f"prime {p} appears {count} times across relations {list(indices)}"
                )
            a = mod_multiply(mod_pow(p, count // 2, n), a, n)
        residuals = [r for r in residuals if r != 1]
        pool.clear()

    factor = gcd(abs(b - a), n)
    logger.debug("Congruence over %d relations gave gcd %d", len(chosen), factor)
    return factor
