"""Quadratic residues modulo an odd prime."""

from .errors import InvalidInputError
from .modular import mod_multiply, mod_pow


def legendre(a, p):
    """Compute the Legendre symbol (a/p) by Euler's criterion.

    Returns:
        1 if a is a nonzero residue, p - 1 if it is a non-residue, 0 if p | a.
    """
    return mod_pow(a % p, (p - 1) // 2, p)


def tonelli_shanks(n, p):
    """Solve r^2 = n (mod p) for an odd prime p.

    Args:
        n: A quadratic residue mod p.
        p: The prime modulus.

    Returns:
        One square root r; the other one is p - r.
    """
    if legendre(n, p) != 1:
        raise InvalidInputError(f"{n} is not a quadratic residue mod {p}")

    q = p - 1
    s = 0
    while q % 2 == 0:
        q //= 2
        s += 1

    if s == 1:
        return mod_pow(n, (p + 1) // 4, p)

    z = 2
    while legendre(z, p) != p - 1:
        z += 1

    c = mod_pow(z, q, p)
    r = mod_pow(n, (q + 1) // 2, p)
    t = mod_pow(n, q, p)
    m = s
    while t % p != 1:
        # smallest i with t^(2^i) = 1
        i = 1
        t2 = mod_multiply(t, t, p)
        while t2 != 1:
            t2 = mod_multiply(t2, t2, p)
            i += 1
        b = mod_pow(c, 1 << (m - i - 1), p)
        r = mod_multiply(r, b, p)
        c = mod_multiply(b, b, p)
        t = mod_multiply(t, c, p)
        m = i
    return r
