"""Modular arithmetic that never forms a product wider than the modulus allows."""

from .errors import InvalidInputError


def mod_multiply(x, y, z):
    """Compute (x * y) mod z by binary add-and-double.

    Both operands are reduced mod z first, so every intermediate value stays
    below 2 * z.

    Args:
        x: First factor.
        y: Second factor.
        z: The modulus, at least 1.

    Returns:
        The product reduced into [0, z).
    """
    if z < 1:
        raise InvalidInputError(f"modulus must be positive, got {z}")
    x %= z
    y %= z
    result = 0
    while y > 0:
        if y & 1:
            result = (result + x) % z
        x = (x * 2) % z
        y >>= 1
    return result


def mod_pow(x, y, z):
    """Compute x ** y mod z by repeated squaring.

    Args:
        x: Non-negative base.
        y: Non-negative exponent.
        z: The modulus, at least 2.

    Returns:
        x ** y reduced mod z (1 when y is 0).
    """
    if x < 0 or y < 0 or z < 2:
        raise InvalidInputError(f"mod_pow needs x >= 0, y >= 0, z >= 2; got ({x}, {y}, {z})")
    if x >= z:
        x %= z
    if y == 0:
        return 1
    if y == 1:
        return x
    lower = mod_pow(x, y // 2, z)
    return mod_multiply(x if y % 2 else 1, mod_multiply(lower, lower, z), z)
