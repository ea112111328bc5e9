"""Incremental logarithmic sieve for smooth values of x^2 - n.

Two windows walk away from isqrt(n), one towards zero and one upwards. Each
pass adds round(log2(p)) to every slot hit by a root of x^2 = n (mod p), flags
slots whose weight comes close to log2|x^2 - n|, and then trial-divides those
candidates exactly. Root offsets carry over from one window to the next, so a
pass only ever touches fresh positions.
"""

import enum
import logging
from dataclasses import dataclass
from math import isqrt, log2

import numpy as np

from .errors import InvalidInputError, NoSolutionError
from .residues import tonelli_shanks

logger = logging.getLogger(__name__)

DEFAULT_ROW_TOLERANCE = 10
DEFAULT_BIT_TOLERANCE = 20


class Direction(enum.Enum):
    BELOW = -1
    ABOVE = 1


@dataclass(frozen=True)
class Relation:
    """A verified smooth value.

    Attributes:
        x: The sieved integer.
        value: x * x - n, possibly negative.
        factors: Signed factorization of value: -1 first when value < 0, then
            factor base primes in ascending order with multiplicity.
    """
    x: int
    value: int
    factors: tuple


@dataclass(frozen=True)
class SievePass:
    """Outcome of sieving one window in one direction."""
    direction: Direction
    distance: int
    candidates: int
    relations: tuple


@dataclass
class SieveWindow:
    """Per-direction state: origin, distance already covered and next root hits.

    Position i of the current window is x = origin + sign * (distance + i).
    offsets[k] holds the next hit (relative to the window start) for both roots
    of the k-th sieved prime.
    """
    direction: Direction
    origin: int
    distance: int
    offsets: list

    @property
    def sign(self):
        return self.direction.value

    def position(self, i):
        return self.origin + self.sign * (self.distance + i)

    @property
    def exhausted(self):
        return self.position(0) < 0


def factorise_fast(value, factor_base):
    """Factor a nonzero number over the given factor base.

    Args:
        value: The integer to factorize.
        factor_base: Ascending primes to divide by.

    Returns:
        A tuple (factors, cofactor). factors starts with -1 when value is
        negative; cofactor is what is left after removing every factor base
        prime, so value is smooth iff cofactor == 1.
    """
    factors = []
    if value < 0:
        factors.append(-1)
        value = -value
    for p in factor_base:
        while value % p == 0:
            factors.append(p)
            value //= p
    return factors, value


class SmoothNumberSieve:
    def __init__(
        self,
        n: int,
        factor_base: list,
        interval: int,
        row_tolerance: int = DEFAULT_ROW_TOLERANCE,
        bit_tolerance: int = DEFAULT_BIT_TOLERANCE,
        max_passes: int = None
    ):
        """
        Prepare root offsets for both directions around isqrt(n).

        Args:
            n (int): The odd composite being factored.
            factor_base (list): Ascending primes p with (n/p) = 1.
            interval (int): Width of one sieve window.
            row_tolerance (int): Relations to collect beyond the factor base size.
            bit_tolerance (int): Slack subtracted from log2|x^2 - n| before
                comparing it to the accumulated weight.
            max_passes (int): Optional cap on sieve passes (None for no cap).
        """
        if interval < 1:
            raise InvalidInputError(f"sieve interval must be positive, got {interval}")
        self.n = n
        self.factor_base = list(factor_base)
        self.interval = interval
        self.row_tolerance = row_tolerance
        self.bit_tolerance = bit_tolerance
        self.max_passes = max_passes
        self.root = isqrt(n)

        # 2 only takes part in trial division; its roots coincide.
        self.primes = [p for p in self.factor_base if p > 2]
        self.weights = [round(log2(p)) for p in self.primes]
        self.roots = [tonelli_shanks(n, p) for p in self.primes]

        self.windows = {
            Direction.BELOW: self._make_window(Direction.BELOW, self.root - 1),
            Direction.ABOVE: self._make_window(Direction.ABOVE, self.root),
        }
        self.passes = 0

    def _make_window(self, direction, origin):
        sign = direction.value
        offsets = []
        for p, r in zip(self.primes, self.roots):
            # origin + sign * g = t (mod p)  <=>  g = sign * (t - origin) (mod p)
            offsets.append([(sign * (r - origin)) % p, (sign * (p - r - origin)) % p])
        return SieveWindow(direction, origin, 0, offsets)

    def _accumulate(self, window):
        """Fill the bit-weight array for the current window and carry the offsets."""
        bits = np.zeros(self.interval, dtype=np.int64)
        for k, p in enumerate(self.primes):
            starts = window.offsets[k]
            for j in (0, 1):
                start = starts[j]
                if start < self.interval:
                    bits[start::p] += self.weights[k]
                    start += ((self.interval - 1 - start) // p + 1) * p
                starts[j] = start - self.interval
        return bits

    def threshold(self, value):
        """floor(log2|value|) minus the bit tolerance."""
        return abs(value).bit_length() - 1 - self.bit_tolerance

    def find_candidates(self, window, bits):
        """Yield (x, x^2 - n) for every slot whose weight clears the threshold."""
        for i in range(self.interval):
            x = window.position(i)
            if x < 0:
                break
            value = x * x - self.n
            if value == 0:
                continue
            if bits[i] >= self.threshold(value):
                yield x, value

    def sieve_pass(self, direction):
        """Sieve the next window in one direction.

        Args:
            direction: Direction.BELOW or Direction.ABOVE.

        Returns:
            A SievePass with the verified relations of that window.
        """
        window = self.windows[direction]
        distance = window.distance
        if window.exhausted:
            return SievePass(direction, distance, 0, ())

        bits = self._accumulate(window)
        candidates = 0
        relations = []
        for x, value in self.find_candidates(window, bits):
            candidates += 1
            factors, cofactor = factorise_fast(value, self.factor_base)
            if cofactor == 1:
                relations.append(Relation(x, value, tuple(factors)))

        window.distance += self.interval
        logger.debug(
            "%s window at distance %d: %d candidates, %d relations",
            direction.name, distance, candidates, len(relations)
        )
        return SievePass(direction, distance, candidates, tuple(relations))

    def find_relations(self):
        """Sieve widening windows until enough relations are collected.

        Returns:
            A list of at least len(factor_base) + row_tolerance relations.
        """
        target = len(self.factor_base) + self.row_tolerance
        relations = []
        while len(relations) < target:
            if self.max_passes is not None and self.passes >= self.max_passes:
                raise NoSolutionError(
                    f"only {len(relations)} of {target} relations after {self.passes} passes"
                )
            for direction in (Direction.BELOW, Direction.ABOVE):
                relations.extend(self.sieve_pass(direction).relations)
            self.passes += 1

        logger.debug("Collected %d relations in %d passes", len(relations), self.passes)
        return relations
