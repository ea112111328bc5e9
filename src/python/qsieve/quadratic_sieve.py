import heapq
import logging
import time
from dataclasses import dataclass
from math import gcd, isqrt

import numpy as np

from .congruence import solve_congruence
from .errors import InvalidInputError, NoSolutionError, RetryLimitExceededError
from .factor_base import build_factor_base
from .linalg import gaussian_elimination, relation_indices, transpose
from .primality import is_probable_prime
from .sieve import DEFAULT_BIT_TOLERANCE, DEFAULT_ROW_TOLERANCE, SmoothNumberSieve

DEFAULT_INITIAL_BOUND = 30
DEFAULT_MAX_BOUND = 1000
DEFAULT_ROUNDS = 10
RELATION_SURPLUS = 100
MAX_INPUT = 2 ** 63 - 1


@dataclass(frozen=True)
class FactorPair:
    """Two factors of n with factor * cofactor == n, both > 1."""
    factor: int
    cofactor: int


def integer_root(value, k):
    """Return floor(value ** (1/k)) computed exactly."""
    r = int(round(value ** (1.0 / k)))
    while r > 0 and r ** k > value:
        r -= 1
    while (r + 1) ** k <= value:
        r += 1
    return r


def perfect_power(value):
    """Find the smallest k >= 2 with value == r ** k.

    Returns:
        A tuple (r, k), or None when value is not a perfect power.
    """
    for k in range(2, value.bit_length()):
        r = integer_root(value, k)
        if r ** k == value:
            return r, k
    return None


class QuadraticSieve:
    def __init__(
        self,
        initial_bound: int = DEFAULT_INITIAL_BOUND,
        row_tolerance: int = DEFAULT_ROW_TOLERANCE,
        bit_tolerance: int = DEFAULT_BIT_TOLERANCE,
        max_bound: int = DEFAULT_MAX_BOUND,
        max_passes: int = None,
        rounds: int = DEFAULT_ROUNDS
    ):
        """
        Initialize the Quadratic Sieve with its hyperparameters.

        An attempt with bound b uses primes up to b * b for the factor base and
        windows of b * b positions. Failed attempts retry with b + 1.

        Args:
            initial_bound (int): First value of b (default: 30).
            row_tolerance (int): Relations collected beyond the factor base size (default: 10).
            bit_tolerance (int): Slack on the log2 smoothness threshold (default: 20).
            max_bound (int): Largest b tried before giving up on a value (default: 1000).
            max_passes (int): Optional cap on sieve passes per attempt (default: no cap).
            rounds (int): Miller-Rabin rounds for classifying queue entries (default: 10).
        """
        self.logger = logging.getLogger(__name__)

        self.initial_bound = initial_bound
        self.row_tolerance = row_tolerance
        self.bit_tolerance = bit_tolerance
        self.max_bound = max_bound
        self.max_passes = max_passes
        self.rounds = rounds

    def build_factor_base(self, n, bound):
        """Build factor base for Quadratic Sieve.

        Args:
            n: The integer to factorize.
            bound: The bound for the factor base.

        Returns:
            The constructed factor base.
        """
        fb = build_factor_base(n, bound)
        self.logger.info("Factor base size: %d", len(fb))
        return fb

    def sieve_relations(self, n, factor_base, interval):
        """Collect smooth relations, dropping the tail of a large overshoot.

        Args:
            n: The integer to factorize.
            factor_base: The factor base.
            interval: Width of one sieve window.

        Returns:
            List of relations.
        """
        sieve = SmoothNumberSieve(
            n,
            factor_base,
            interval,
            row_tolerance=self.row_tolerance,
            bit_tolerance=self.bit_tolerance,
            max_passes=self.max_passes
        )
        relations = sieve.find_relations()
        self.logger.info("Number of smooth relations: %d (%d passes)", len(relations), sieve.passes)

        if len(relations) > len(factor_base) + RELATION_SURPLUS:
            relations = relations[:len(factor_base) + self.row_tolerance]
        return relations

    @staticmethod
    def build_exponent_matrix(relations, factor_base):
        """Build the exponent parity matrix.

        Column 0 holds the sign, column k + 1 the k-th factor base prime.

        Args:
            relations: Verified relations.
            factor_base: The factor base.

        Returns:
            A NumPy int8 array with one row per relation.
        """
        column = {p: k + 1 for k, p in enumerate(factor_base)}
        column[-1] = 0
        matrix = np.zeros((len(relations), len(factor_base) + 1), dtype=np.int8)
        for i, relation in enumerate(relations):
            for fac in relation.factors:
                matrix[i, column[fac]] ^= 1
        return matrix

    def square_relation_factor(self, n, relations, matrix):
        """Split n directly from a relation whose value is already a square.

        Returns:
            A FactorPair, or None if no such relation gives a nontrivial gcd.
        """
        for i in np.flatnonzero(~matrix.any(axis=1)):
            relation = relations[i]
            factor = gcd(relation.x + isqrt(relation.value), n)
            if factor not in (1, n):
                self.logger.info("Square relation x = %d splits n directly", relation.x)
                return FactorPair(factor, n // factor)
        return None

    def solve_dependencies(self, matrix):
        """Solve for dependencies in GF(2).

        Args:
            matrix: The exponent matrix, one row per relation.

        Returns:
            The Elimination over the transposed matrix, whose columns are relations.
        """
        self.logger.info("Solving linear system in GF(2).")
        return gaussian_elimination(transpose(matrix))

    def extract_factors(self, n, relations, elimination):
        """Extract factors using dependency vectors.

        Args:
            n: The integer to factorize.
            relations: The relations the matrix was built from.
            elimination: Result of solve_dependencies.

        Returns:
            A FactorPair of two non-trivial factors of n.

        Raises:
            NoSolutionError: Every null space vector gave a trivial factor.
        """
        for vector in elimination.null_space:
            indices = relation_indices(vector, elimination)
            factor = solve_congruence(n, relations, indices)
            if factor not in (1, n):
                other_factor = n // factor
                self.logger.info("Found factors: %d, %d", factor, other_factor)
                return FactorPair(factor, other_factor)

        raise NoSolutionError(
            f"all {len(elimination.null_space)} null space vectors gave trivial factors of {n}"
        )

    def sieve_once(self, n, bound, interval):
        """Run one sieve attempt on an odd composite.

        Args:
            n: The composite to split.
            bound: Largest prime considered for the factor base.
            interval: Width of one sieve window.

        Returns:
            A FactorPair (factor, cofactor) with factor * cofactor == n, both > 1.

        Raises:
            InvalidInputError: n is below 4 or prime, or a parameter is too small.
            NoSolutionError: No relation combination split n in this attempt.
        """
        if n < 4:
            raise InvalidInputError(f"sieve needs a composite n >= 4, got {n}")
        if bound < 2 or interval < 2:
            raise InvalidInputError(f"bound and interval must be >= 2, got {bound}, {interval}")
        if is_probable_prime(n, n, self.rounds):
            raise InvalidInputError(f"{n} is prime")

        self.logger.info("Sieving n = %d with bound %d, interval %d", n, bound, interval)

        # Step 1: Build Factor Base
        step_start = time.time()
        factor_base = self.build_factor_base(n, bound)
        step_end = time.time()
        self.logger.info("Step 1 (Build Factor Base) took %.3f seconds", step_end - step_start)

        # Step 2: Sieve Phase
        step_start = time.time()
        relations = self.sieve_relations(n, factor_base, interval)
        step_end = time.time()
        self.logger.info("Step 2 (Sieve Interval) took %.3f seconds", step_end - step_start)

        # Step 3: Build Exponent Matrix
        step_start = time.time()
        matrix = self.build_exponent_matrix(relations, factor_base)
        pair = self.square_relation_factor(n, relations, matrix)
        step_end = time.time()
        self.logger.info("Step 3 (Build Exponent Matrix) took %.3f seconds", step_end - step_start)
        if pair is not None:
            return pair

        # Step 4: Solve for Dependencies
        step_start = time.time()
        elimination = self.solve_dependencies(matrix)
        step_end = time.time()
        self.logger.info("Step 4 (Solve Dependencies) took %.3f seconds", step_end - step_start)

        # Step 5: Extract Factors
        step_start = time.time()
        try:
            return self.extract_factors(n, relations, elimination)
        finally:
            step_end = time.time()
            self.logger.info("Step 5 (Extract Factors) took %.3f seconds", step_end - step_start)

    def split(self, n, confirmed=()):
        """Retry sieve_once with growing bounds until n splits.

        Args:
            n: An odd composite that is not a perfect power.
            confirmed: Primes found so far, reported if the ceiling is hit.

        Returns:
            A FactorPair for n.
        """
        b = self.initial_bound
        while b <= self.max_bound:
            try:
                return self.sieve_once(n, b * b, b * b)
            except NoSolutionError as e:
                self.logger.warning("Sieve attempt with b = %d failed (%s); retrying with b = %d", b, e, b + 1)
                b += 1
        raise RetryLimitExceededError(n, confirmed)

    def factorize(self, n):
        """Main factorization method using the Quadratic Sieve algorithm.

        Args:
            n: The integer to factorize, 2 <= n < 2**63.

        Returns:
            Ascending list of prime factors with multiplicity.
        """
        if n < 2 or n > MAX_INPUT:
            raise InvalidInputError(f"n must satisfy 2 <= n < 2**63, got {n}")

        overall_start = time.time()
        self.logger.info("========== Quadratic Sieve Start ==========")
        self.logger.info("Factoring N = %d", n)

        queue = [n]
        factors = []
        while queue:
            value = heapq.heappop(queue)

            if is_probable_prime(value, value, self.rounds):
                factors.append(value)
                continue

            power = perfect_power(value)
            if power is not None:
                root, k = power
                self.logger.info("%d is %d^%d", value, root, k)
                for _ in range(k):
                    heapq.heappush(queue, root)
                continue

            if value % 2 == 0:
                heapq.heappush(queue, 2)
                heapq.heappush(queue, value // 2)
                continue

            pair = self.split(value, factors)
            heapq.heappush(queue, pair.factor)
            heapq.heappush(queue, pair.cofactor)

        factors.sort()
        overall_end = time.time()
        self.logger.info("Factors of %d: %s", n, factors)
        self.logger.info("Total time for Quadratic Sieve: %.3f seconds", overall_end - overall_start)
        self.logger.info("========== Quadratic Sieve End ==========")
        return factors


def factorize(n):
    """Factor n with a default-configured QuadraticSieve."""
    return QuadraticSieve().factorize(n)


def sieve_once(n, bound, interval):
    """Run a single sieve attempt with a default-configured QuadraticSieve."""
    return QuadraticSieve().sieve_once(n, bound, interval)
