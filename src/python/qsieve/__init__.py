"""Factor 64-bit integers with the quadratic sieve."""

from .errors import (
    InvalidInputError,
    InvariantViolationError,
    NoSolutionError,
    QuadraticSieveError,
    RetryLimitExceededError,
)
from .modular import mod_multiply, mod_pow
from .primality import is_probable_prime
from .residues import legendre, tonelli_shanks
from .factor_base import build_factor_base, sieve_primes
from .sieve import Direction, Relation, SievePass, SmoothNumberSieve
from .linalg import NullSpaceVector, gaussian_elimination, relation_indices, transpose
from .congruence import solve_congruence
from .quadratic_sieve import FactorPair, QuadraticSieve, factorize, sieve_once
from .utils import format_factorization, generate_semiprime

__version__ = "0.1.0"
