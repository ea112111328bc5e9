"""Linear algebra over GF(2) for the exponent parity matrix."""

import logging
from dataclasses import dataclass

import numpy as np

from .errors import NoSolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NullSpaceVector:
    """A free column and its row of the transposed reduced matrix."""
    column: int
    pattern: np.ndarray


@dataclass(frozen=True)
class Elimination:
    """Result of gaussian_elimination.

    Attributes:
        null_space: One NullSpaceVector per free column, in column order.
        marks: Boolean flag per column, True where a pivot was placed.
        reduced: The reduced matrix, transposed.
    """
    null_space: list
    marks: np.ndarray
    reduced: np.ndarray


def transpose(matrix):
    """Swap rows and columns, returning a fresh contiguous array."""
    return np.ascontiguousarray(np.asarray(matrix).T)


def gaussian_elimination(matrix):
    """Perform Gaussian elimination on a binary matrix over GF(2).

    Rows are processed in order. Each row pivots on its first 1 in a column
    that is not yet marked, and is then added to every other row holding a 1 in
    that column. Columns that never receive a pivot are free; each one yields a
    null space vector.

    Args:
        matrix: A 2-D integer NumPy array of 0/1 entries, reduced in place.

    Returns:
        An Elimination with the null space vectors, pivot marks and the
        transposed reduced matrix.

    Raises:
        NoSolutionError: Every column holds a pivot.
    """
    x = matrix
    n, m = x.shape
    marks = np.zeros(m, dtype=bool)

    for i in range(n):
        row = x[i]
        ones = np.flatnonzero((row == 1) & ~marks)
        if ones.size == 0:
            continue

        pivot = ones[0]
        marks[pivot] = True

        mask = x[:, pivot] == 1
        mask[i] = False

        x[mask] ^= row

    reduced = transpose(x)
    free = np.flatnonzero(~marks)
    if free.size == 0:
        raise NoSolutionError(f"exponent matrix of shape {n}x{m} has full column rank")

    logger.debug("Elimination left %d free columns out of %d", free.size, m)
    null_space = [NullSpaceVector(int(col), reduced[col]) for col in free]
    return Elimination(null_space, marks, reduced)


def relation_indices(vector, elimination):
    """Expand a null space vector into the columns whose sum is zero mod 2.

    A pivot column is selected when its single remaining 1 lies in a row where
    the free column also holds a 1; the free column itself is always selected.

    Args:
        vector: A NullSpaceVector from elimination.null_space.
        elimination: The Elimination that produced it.

    Returns:
        Ascending list of column indices of the original matrix.
    """
    ones = np.flatnonzero(vector.pattern)
    matching = elimination.reduced[:, ones].any(axis=1)
    selected = elimination.marks & matching
    selected[vector.column] = True
    return np.flatnonzero(selected).tolist()
