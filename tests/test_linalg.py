import unittest

import numpy as np

from qsieve import NoSolutionError, gaussian_elimination, relation_indices, transpose


class TestTranspose(unittest.TestCase):

    def test_swaps_rows_and_columns(self):
        m = np.array([[1, 0, 1], [0, 1, 1]], dtype=np.int8)
        t = transpose(m)
        self.assertEqual(t.shape, (3, 2))
        self.assertEqual(t.tolist(), [[1, 0], [0, 1], [1, 1]])
        t[0, 0] = 0
        self.assertEqual(m[0, 0], 1)


class TestGaussianElimination(unittest.TestCase):

    def test_null_vectors_annihilate_matrix(self):
        rng = np.random.default_rng(7)
        for rows, cols in ((8, 12), (20, 25), (5, 30), (30, 31)):
            m = rng.integers(0, 2, size=(rows, cols), dtype=np.int8)
            original = m.copy()
            elimination = gaussian_elimination(m)
            self.assertTrue(elimination.null_space)
            for vector in elimination.null_space:
                self.assertFalse(elimination.marks[vector.column])
                indices = relation_indices(vector, elimination)
                self.assertIn(vector.column, indices)
                combined = original[:, indices].sum(axis=1) % 2
                self.assertFalse(combined.any())

    def test_reduces_in_place(self):
        rng = np.random.default_rng(11)
        m = rng.integers(0, 2, size=(6, 10), dtype=np.int8)
        elimination = gaussian_elimination(m)
        for col in np.flatnonzero(elimination.marks):
            self.assertEqual(int(m[:, col].sum()), 1)
        self.assertTrue(np.array_equal(elimination.reduced, m.T))

    def test_full_rank_raises(self):
        with self.assertRaises(NoSolutionError):
            gaussian_elimination(np.eye(4, dtype=np.int8))

    def test_zero_column_is_its_own_vector(self):
        m = np.array([[1, 0, 1], [0, 0, 1]], dtype=np.int8)
        elimination = gaussian_elimination(m)
        self.assertEqual([v.column for v in elimination.null_space], [1])
        self.assertEqual(relation_indices(elimination.null_space[0], elimination), [1])

    def test_dependent_columns(self):
        # column 2 = column 0 + column 1
        m = np.array([[1, 0, 1], [0, 1, 1], [1, 1, 0]], dtype=np.int8)
        elimination = gaussian_elimination(m)
        vector = elimination.null_space[0]
        self.assertEqual(relation_indices(vector, elimination), [0, 1, 2])


if __name__ == "__main__":
    unittest.main()
