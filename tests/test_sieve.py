import unittest
from math import isqrt

from qsieve import (
    Direction,
    NoSolutionError,
    Relation,
    SmoothNumberSieve,
    build_factor_base,
)
from qsieve.sieve import factorise_fast


def product(values):
    result = 1
    for v in values:
        result *= v
    return result


class TestFactoriseFast(unittest.TestCase):

    def test_negative_smooth(self):
        self.assertEqual(factorise_fast(-12, [2, 3, 5]), ([-1, 2, 2, 3], 1))

    def test_leaves_cofactor(self):
        self.assertEqual(factorise_fast(14, [2, 3]), ([2], 7))

    def test_one(self):
        self.assertEqual(factorise_fast(1, [2, 3]), ([], 1))
        self.assertEqual(factorise_fast(-1, [2, 3]), ([-1], 1))


class TestSmoothNumberSieve(unittest.TestCase):
    N = 7387

    def make_sieve(self, n=N, bound=200, interval=50, **kwargs):
        return SmoothNumberSieve(n, build_factor_base(n, bound), interval, **kwargs)

    def assert_offsets_hit_roots(self, sieve):
        for direction, window in sieve.windows.items():
            for p, starts in zip(sieve.primes, window.offsets):
                for start in starts:
                    self.assertTrue(0 <= start < p)
                    x = window.position(start)
                    self.assertEqual((x * x - sieve.n) % p, 0, f"{direction.name} offset for {p}")

    def test_initial_offsets_hit_roots(self):
        self.assert_offsets_hit_roots(self.make_sieve())

    def test_offsets_carry_across_windows(self):
        sieve = self.make_sieve(n=1000000007 * 1000000009, bound=900, interval=37)
        for _ in range(5):
            sieve.sieve_pass(Direction.ABOVE)
            sieve.sieve_pass(Direction.BELOW)
            self.assert_offsets_hit_roots(sieve)
        self.assertEqual(sieve.windows[Direction.ABOVE].distance, 5 * 37)

    def test_skips_two(self):
        sieve = self.make_sieve()
        self.assertNotIn(2, sieve.primes)
        self.assertIn(2, sieve.factor_base)

    def test_relations_are_exactly_smooth(self):
        sieve = self.make_sieve(row_tolerance=5)
        relations = sieve.find_relations()
        self.assertGreaterEqual(len(relations), len(sieve.factor_base) + 5)
        allowed = set(sieve.factor_base) | {-1}
        for rel in relations:
            self.assertEqual(rel.value, rel.x * rel.x - self.N)
            self.assertEqual(product(rel.factors), rel.value)
            self.assertTrue(set(rel.factors) <= allowed)
            self.assertEqual(rel.value < 0, -1 in rel.factors)
        xs = [rel.x for rel in relations]
        self.assertEqual(len(xs), len(set(xs)))

    def test_directions(self):
        sieve = self.make_sieve()
        root = isqrt(self.N)
        below = sieve.sieve_pass(Direction.BELOW)
        above = sieve.sieve_pass(Direction.ABOVE)
        self.assertTrue(all(0 <= rel.x < root for rel in below.relations))
        self.assertTrue(all(root <= rel.x < root + 50 for rel in above.relations))
        self.assertEqual(below.distance, 0)
        self.assertEqual(above.direction, Direction.ABOVE)

    def test_below_window_exhausts(self):
        sieve = self.make_sieve(interval=100)
        first = sieve.sieve_pass(Direction.BELOW)
        self.assertGreater(first.candidates, 0)
        second = sieve.sieve_pass(Direction.BELOW)
        self.assertEqual(second.candidates, 0)
        self.assertEqual(second.relations, ())

    def test_finds_square_next_to_root(self):
        n = 1000000007 * 1000000009
        sieve = self.make_sieve(n=n, bound=900, interval=900)
        result = sieve.sieve_pass(Direction.ABOVE)
        self.assertIn(Relation(1000000008, 1, ()), result.relations)

    def test_threshold(self):
        sieve = self.make_sieve()
        self.assertEqual(sieve.threshold(1), -20)
        self.assertEqual(sieve.threshold(-1024), -10)
        self.assertEqual(sieve.threshold(2 ** 40 + 5), 20)

    def test_max_passes(self):
        sieve = self.make_sieve(n=1000000007 * 1000000009, bound=50, interval=100,
                                row_tolerance=1000, max_passes=1)
        with self.assertRaises(NoSolutionError):
            sieve.find_relations()
        self.assertEqual(sieve.passes, 1)


if __name__ == "__main__":
    unittest.main()
