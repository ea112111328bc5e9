import unittest

from qsieve import InvalidInputError, is_probable_prime, sieve_primes


class TestMillerRabin(unittest.TestCase):
    """Test the seeded Miller-Rabin primality test"""

    def test_no_false_negatives_below_10000(self):
        """Every prime below 10,000 passes for several seeds"""
        for p in sieve_primes(9999):
            for seed in range(5):
                self.assertTrue(is_probable_prime(p, seed, 5), f"{p} should be prime (seed {seed})")

    def test_small_odd_composites(self):
        primes = set(sieve_primes(2000))
        for c in range(9, 2000, 2):
            if c not in primes:
                self.assertFalse(is_probable_prime(c, c, 10), f"{c} should be composite")

    def test_strong_pseudoprimes(self):
        """Strong pseudoprimes to small fixed bases are still caught"""
        pseudoprimes = [2047, 1373653, 25326001, 3215031751, 2152302898747, 3474749660383]
        for n in pseudoprimes:
            for seed in range(3):
                self.assertFalse(is_probable_prime(n, seed, 5), f"{n} should be composite")

    def test_carmichael_numbers(self):
        for c in [561, 1105, 1729, 2465, 2821, 6601, 8911]:
            self.assertFalse(is_probable_prime(c, 0, 5), f"{c} is a Carmichael number")

    def test_edge_cases(self):
        self.assertFalse(is_probable_prime(1, 0, 5))
        self.assertTrue(is_probable_prime(2, 0, 5))
        self.assertTrue(is_probable_prime(3, 0, 5))
        self.assertFalse(is_probable_prime(4, 0, 5))
        self.assertFalse(is_probable_prime(2 ** 62, 0, 5))

    def test_large_primes(self):
        for p in [1000000007, 1000000009, 2147483647, 2 ** 61 - 1, 9223372036854775783]:
            self.assertTrue(is_probable_prime(p, p, 10), f"{p} should be prime")

    def test_large_semiprime(self):
        self.assertFalse(is_probable_prime(1000000007 * 1000000009, 1, 10))

    def test_same_seed_same_answer(self):
        n = 3215031751
        results = {is_probable_prime(n, 42, 1) for _ in range(5)}
        self.assertEqual(len(results), 1)

    def test_rejects_non_positive(self):
        with self.assertRaises(InvalidInputError):
            is_probable_prime(0, 0, 5)
        with self.assertRaises(InvalidInputError):
            is_probable_prime(-7, 0, 5)


if __name__ == "__main__":
    unittest.main()
