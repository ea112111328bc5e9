import argparse
import logging
import sys

from .errors import QuadraticSieveError
from .quadratic_sieve import QuadraticSieve
from .utils import format_factorization, generate_semiprime

DEMO_NUMBER = 7387


def build_parser():
    parser = argparse.ArgumentParser(
        prog="qsieve",
        description="Factor integers below 2**63 with the quadratic sieve."
    )
    parser.add_argument("numbers", nargs="*", type=int,
                        help=f"Integers to factor (default: {DEMO_NUMBER}).")
    parser.add_argument("-s", "--semiprime", nargs=2, type=int, metavar=("ORIGIN", "BOUND"),
                        help="Generate a semiprime from two primes in [ORIGIN, BOUND) and factor it.")
    parser.add_argument("--seed", type=int, default=0,
                        help="Seed for --semiprime.")
    parser.add_argument("-b", "--initial-bound", type=int, default=None,
                        help="First sieve bound b; factor base primes go up to b*b.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log sieve progress and timings.")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        format='[%(levelname)s] %(asctime)s - %(message)s',
        level=logging.INFO if args.verbose else logging.WARNING
    )

    qs = QuadraticSieve() if args.initial_bound is None else QuadraticSieve(initial_bound=args.initial_bound)

    numbers = list(args.numbers)
    if args.semiprime:
        try:
            numbers.append(generate_semiprime(args.semiprime[0], args.semiprime[1], args.seed))
        except QuadraticSieveError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
    if not numbers:
        numbers = [DEMO_NUMBER]

    status = 0
    for n in numbers:
        try:
            print(format_factorization(n, qs.factorize(n)))
        except QuadraticSieveError as e:
            print(f"Error: {e}", file=sys.stderr)
            status = 1
    return status
