import random
import threading

import pytest
import sympy

from primegen.miller_rabin import is_probable_prime, miller_rabin, split_power_of_two
from primegen.verdict import Verdict
from conftest import CountingRng

PRIMES = [3, 1231, 7919, 104729, 2 ** 61 - 1, 2 ** 89 - 1, int(sympy.nextprime(10 ** 40))]
CARMICHAEL = [561, 1105, 1729, 2465, 2821, 6601, 8911, 10585, 15841, 29341,
              41041, 46657, 52633, 62745, 63973, 75361]

def test_split_power_of_two():
    assert split_power_of_two(96) == (3, 5)
    assert split_power_of_two(7) == (7, 0)
    assert split_power_of_two(2 ** 10) == (1, 10)

@pytest.mark.parametrize("p", PRIMES)
def test_primes_always_accepted(p):
    rng = random.Random(p)
    for _ in range(10):
        assert miller_rabin(p, 20, rng=rng) is Verdict.PROBABLY_PRIME

@pytest.mark.parametrize("n", CARMICHAEL)
def test_carmichael_numbers_rejected(n):
    assert miller_rabin(n, 20) is Verdict.COMPOSITE

def test_single_round_rejects_carmichael_most_of_the_time():
    rng = random.Random(7)
    rejected = sum(miller_rabin(561, 1, rng=rng) is Verdict.COMPOSITE for _ in range(400))
    assert rejected >= 300  # at least 3/4 of runs per round

def test_strong_pseudoprime_base_two_rejected():
    # 2047 = 23 * 89 fools base 2 only
    assert miller_rabin(2047, 20) is Verdict.COMPOSITE

@pytest.mark.parametrize("n", [-7, 0, 1, 4, 10 ** 20, 1231 * 1237])
def test_composites_and_non_positive(n):
    assert miller_rabin(n, 20) is Verdict.COMPOSITE

def test_small_table_prime_short_circuits():
    rng = CountingRng()
    assert miller_rabin(2, 20, rng=rng) is Verdict.PROBABLY_PRIME
    assert miller_rabin(1229, 20, rng=rng) is Verdict.PROBABLY_PRIME
    assert rng.calls == 0

def test_prime_draws_one_base_per_round():
    rng = CountingRng(3)
    assert miller_rabin(2 ** 61 - 1, 13, rng=rng) is Verdict.PROBABLY_PRIME
    assert rng.calls == 13

def test_composite_stops_at_first_failing_round():
    rng = CountingRng(3)
    assert miller_rabin(1231 * 1237, 50, rng=rng) is Verdict.COMPOSITE
    assert rng.calls < 50

def test_rounds_must_be_positive():
    with pytest.raises(ValueError):
        miller_rabin(7919, 0)

def test_cancel_checked_before_each_round():
    ev = threading.Event()
    ev.set()
    rng = CountingRng()
    assert miller_rabin(2 ** 61 - 1, 20, rng=rng, cancel=ev) is Verdict.CANCELLED
    assert rng.calls == 0

def test_cancel_mid_test():
    class FlipAfter:
        def __init__(self, n):
            self.n = n
        def is_set(self):
            self.n -= 1
            return self.n < 0
    rng = CountingRng()
    assert miller_rabin(2 ** 61 - 1, 20, rng=rng, cancel=FlipAfter(5)) is Verdict.CANCELLED
    assert rng.calls == 5

def test_is_probable_prime_wrapper():
    assert is_probable_prime(7919)
    assert not is_probable_prime(561)
