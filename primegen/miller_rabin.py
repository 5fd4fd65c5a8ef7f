# primegen/miller_rabin.py
# Probabilistic certifier (Miller-Rabin, random bases).

from __future__ import annotations
import random
from typing import Optional

from .config import MR_ROUNDS
from .small_primes import is_small_prime
from .verdict import Verdict

_SYSTEM_RNG = random.SystemRandom()

def split_power_of_two(m: int) -> tuple[int, int]:
    """Return (d, s) with m = d * 2^s and d odd (m > 0)."""
    s = (m & -m).bit_length() - 1  # v2(m)
    return m >> s, s

def _witness_round(n: int, d: int, s: int, a: int) -> bool:
    """One strong round for base a. True if n survives."""
    x = pow(a, d, n)
    if x == 1 or x == n - 1:
        return True
    for _ in range(s - 1):
        x = (x * x) % n
        if x == n - 1:
            return True
    return False

def miller_rabin(n: int, rounds: int = MR_ROUNDS,
                 rng: Optional[random.Random] = None, cancel=None) -> Verdict:
    """
    Miller-Rabin with ``rounds`` independent random bases from [2, n-2].

    A composite survives one round with probability at most 1/4, so the chance
    of returning PROBABLY_PRIME for a composite is at most 4^-rounds
    (20 rounds: below 1e-12). Any failing round proves n composite and ends the
    test at once.

    ``cancel`` is anything with ``is_set()``; it is polled before every round
    and a set flag returns CANCELLED. A round already in progress finishes.
    """
    if rounds < 1:
        raise ValueError("rounds must be >= 1")
    if n <= 1:
        return Verdict.COMPOSITE
    if is_small_prime(n):
        return Verdict.PROBABLY_PRIME
    if n % 2 == 0:
        return Verdict.COMPOSITE

    rng = rng or _SYSTEM_RNG
    d, s = split_power_of_two(n - 1)
    for _ in range(rounds):
        if cancel is not None and cancel.is_set():
            return Verdict.CANCELLED
        a = rng.randrange(2, n - 1)
        if not _witness_round(n, d, s, a):
            return Verdict.COMPOSITE
    return Verdict.PROBABLY_PRIME

def is_probable_prime(n: int, rounds: int = MR_ROUNDS) -> bool:
    return miller_rabin(n, rounds) is Verdict.PROBABLY_PRIME
