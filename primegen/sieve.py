# primegen/sieve.py
from __future__ import annotations

from .small_primes import ODD_SMALL_PRIMES

def passes_sieve(n: int) -> bool:
    """
    Trial division by the small-prime table. False means a small factor was
    found; True only means none was, it says nothing about primality.
    A table prime itself always passes.
    """
    if n % 2 == 0 and n != 2:
        return False
    for p in ODD_SMALL_PRIMES:
        if n % p == 0 and n != p:
            return False
    return True
