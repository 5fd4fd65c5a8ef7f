# primegen/sampler.py
# Uniform odd candidates with an exact decimal-digit count.

from __future__ import annotations
import math, random
from typing import Optional

from .errors import InvalidSize

# OS entropy; no shared PRNG state between threads
_SYSTEM_RNG = random.SystemRandom()

def digit_bounds(digits: int) -> tuple[int, int]:
    """Half-open range [10^(d-1), 10^d) of integers with exactly ``digits`` digits."""
    if not isinstance(digits, int) or isinstance(digits, bool) or digits < 1:
        raise InvalidSize(f"digit count must be a positive integer, got {digits!r}")
    return 10 ** (digits - 1), 10 ** digits

def has_digits(n: int, digits: int) -> bool:
    lo, hi = digit_bounds(digits)
    return lo <= n < hi

def digits_to_bits(digits: int) -> int:
    """Bits needed to hold any ``digits``-digit number: ceil(d * log2(10))."""
    return math.ceil(digits * math.log2(10))

def random_odd_candidate(digits: int, rng: Optional[random.Random] = None) -> int:
    """
    Draw uniformly from [10^(d-1), 10^d); even draws are bumped to the next odd.
    A bump that lands on 10^d is thrown away and redrawn, never wrapped.
    """
    lo, hi = digit_bounds(digits)
    rng = rng or _SYSTEM_RNG
    while True:
        n = rng.randrange(lo, hi)
        if n % 2 == 0:
            n += 1
            if n >= hi:
                continue
        return n
