from __future__ import annotations
from enum import Enum


class Verdict(Enum):
    COMPOSITE = "composite"            # proven, reject at once
    PROBABLY_PRIME = "probably_prime"  # survived Miller-Rabin
    CERTIFIED_PRIME = "certified"      # survived every configured stage
    INCONCLUSIVE = "inconclusive"      # oracle failed; discard, keep searching
    CANCELLED = "cancelled"            # a parallel peer already won

    @property
    def accepted(self) -> bool:
        return self is Verdict.CERTIFIED_PRIME
