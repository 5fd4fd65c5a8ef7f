# primegen/pipeline.py
# Certification pipeline for one candidate:
# - sieve by the first 201 primes
# - Miller-Rabin with k random bases
# - optional deterministic oracle (sympy / PARI-GP)

from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Optional

from .config import MR_ROUNDS, ORACLE, log
from .errors import OracleUnavailable
from .miller_rabin import miller_rabin
from .oracle import Oracle, make_oracle
from .sieve import passes_sieve
from .verdict import Verdict

@dataclass
class Pipeline:
    """
    Stages are optional: ``use_sieve=False`` skips trial division and
    ``oracle=None`` accepts on Miller-Rabin alone. A candidate is accepted only
    with Verdict.CERTIFIED_PRIME.
    """
    rounds: int = MR_ROUNDS
    oracle: Optional[Oracle] = None
    use_sieve: bool = True
    rng: Optional[random.Random] = None

    def __post_init__(self):
        if self.rounds < 1:
            raise ValueError("rounds must be >= 1")

    def sieve(self, n: int) -> bool:
        return passes_sieve(n) if self.use_sieve else True

    def certify(self, n: int, cancel=None) -> Verdict:
        """Miller-Rabin, then the oracle. Does not sieve."""
        v = miller_rabin(n, self.rounds, rng=self.rng, cancel=cancel)
        if v is not Verdict.PROBABLY_PRIME:
            return v
        if self.oracle is None:
            return Verdict.CERTIFIED_PRIME
        if cancel is not None and cancel.is_set():
            return Verdict.CANCELLED
        try:
            ok = self.oracle.is_prime(n)
        except OracleUnavailable as e:
            log("oracle_inconclusive", self.oracle.name, "err", str(e))
            return Verdict.INCONCLUSIVE
        return Verdict.CERTIFIED_PRIME if ok else Verdict.COMPOSITE

    def check(self, n: int, cancel=None) -> Verdict:
        """Full pipeline: sieve + certify."""
        if not self.sieve(n):
            return Verdict.COMPOSITE
        return self.certify(n, cancel=cancel)

    def describe(self) -> str:
        parts = []
        if self.use_sieve:
            parts.append("sieve")
        parts.append(f"MR(k={self.rounds})")
        if self.oracle is not None:
            parts.append(f"oracle({self.oracle.name})")
        return " -> ".join(parts)

def default_pipeline(rounds: Optional[int] = None, oracle: Optional[str] = None) -> Pipeline:
    """Pipeline from PRIMEGEN_* settings, with per-call overrides."""
    return Pipeline(rounds=rounds if rounds is not None else MR_ROUNDS,
                    oracle=make_oracle(oracle if oracle is not None else ORACLE))
