# primegen/generate.py
# Public entry: generate_prime(kind, digits) -> PrimeResult

from __future__ import annotations
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .config import BATCH_FACTOR, PARALLEL_THRESHOLD, WORKERS, log
from .errors import InvalidSize, SearchExhausted, UnsupportedKind
from .pipeline import Pipeline, default_pipeline
from .sampler import digit_bounds, digits_to_bits, has_digits
from .search import SearchOutcome, parallel_search, sequential_search

class PrimeKind(Enum):
    RANDOM = "random"
    SAFE = "safe"
    MERSENNE = "mersenne"

    @classmethod
    def parse(cls, kind: Union["PrimeKind", str]) -> "PrimeKind":
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).strip().lower())
        except ValueError:
            raise UnsupportedKind(f"unknown prime kind {kind!r}") from None

@dataclass
class PrimeResult:
    value: int
    kind: PrimeKind
    digits: int
    bits: int
    candidates: int
    rounds: int
    q: Optional[int] = None  # (p-1)/2 for safe primes
    steps: List[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        d = {"kind": self.kind.value, "digits": self.digits, "bits": self.bits,
             "prime": str(self.value), "candidates": self.candidates, "rounds": self.rounds}
        if self.q is not None:
            d["q"] = str(self.q)
        return d

def validate_request(kind: Union[PrimeKind, str], digits: int) -> PrimeKind:
    """Configuration checks; nothing is sampled before these pass."""
    k = PrimeKind.parse(kind)
    if k is PrimeKind.MERSENNE:
        raise UnsupportedKind("Mersenne prime generation is not implemented")
    digit_bounds(digits)
    if k is PrimeKind.SAFE and digits < 2:
        raise InvalidSize("safe primes need at least 2 digits")
    return k

def find_prime(digits: int, pipeline: Pipeline,
               parallel_threshold: int = PARALLEL_THRESHOLD,
               workers: Optional[int] = None,
               batch_factor: int = BATCH_FACTOR,
               rng: Optional[random.Random] = None,
               max_candidates: Optional[int] = None) -> SearchOutcome:
    """Sequential below ``parallel_threshold`` digits, parallel from there up."""
    if digits < parallel_threshold:
        return sequential_search(digits, pipeline, rng=rng, max_candidates=max_candidates)
    max_rounds = None
    if max_candidates is not None:
        per_round = max(1, (workers or WORKERS) * max(1, batch_factor))
        max_rounds = max(1, -(-max_candidates // per_round))
    return parallel_search(digits, pipeline, workers=workers, batch_factor=batch_factor,
                           rng=rng, max_rounds=max_rounds)

def safe_prime(digits: int, pipeline: Pipeline,
               max_candidates: Optional[int] = None, **search) -> PrimeResult:
    """
    p = 2q + 1 with q a certified (digits-1)-digit prime. p must land on
    exactly ``digits`` digits and pass the full pipeline, otherwise q is
    thrown away too and the derivation starts over.
    """
    if digits < 2:
        raise InvalidSize("safe primes need at least 2 digits")
    candidates = rounds = attempts = 0
    steps: List[str] = []
    while True:
        remaining = None
        if max_candidates is not None:
            remaining = max_candidates - candidates
            if remaining <= 0:
                raise SearchExhausted(f"no {digits}-digit safe prime in {max_candidates} candidates")
        attempts += 1
        q_out = find_prime(digits - 1, pipeline, max_candidates=remaining, **search)
        candidates += q_out.candidates
        rounds += q_out.rounds
        q = q_out.value
        p = 2 * q + 1
        if not has_digits(p, digits):
            log("safe_reject", "attempt", attempts, "reason", "digits")
            continue
        v = pipeline.check(p)
        if not v.accepted:
            log("safe_reject", "attempt", attempts, "reason", v.value)
            continue
        steps.extend(q_out.steps)
        steps.append(f"safe: p = 2q + 1 accepted after {attempts} attempts ({pipeline.describe()})")
        return PrimeResult(value=p, kind=PrimeKind.SAFE, digits=digits, bits=digits_to_bits(digits),
                           candidates=candidates, rounds=rounds, q=q, steps=steps)

def generate_prime(kind: Union[PrimeKind, str], digits: int, *,
                   pipeline: Optional[Pipeline] = None,
                   parallel_threshold: Optional[int] = None,
                   workers: Optional[int] = None,
                   batch_factor: Optional[int] = None,
                   rng: Optional[random.Random] = None,
                   max_candidates: Optional[int] = None) -> PrimeResult:
    """
    Certified prime with exactly ``digits`` decimal digits.

    kind: PrimeKind or its name ("random", "safe"; "mersenne" is rejected).
    Raises InvalidSize / UnsupportedKind before any sampling. Loops until it
    succeeds unless ``max_candidates`` bounds it (SearchExhausted).
    """
    k = validate_request(kind, digits)
    pipeline = pipeline or default_pipeline()
    search = dict(parallel_threshold=PARALLEL_THRESHOLD if parallel_threshold is None else parallel_threshold,
                  workers=workers,
                  batch_factor=BATCH_FACTOR if batch_factor is None else batch_factor,
                  rng=rng)

    if k is PrimeKind.SAFE:
        return safe_prime(digits, pipeline, max_candidates=max_candidates, **search)

    out = find_prime(digits, pipeline, max_candidates=max_candidates, **search)
    out.steps.append(f"certified by {pipeline.describe()}")
    return PrimeResult(value=out.value, kind=k, digits=digits, bits=digits_to_bits(digits),
                       candidates=out.candidates, rounds=out.rounds, steps=out.steps)
