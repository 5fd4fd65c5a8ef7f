# primegen/search.py
# Search loops that turn the certification pipeline into a prime:
# - sequential: explicit Sampling -> Sieving -> Certifying -> Accepted machine
# - parallel: rounds of independent candidates on a thread pool, first
#   certified candidate wins and cancels its peers

from __future__ import annotations
import random, threading
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .config import BATCH_FACTOR, WORKERS, log
from .errors import SearchExhausted
from .pipeline import Pipeline
from .sampler import random_odd_candidate
from .verdict import Verdict

# ---------- State machine ----------

class SearchState(Enum):
    SAMPLING = "sampling"
    SIEVING = "sieving"
    CERTIFYING = "certifying"
    ACCEPTED = "accepted"

TRANSITIONS = {
    SearchState.SAMPLING: frozenset({SearchState.SIEVING}),
    SearchState.SIEVING: frozenset({SearchState.SAMPLING, SearchState.CERTIFYING}),
    SearchState.CERTIFYING: frozenset({SearchState.SAMPLING, SearchState.ACCEPTED}),
    SearchState.ACCEPTED: frozenset(),
}

def next_state(state: SearchState, outcome=None) -> SearchState:
    """
    SIEVING takes the sieve result (bool), CERTIFYING takes a Verdict.
    Anything but CERTIFIED_PRIME (composite, inconclusive, cancelled) goes
    back to SAMPLING.
    """
    if state is SearchState.SAMPLING:
        return SearchState.SIEVING
    if state is SearchState.SIEVING:
        return SearchState.CERTIFYING if outcome else SearchState.SAMPLING
    if state is SearchState.CERTIFYING:
        if not isinstance(outcome, Verdict):
            raise TypeError("CERTIFYING needs a Verdict")
        return SearchState.ACCEPTED if outcome.accepted else SearchState.SAMPLING
    raise ValueError("ACCEPTED is terminal")

# ---------- Results ----------

@dataclass
class SearchOutcome:
    value: int
    candidates: int = 0
    sieve_rejects: int = 0
    composite: int = 0
    inconclusive: int = 0
    cancelled: int = 0
    rounds: int = 0
    steps: List[str] = field(default_factory=list)

    def record(self, v: Verdict) -> None:
        if v is Verdict.COMPOSITE:
            self.composite += 1
        elif v is Verdict.INCONCLUSIVE:
            self.inconclusive += 1
        elif v is Verdict.CANCELLED:
            self.cancelled += 1

# ---------- Sequential ----------

def sequential_search(digits: int, pipeline: Pipeline,
                      rng: Optional[random.Random] = None,
                      max_candidates: Optional[int] = None,
                      on_transition: Optional[Callable[[SearchState, SearchState, int], None]] = None
                      ) -> SearchOutcome:
    """Single-threaded loop; unbounded unless ``max_candidates`` is given."""
    rng = rng or pipeline.rng
    out = SearchOutcome(value=0)
    state = SearchState.SAMPLING
    n = 0
    while state is not SearchState.ACCEPTED:
        if state is SearchState.SAMPLING:
            if max_candidates is not None and out.candidates >= max_candidates:
                raise SearchExhausted(f"no {digits}-digit prime in {max_candidates} candidates")
            n = random_odd_candidate(digits, rng)
            out.candidates += 1
            new = next_state(state)
        elif state is SearchState.SIEVING:
            ok = pipeline.sieve(n)
            if not ok:
                out.sieve_rejects += 1
            new = next_state(state, ok)
        else:
            v = pipeline.certify(n)
            out.record(v)
            new = next_state(state, v)
        if on_transition is not None:
            on_transition(state, new, n)
        state = new

    out.value = n
    out.steps.append(f"sequential: {digits} digits, {out.candidates} candidates "
                     f"({out.sieve_rejects} sieved, {out.composite} composite, "
                     f"{out.inconclusive} inconclusive)")
    log("found", "digits", digits, "candidates", out.candidates)
    return out

# ---------- Parallel ----------

class RoundSignal:
    """
    The "found" flag of one parallel round. ``commit`` is a test-and-set under
    a lock, so exactly one candidate per round can win. ``reset`` is only
    called by the coordinator once every task of the round has finished.
    """

    def __init__(self):
        self._found = threading.Event()
        self._lock = threading.Lock()
        self.winner: Optional[int] = None

    def is_set(self) -> bool:
        return self._found.is_set()

    def commit(self, n: int) -> bool:
        with self._lock:
            if self._found.is_set():
                return False
            self.winner = n
            self._found.set()
            return True

    def reset(self) -> None:
        with self._lock:
            self.winner = None
            self._found.clear()

def _certify_task(pipeline: Pipeline, n: int, signal: RoundSignal,
                  on_commit: Optional[Callable[[int], None]]) -> Verdict:
    if signal.is_set():
        return Verdict.CANCELLED
    v = pipeline.certify(n, cancel=signal)
    if v.accepted:
        if not signal.commit(n):
            return Verdict.CANCELLED
        if on_commit is not None:
            on_commit(n)
    return v

def parallel_search(digits: int, pipeline: Pipeline,
                    workers: Optional[int] = None,
                    batch_factor: int = BATCH_FACTOR,
                    rng: Optional[random.Random] = None,
                    max_rounds: Optional[int] = None,
                    on_commit: Optional[Callable[[int], None]] = None) -> SearchOutcome:
    """
    Round-based race. Each round samples ``workers * batch_factor`` candidates,
    sieves them and certifies the survivors concurrently. The first candidate
    to reach CERTIFIED_PRIME commits; the rest see the flag before their next
    Miller-Rabin round and give up. The flag is cleared only after the whole
    round has drained.

    Workers are threads. CPython holds the GIL inside big-int ``pow``, so this
    is no faster than sequential_search for CPU time; it bounds wall-clock
    latency per round and keeps the single-winner cancellation semantics.
    """
    workers = max(1, workers or WORKERS)
    batch = max(1, workers * max(1, batch_factor))
    rng = rng or pipeline.rng
    signal = RoundSignal()
    out = SearchOutcome(value=0)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="primegen") as ex:
        while True:
            if max_rounds is not None and out.rounds >= max_rounds:
                raise SearchExhausted(f"no {digits}-digit prime in {max_rounds} rounds")
            out.rounds += 1
            signal.reset()

            candidates = list(ex.map(lambda _: random_odd_candidate(digits, rng), range(batch)))
            out.candidates += len(candidates)
            passed = list(ex.map(pipeline.sieve, candidates))
            survivors = [c for c, ok in zip(candidates, passed) if ok]
            out.sieve_rejects += len(candidates) - len(survivors)

            futs = [ex.submit(_certify_task, pipeline, c, signal, on_commit) for c in survivors]
            wait(futs)
            for f in futs:
                out.record(f.result())

            log("round", out.rounds, "sampled", len(candidates),
                "survivors", len(survivors), "found", signal.winner is not None)
            if signal.winner is not None:
                out.value = signal.winner
                out.steps.append(f"parallel: {digits} digits, {out.rounds} rounds x {batch} candidates "
                                 f"on {workers} threads ({out.cancelled} cancelled)")
                return out
