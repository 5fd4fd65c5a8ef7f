import threading

import pytest
import sympy

from primegen.errors import SearchExhausted
from primegen.pipeline import Pipeline
from primegen.search import (TRANSITIONS, RoundSignal, SearchState, next_state,
                             parallel_search, sequential_search)
from primegen.verdict import Verdict
from stubs import AcceptAll, DownOracle, FlakyOracle, RejectAll, RejectFirst

S = SearchState

# ---------- state machine ----------

def test_transition_table():
    assert next_state(S.SAMPLING) is S.SIEVING
    assert next_state(S.SIEVING, False) is S.SAMPLING
    assert next_state(S.SIEVING, True) is S.CERTIFYING
    assert next_state(S.CERTIFYING, Verdict.CERTIFIED_PRIME) is S.ACCEPTED
    for v in (Verdict.COMPOSITE, Verdict.INCONCLUSIVE, Verdict.CANCELLED, Verdict.PROBABLY_PRIME):
        assert next_state(S.CERTIFYING, v) is S.SAMPLING

def test_accepted_is_terminal():
    assert TRANSITIONS[S.ACCEPTED] == frozenset()
    with pytest.raises(ValueError):
        next_state(S.ACCEPTED)

def test_certifying_needs_verdict():
    with pytest.raises(TypeError):
        next_state(S.CERTIFYING, True)

# ---------- sequential ----------

def test_sequential_ten_digits(seeded):
    seen = []
    out = sequential_search(10, Pipeline(rounds=20),
                            rng=seeded, on_transition=lambda a, b, n: seen.append((a, b, n)))
    assert 10 ** 9 <= out.value < 10 ** 10
    assert out.value % 2 == 1
    assert sympy.isprime(out.value)
    assert out.rounds == 0
    assert seen[0][0] is S.SAMPLING
    assert seen[-1][1] is S.ACCEPTED and seen[-1][2] == out.value
    for a, b, _ in seen:
        assert b in TRANSITIONS[a]
    assert sum(1 for a, _, _ in seen if a is S.SAMPLING) == out.candidates

def test_sequential_discards_inconclusive_and_continues():
    o = FlakyOracle(failures=3)
    out = sequential_search(12, Pipeline(oracle=o))
    assert sympy.isprime(out.value)
    assert out.inconclusive == 3
    assert o.calls == 4

def test_sequential_bound_raises():
    with pytest.raises(SearchExhausted):
        sequential_search(12, Pipeline(oracle=DownOracle()), max_candidates=200)

# ---------- round signal ----------

def test_signal_single_winner_under_contention():
    sig = RoundSignal()
    start = threading.Barrier(32)
    wins = []

    def racer(i):
        start.wait()
        if sig.commit(i):
            wins.append(i)

    threads = [threading.Thread(target=racer, args=(i,)) for i in range(32)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(wins) == 1
    assert sig.winner == wins[0] and sig.is_set()

    sig.reset()
    assert not sig.is_set() and sig.winner is None
    assert sig.commit(99)

# ---------- parallel ----------

def test_parallel_finds_prime():
    out = parallel_search(20, Pipeline(rounds=20), workers=4, batch_factor=2)
    assert 10 ** 19 <= out.value < 10 ** 20
    assert sympy.isprime(out.value)
    assert out.rounds >= 1
    assert out.candidates == out.rounds * 8

def test_parallel_with_oracle():
    out = parallel_search(25, Pipeline(oracle=FlakyOracle(failures=2)), workers=3)
    assert sympy.isprime(out.value)

def test_at_most_one_commit_per_round():
    commits = []
    out = parallel_search(6, AcceptAll(), workers=4, batch_factor=4, on_commit=commits.append)
    assert commits == [out.value]
    assert out.rounds == 1
    assert out.cancelled == 15

def test_signal_reset_between_rounds():
    commits = []
    pipe = RejectFirst(count=8)
    out = parallel_search(6, pipe, workers=2, batch_factor=4, on_commit=commits.append)
    assert out.rounds == 2
    assert out.composite == 8
    assert commits == [out.value]

def test_parallel_bound_raises():
    with pytest.raises(SearchExhausted):
        parallel_search(6, RejectAll(), workers=2, max_rounds=3)

def test_parallel_certifies_on_pool_threads():
    names = []
    parallel_search(6, AcceptAll(), workers=2,
                    on_commit=lambda n: names.append(threading.current_thread().name))
    assert len(names) == 1
    assert names[0].startswith("primegen")
