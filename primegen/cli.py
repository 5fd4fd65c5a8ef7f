# primegen/cli.py
# usage: primegen [--kind random|safe] [--rounds K] [--oracle none|sympy|gp] DIGITS...
# One JSON object per line on stdout.

from __future__ import annotations
import argparse, json, sys, time

from .config import BATCH_FACTOR, MR_ROUNDS, ORACLE, PARALLEL_THRESHOLD
from .errors import PrimeGenError
from .generate import generate_prime
from .pipeline import default_pipeline

def process(kind: str, digits: int, args) -> int:
    pipeline = default_pipeline(rounds=args.rounds, oracle=args.oracle)
    t0 = time.perf_counter()
    try:
        res = generate_prime(kind, digits, pipeline=pipeline,
                             parallel_threshold=args.parallel_threshold,
                             workers=args.workers, batch_factor=args.batch_factor)
    except PrimeGenError as e:
        print(json.dumps({"kind": kind, "digits": digits, "error": e.__class__.__name__, "msg": str(e)}))
        return 2
    ms = (time.perf_counter() - t0) * 1000
    out = res.as_dict()
    out["ms"] = round(ms, 3)
    if args.steps:
        out["steps"] = res.steps
    print(json.dumps(out), flush=True)
    return 0

def main(argv=None):
    ap = argparse.ArgumentParser(prog="primegen", description="Generate certified random or safe primes.")
    ap.add_argument("--kind", default=None, help="random | safe | mersenne (default: random)")
    ap.add_argument("--rounds", type=int, default=MR_ROUNDS, help="Miller-Rabin rounds")
    ap.add_argument("--oracle", default=ORACLE, help="deterministic second stage: none | sympy | gp")
    ap.add_argument("--workers", type=int, default=None, help="threads for the parallel search")
    ap.add_argument("--batch-factor", type=int, default=BATCH_FACTOR, help="candidates per thread per round")
    ap.add_argument("--parallel-threshold", type=int, default=PARALLEL_THRESHOLD,
                    help="digit count from which the parallel search is used")
    ap.add_argument("--steps", action="store_true", help="include the search trace")
    ap.add_argument("DIGITS", nargs="*", type=int, help="decimal digit counts")
    args = ap.parse_args(argv)

    if args.rounds < 1:
        ap.error("--rounds must be >= 1")
    try:
        default_pipeline(rounds=args.rounds, oracle=args.oracle)
    except ValueError as e:
        ap.error(str(e))

    if args.DIGITS:
        jobs = [(args.kind or "random", d) for d in args.DIGITS]
    elif args.kind:
        jobs = [(args.kind, 100)]
    else:
        jobs = [("random", 100), ("safe", 100)]

    rc = 0
    for kind, d in jobs:
        rc |= process(kind, d, args)
    raise SystemExit(rc)

if __name__ == "__main__":
    main()
