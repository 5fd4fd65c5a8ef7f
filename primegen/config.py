# primegen/config.py
# Environment-driven defaults. Read once at import time.

from __future__ import annotations
import os, sys, shutil

def _env_flag(name: str, default: str = "0") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")

MR_ROUNDS          = int(os.getenv("PRIMEGEN_MR_ROUNDS", "20"))
PARALLEL_THRESHOLD = int(os.getenv("PRIMEGEN_PARALLEL_THRESHOLD", "100"))  # digits
BATCH_FACTOR       = int(os.getenv("PRIMEGEN_BATCH_FACTOR", "2"))
WORKERS            = int(os.getenv("PRIMEGEN_WORKERS", "0")) or (os.cpu_count() or 1)

ORACLE             = (os.getenv("PRIMEGEN_ORACLE", "none") or "none").strip().lower()  # none | sympy | gp
GP_BIN             = os.getenv("PRIMEGEN_GP_BIN") or shutil.which("gp")
ORACLE_TIMEOUT     = float(os.getenv("PRIMEGEN_ORACLE_TIMEOUT", "30"))

MAX_STR_DIGITS     = 100_000_000
MAX_HTTP_DIGITS    = int(os.getenv("PRIMEGEN_MAX_HTTP_DIGITS", "1000"))

VERBOSE            = _env_flag("PRIMEGEN_VERBOSE")

def log(*parts) -> None:
    """Progress line on stderr, space-separated key/value tokens."""
    if VERBOSE:
        print(*parts, file=sys.stderr, flush=True)

# candidates are rendered in base 10 for the gp oracle and for JSON output
if hasattr(sys, "set_int_max_str_digits"):
    sys.set_int_max_str_digits(MAX_STR_DIGITS)
