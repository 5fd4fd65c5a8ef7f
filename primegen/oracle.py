# primegen/oracle.py
# Deterministic certifiers, used as a trusted second stage after Miller-Rabin.
# - SympyOracle: in-process sympy.isprime
# - GpOracle: PARI/GP `gp` binary, one throwaway script per call
# Every failure is raised as OracleUnavailable; callers treat it as inconclusive.

from __future__ import annotations
import os, re, subprocess, tempfile, time
from dataclasses import dataclass
from typing import Optional

import sympy

from .config import GP_BIN, ORACLE_TIMEOUT, log
from .errors import OracleUnavailable

_VERDICT_RE = re.compile(r"^\s*([01])\s*$")

@dataclass
class OracleRun:
    returncode: int
    stdout: str
    stderr: str
    elapsed_ms: int

def _run(cmd: list[str], timeout: float) -> OracleRun:
    t0 = time.time()
    p = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                       text=True, timeout=timeout)
    ms = int((time.time() - t0) * 1000)
    return OracleRun(p.returncode, p.stdout or "", p.stderr or "", ms)

def _parse_verdict(text: str) -> bool:
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    if not lines:
        raise OracleUnavailable("oracle produced no output")
    m = _VERDICT_RE.match(lines[-1])
    if not m:
        raise OracleUnavailable(f"unreadable oracle output: {lines[-1][:80]!r}")
    return m.group(1) == "1"


class Oracle:
    """Capability interface: is_prime(n) -> bool, or raise OracleUnavailable."""
    name = "oracle"

    def available(self) -> bool:
        return True

    def is_prime(self, n: int) -> bool:
        raise NotImplementedError


class SympyOracle(Oracle):
    name = "sympy"

    def is_prime(self, n: int) -> bool:
        try:
            return bool(sympy.isprime(n))
        except Exception as e:
            raise OracleUnavailable(f"sympy.isprime failed: {e.__class__.__name__}") from e


class GpOracle(Oracle):
    name = "gp"

    def __init__(self, binary: Optional[str] = GP_BIN, timeout_s: float = ORACLE_TIMEOUT):
        self.binary = binary
        self.timeout_s = timeout_s

    def available(self) -> bool:
        return bool(self.binary)

    def is_prime(self, n: int) -> bool:
        if not self.binary:
            raise OracleUnavailable("gp binary not found")
        fd, path = tempfile.mkstemp(prefix="primegen_", suffix=".gp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(f"print(isprime({int(n)}));\nquit;\n")
            try:
                run = _run([self.binary, "-q", "-f", path], self.timeout_s)
            except subprocess.TimeoutExpired as e:
                raise OracleUnavailable(f"gp timed out after {self.timeout_s}s") from e
            except OSError as e:
                raise OracleUnavailable(f"gp could not start: {e}") from e
            if run.returncode != 0:
                raise OracleUnavailable(f"gp exited with {run.returncode}: {run.stderr.strip()[:200]}")
            log("oracle", self.name, "ms", run.elapsed_ms)
            return _parse_verdict(run.stdout)
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass


def make_oracle(name: Optional[str]) -> Optional[Oracle]:
    """Oracle for a config name: none | sympy | gp."""
    key = (name or "none").strip().lower()
    if key in ("", "none", "off"):
        return None
    if key == "sympy":
        return SympyOracle()
    if key == "gp":
        return GpOracle()
    raise ValueError(f"unknown oracle {name!r} (expected none, sympy or gp)")
