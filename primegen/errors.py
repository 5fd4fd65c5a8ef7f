from __future__ import annotations


class PrimeGenError(Exception):
    """Base class for every error raised by primegen."""


class InvalidSize(PrimeGenError, ValueError):
    """Digit count is not a positive integer, or too small for the requested kind."""


class UnsupportedKind(PrimeGenError, NotImplementedError):
    """Structural kind has no generator (Mersenne) or is unknown."""


class OracleUnavailable(PrimeGenError):
    """Deterministic certifier could not be run or its answer could not be read."""


class SearchExhausted(PrimeGenError):
    """A caller-supplied candidate bound was reached without a certified prime."""
