from .errors import InvalidSize, OracleUnavailable, PrimeGenError, SearchExhausted, UnsupportedKind
from .generate import PrimeKind, PrimeResult, generate_prime, safe_prime
from .miller_rabin import is_probable_prime, miller_rabin
from .oracle import GpOracle, SympyOracle, make_oracle
from .pipeline import Pipeline, default_pipeline
from .sampler import digits_to_bits, random_odd_candidate
from .sieve import passes_sieve
from .verdict import Verdict
__all__ = [
    "generate_prime", "safe_prime", "PrimeKind", "PrimeResult",
    "Pipeline", "default_pipeline", "Verdict",
    "miller_rabin", "is_probable_prime", "passes_sieve", "random_odd_candidate", "digits_to_bits",
    "SympyOracle", "GpOracle", "make_oracle",
    "PrimeGenError", "InvalidSize", "UnsupportedKind", "OracleUnavailable", "SearchExhausted",
]
