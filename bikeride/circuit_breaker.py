from pybreaker import CircuitBreaker

from .config import BREAKER_FAIL_MAX, BREAKER_RESET_TIMEOUT

# Shared breaker for every write that goes through the record store
store_circuit_breaker = CircuitBreaker(
    fail_max=BREAKER_FAIL_MAX,
    reset_timeout=BREAKER_RESET_TIMEOUT,
    name="record_store_breaker",
)
