"""
Reliability Utilities.

Circuit breaker guarding calls to external collaborators.
"""

import time
from typing import Callable, Any


class CircuitOpenError(Exception):
    pass


class CircuitBreaker:
    """
    Simple Circuit Breaker implementation.
    If 'failure_threshold' consecutive failures occur, the circuit opens
    and rejects calls for 'reset_timeout' seconds.
    """
    def __init__(self, failure_threshold: int = 5, reset_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.failures = 0
        self.last_failure_time = 0
        self.state = "CLOSED"  # CLOSED, OPEN, HALF_OPEN

    async def call(self, func: Callable, *args, **kwargs) -> Any:
        if self.state == "OPEN":
            if time.time() - self.last_failure_time > self.reset_timeout:
                self.state = "HALF_OPEN"
            else:
                raise CircuitOpenError("Circuit is OPEN")

        try:
            result = await func(*args, **kwargs)
        except Exception:
            self.record_failure()
            raise
        if self.state == "HALF_OPEN" or self.failures:
            self.reset_state()
        return result

    def record_failure(self):
        self.failures += 1
        self.last_failure_time = time.time()
        if self.state == "HALF_OPEN" or self.failures >= self.failure_threshold:
            self.state = "OPEN"

    def reset_state(self):
        self.failures = 0
        self.state = "CLOSED"
