"""Circuit breaker for translator backends.

A backend that keeps timing out should not be hammered by every job of a
large batch. Each active backend gets one breaker:

- CLOSED: calls pass through; consecutive failures are counted
- OPEN: after ``failure_threshold`` failures calls are rejected without
  reaching the backend until ``timeout_seconds`` have elapsed
- HALF_OPEN: up to ``half_open_max_calls`` probe calls are let through; one
  success closes the circuit, one failure opens it again
"""

import threading
import time
from enum import Enum
from typing import Any, Callable, Optional

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenError(Exception):
    """A call was rejected because the circuit is not accepting traffic."""

    def __init__(self, name: str, message: str, retry_in_seconds: int = 0):
        super().__init__(message)
        self.name = name
        self.retry_in_seconds = retry_in_seconds


class CircuitBreaker:
    """Thread-safe breaker guarding one named backend.

    ``counts_as_failure`` decides which exceptions move the breaker towards
    OPEN. Exceptions it rejects (an unsupported locale pair, oversized
    content) are re-raised but treated as a healthy round trip.

    Args:
        name: Circuit name, usually ``translator.<backend>``.
        failure_threshold: Consecutive failures that open the circuit.
        timeout_seconds: Time spent OPEN before probing again.
        half_open_max_calls: Concurrent probes allowed while HALF_OPEN.
        counts_as_failure: Exception predicate; every exception counts by default.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        timeout_seconds: float = 60,
        half_open_max_calls: int = 3,
        counts_as_failure: Optional[Callable[[Exception], bool]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout_seconds = timeout_seconds
        self.half_open_max_calls = half_open_max_calls
        self.counts_as_failure = counts_as_failure or (lambda exc: True)
        self._clock = clock

        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._successes = 0
        self._opened_at: Optional[float] = None
        self._probes = 0

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    def call(self, func: Callable, *args, **kwargs) -> Any:
        """Run ``func(*args, **kwargs)`` if the circuit admits it.

        Raises:
            CircuitBreakerOpenError: the circuit rejected the call.
        """
        probing = self._admit()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            self._record(probing, e if self.counts_as_failure(e) else None)
            raise
        self._record(probing, None)
        return result

    def _admit(self) -> bool:
        """Reserve a slot for one call; returns True for a HALF_OPEN probe."""
        with self._lock:
            if self._state == CircuitState.OPEN:
                waited = self._clock() - self._opened_at
                if waited < self.timeout_seconds:
                    retry_in = int(self.timeout_seconds - waited)
                    logger.warning(
                        "circuit_breaker_open",
                        name=self.name,
                        failure_count=self._failures,
                        retry_in_seconds=retry_in,
                    )
                    raise CircuitBreakerOpenError(
                        self.name,
                        f"Circuit breaker '{self.name}' is OPEN. "
                        f"Retry in {retry_in} seconds.",
                        retry_in_seconds=retry_in,
                    )
                self._set_state(CircuitState.HALF_OPEN)

            if self._state == CircuitState.CLOSED:
                return False

            if self._probes >= self.half_open_max_calls:
                logger.debug(
                    "circuit_breaker_half_open_limit", name=self.name, calls=self._probes
                )
                raise CircuitBreakerOpenError(
                    self.name,
                    f"Circuit breaker '{self.name}' is HALF_OPEN "
                    f"(max concurrent calls reached).",
                )
            self._probes += 1
            return True

    def _record(self, probing: bool, failure: Optional[Exception]) -> None:
        with self._lock:
            if probing and self._probes:
                self._probes -= 1

            if failure is None:
                self._successes += 1
                if self._state == CircuitState.HALF_OPEN:
                    self._set_state(CircuitState.CLOSED)
                elif self._failures:
                    logger.debug(
                        "circuit_breaker_failure_count_reset",
                        name=self.name,
                        previous_failures=self._failures,
                    )
                    self._failures = 0
                return

            self._failures += 1
            if self._state == CircuitState.HALF_OPEN:
                logger.warning(
                    "circuit_breaker_recovery_failed", name=self.name, error=str(failure)
                )
                self._set_state(CircuitState.OPEN)
            elif self._state == CircuitState.CLOSED:
                logger.warning(
                    "circuit_breaker_failure",
                    name=self.name,
                    failure_count=self._failures,
                    threshold=self.failure_threshold,
                    error=str(failure),
                )
                if self._failures >= self.failure_threshold:
                    self._set_state(CircuitState.OPEN)

    def _set_state(self, state: CircuitState) -> None:
        # Caller holds self._lock
        previous, self._state = self._state, state
        self._probes = 0
        if state == CircuitState.OPEN:
            self._opened_at = self._clock()
            logger.error(
                "circuit_breaker_opened",
                name=self.name,
                failure_count=self._failures,
                timeout_seconds=self.timeout_seconds,
            )
        else:
            self._failures = 0
            self._successes = 0
            logger.info(
                "circuit_breaker_state_changed",
                name=self.name,
                previous=previous.value,
                state=state.value,
            )

    def get_stats(self) -> dict:
        with self._lock:
            return {
                "name": self.name,
                "state": self._state.value,
                "failure_count": self._failures,
                "success_count": self._successes,
                "half_open_calls": self._probes,
            }

    def reset(self):
        """Force the circuit CLOSED (admin and test helper)."""
        with self._lock:
            logger.info("circuit_breaker_manual_reset", name=self.name)
            self._set_state(CircuitState.CLOSED)
