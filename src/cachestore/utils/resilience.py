from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CircuitBreakerConfig:
    failure_threshold: int = 5
    reset_timeout_seconds: float = 30.0


class CircuitState:
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(RuntimeError):
    """Raised by CircuitBreaker.run while the breaker refuses calls."""


class CircuitBreaker:
    def __init__(
        self,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or CircuitBreakerConfig()
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
        self._state_lock = threading.Lock()

    @property
    def state(self) -> str:
        return self._state

    def _can_attempt(self) -> bool:
        if self._state == CircuitState.OPEN:
            if (self._clock() - self._opened_at) >= self._config.reset_timeout_seconds:
                self._state = CircuitState.HALF_OPEN
                return True
            return False
        return True

    def _on_success(self) -> None:
        self._state = CircuitState.CLOSED
        self._failures = 0

    def _on_failure(self) -> None:
        self._failures += 1
        # a failed trial call while half-open re-opens immediately
        if self._state == CircuitState.HALF_OPEN or self._failures >= self._config.failure_threshold:
            self._state = CircuitState.OPEN
            self._opened_at = self._clock()

    def run(self, fn: Callable[[], T]) -> T:
        # state transitions are locked; ``fn`` itself runs unlocked
        with self._state_lock:
            allowed = self._can_attempt()
        if not allowed:
            raise CircuitOpenError("circuit_open")
        try:
            result = fn()
        except Exception:
            with self._state_lock:
                self._on_failure()
            raise
        else:
            with self._state_lock:
                self._on_success()
            return result


def with_retries(
    fn: Callable[[], T],
    attempts: int = 3,
    backoff_ms: Optional[Iterable[int]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    backoff_seq: List[int] = list(backoff_ms or [10, 50, 100])
    last_exc: Exception | None = None
    for attempt in range(max(1, attempts)):
        try:
            return fn()
        except Exception as exc:  # noqa: BLE001 - broad for retry wrapper
            last_exc = exc
            if attempt >= attempts - 1:
                break
            delay_ms = backoff_seq[min(attempt, len(backoff_seq) - 1)]
            sleep(delay_ms / 1000.0)
    assert last_exc is not None
    raise last_exc
