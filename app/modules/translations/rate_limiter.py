"""Per-actor fixed-window rate limiter.

Counting is delegated to ``limits`` (the library behind slowapi) with an
in-memory storage. Windows are aligned to the clock, not to the actor's first
request, so a burst that straddles a boundary can be admitted up to twice the
quota. That approximation is accepted in exchange for O(1) state per actor.

Counters expire with their window and live in process memory only.
"""

import time
from typing import Callable, Optional

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter as FixedWindowStrategy

from infrastructure.logging import get_module_logger
from modules.translations.locks import KeyedLockRegistry

logger = get_module_logger()


class FixedWindowRateLimiter:
    """Admission control keyed by actor.

    Args:
        quota: Admissions allowed per actor per window.
        window_seconds: Window duration in whole seconds.
        clock: Time source used to pick the current window, injectable for tests.
    """

    def __init__(
        self,
        quota: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        if quota < 1:
            raise ValueError("quota must be >= 1")
        if window_seconds < 1 or int(window_seconds) != window_seconds:
            raise ValueError("window_seconds must be a whole number >= 1")
        self.quota = quota
        self.window_seconds = int(window_seconds)
        self._clock = clock
        self._item = RateLimitItemPerSecond(quota, self.window_seconds)
        self._storage = MemoryStorage()
        self._strategy = FixedWindowStrategy(self._storage)
        self._locks = KeyedLockRegistry()

    def _window(self) -> str:
        return str(int(self._clock() // self.window_seconds))

    def try_admit(self, actor: str, weight: int = 1) -> bool:
        """Admit ``weight`` units for ``actor`` if the quota allows it.

        A refused request leaves the counter untouched.
        """
        if weight < 1:
            raise ValueError("weight must be >= 1")
        with self._locks.hold(actor):
            window = self._window()
            if not self._strategy.test(self._item, actor, window, cost=weight):
                logger.info(
                    "rate_limit_refused",
                    actor=actor,
                    remaining=self._remaining(actor, window),
                    quota=self.quota,
                    weight=weight,
                )
                return False
            return self._strategy.hit(self._item, actor, window, cost=weight)

    def _remaining(self, actor: str, window: str) -> int:
        return self._strategy.get_window_stats(self._item, actor, window).remaining

    def remaining(self, actor: str) -> int:
        with self._locks.hold(actor):
            return self._remaining(actor, self._window())

    def reset(self, actor: Optional[str] = None) -> None:
        """Clear the counter of ``actor``, or of every actor."""
        if actor is None:
            self._storage.reset()
            return
        with self._locks.hold(actor):
            self._storage.clear(self._item.key_for(actor, self._window()))
